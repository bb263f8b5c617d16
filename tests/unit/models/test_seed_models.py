"""Tests for ccseed.models and the exception hierarchy."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from ccseed.models import (
    DEFAULT_SEEDS,
    DEFAULT_TESTNET_SEEDS,
    AggregateResult,
    NetworkAddress,
    SeedEndpoint,
    SeederConfig,
    SeedOutcome,
)
from ccseed.utils.exceptions import (
    CCSeedError,
    ChannelStoppedError,
    ConfigurationError,
    HandshakeError,
    NetworkError,
    ProtocolError,
    ValidationError as CCSeedValidationError,
)

pytestmark = [pytest.mark.unit]


class TestSeedEndpoint:
    """Test SeedEndpoint parsing and validation."""

    def test_parse(self):
        """host:port strings parse into endpoints."""
        endpoint = SeedEndpoint.parse("seed.bitnodes.io:8333")

        assert endpoint.host == "seed.bitnodes.io"
        assert endpoint.port == 8333
        assert str(endpoint) == "seed.bitnodes.io:8333"

    def test_parse_bracketed_ipv6(self):
        """Bracketed IPv6 hosts lose their brackets."""
        assert SeedEndpoint.parse("[2001:db8::1]:8333").host == "2001:db8::1"

    @pytest.mark.parametrize("value", ["no-port", "host:", ":8333", "host:70000"])
    def test_parse_rejects_malformed(self, value):
        """Malformed strings raise ValueError."""
        with pytest.raises(ValueError):
            SeedEndpoint.parse(value)

    def test_frozen_and_hashable(self):
        """Endpoints are immutable values."""
        endpoint = SeedEndpoint(host="a", port=1)

        assert endpoint == SeedEndpoint(host="a", port=1)
        assert len({endpoint, SeedEndpoint(host="a", port=1)}) == 1
        with pytest.raises(ValidationError):
            endpoint.port = 2

    def test_default_seed_lists_parse(self):
        """Shipped seed lists are well formed."""
        assert len(SeederConfig().endpoints()) == len(DEFAULT_SEEDS)
        assert len(SeederConfig(testnet=True).endpoints()) == len(DEFAULT_TESTNET_SEEDS)


class TestSeederConfig:
    """Test SeederConfig validation."""

    def test_endpoints_skip_malformed(self, caplog):
        """Bad entries are skipped with a warning."""
        config = SeederConfig(seeds=["good.example.org:8333", "bad"])

        with caplog.at_level(logging.WARNING, logger="ccseed"):
            endpoints = config.endpoints()

        assert [str(e) for e in endpoints] == ["good.example.org:8333"]
        assert "Invalid seed format: bad" in caplog.text

    def test_relay_rejected(self):
        """Seeding never negotiates transaction relay."""
        with pytest.raises(ValidationError, match="relay must be disabled"):
            SeederConfig(relay=True)

    @pytest.mark.parametrize("timeout", [0.0, -5.0, 3601.0])
    def test_timeout_bounds(self, timeout):
        """The per-seed deadline must be positive and bounded."""
        with pytest.raises(ValidationError):
            SeederConfig(attempt_timeout=timeout)

    def test_timeout_may_be_disabled(self):
        """None disables the deadline."""
        assert SeederConfig(attempt_timeout=None).attempt_timeout is None


class TestNetworkAddress:
    """Test NetworkAddress identity."""

    def test_identity_ignores_metadata(self):
        """Equality and hashing use ip and port only."""
        a = NetworkAddress(ip="10.0.0.1", port=8333, services=1, timestamp=100)
        b = NetworkAddress(ip="10.0.0.1", port=8333)

        assert a == b
        assert hash(a) == hash(b)
        assert a != NetworkAddress(ip="10.0.0.1", port=8334)
        assert a != "10.0.0.1:8333"


class TestAggregateResult:
    """Test AggregateResult helpers."""

    def test_growth(self):
        """hosts_gained reports net registry growth."""
        result = AggregateResult(
            outcome=SeedOutcome.SUCCESS, reason="seeded", hosts_before=2, hosts_after=5
        )

        assert result.success is True
        assert result.hosts_gained == 3

    def test_failure(self):
        """Failures carry their reason."""
        result = AggregateResult(outcome=SeedOutcome.FAILURE, reason="no new hosts discovered")

        assert result.success is False
        assert result.hosts_gained == 0


class TestExceptions:
    """Test the exception hierarchy."""

    def test_details_in_str(self):
        """Details are appended to the message."""
        assert str(CCSeedError("failed", {"seed": "a:1"})) == "failed (Details: {'seed': 'a:1'})"
        assert str(CCSeedError("failed")) == "failed"

    def test_hierarchy(self):
        """Errors group under network, protocol and validation bases."""
        assert issubclass(ChannelStoppedError, NetworkError)
        assert issubclass(HandshakeError, ProtocolError)
        assert issubclass(ConfigurationError, CCSeedValidationError)
        assert str(ChannelStoppedError()) == "Channel stopped"
