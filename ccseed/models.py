"""Pydantic models for ccseed.

Provides validated data models for seed endpoints, discovered addresses,
seeding results and configuration.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Based on bitcoinstats.com/network/dns-servers
DEFAULT_SEEDS: list[str] = [
    "seed.bitnodes.io:8333",
    "seed.bitcoinstats.com:8333",
    "seed.bitcoin.sipa.be:8333",
    "dnsseed.bluematt.me:8333",
    "seed.bitcoin.jonasschnelli.ch:8333",
    "dnsseed.bitcoin.dashjr.org:8333",
]

DEFAULT_TESTNET_SEEDS: list[str] = [
    "testnet-seed.alexykot.me:18333",
    "testnet-seed.bitcoin.petertodd.org:18333",
    "testnet-seed.bluematt.me:18333",
    "testnet-seed.bitcoin.schildbach.de:18333",
]


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SeedOutcome(str, Enum):
    """Aggregate outcome of a seeding run."""

    SUCCESS = "success"
    FAILURE = "failure"


class SeedEndpoint(BaseModel):
    """Well-known host:port used only to bootstrap peer addresses."""

    host: str = Field(..., min_length=1, description="Seed host name or IP")
    port: int = Field(..., ge=1, le=65535, description="Seed port number")

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, value: str) -> SeedEndpoint:
        """Parse a ``host:port`` string.

        Raises:
            ValueError: If the string is not of the form ``host:port``.

        """
        if ":" not in value:
            msg = f"Invalid seed format: {value!r} (expected host:port)"
            raise ValueError(msg)
        host, port_str = value.strip().rsplit(":", 1)
        return cls(host=host.strip("[]"), port=int(port_str))

    def __str__(self) -> str:
        """String representation of the endpoint."""
        return f"{self.host}:{self.port}"


class NetworkAddress(BaseModel):
    """Peer address harvested from a seed."""

    ip: str = Field(..., description="Peer IP address")
    port: int = Field(..., ge=0, le=65535, description="Peer port number")
    services: int = Field(default=0, ge=0, description="Advertised service bits")
    timestamp: int = Field(default=0, ge=0, description="Last-seen time (unix)")

    def __str__(self) -> str:
        """String representation of the address."""
        return f"{self.ip}:{self.port}"

    def __hash__(self) -> int:
        """Hash on endpoint identity only."""
        return hash((self.ip, self.port))

    def __eq__(self, other) -> bool:
        """Equality on endpoint identity only."""
        if not isinstance(other, NetworkAddress):
            return False
        return self.ip == other.ip and self.port == other.port


class AggregateResult(BaseModel):
    """Single success/failure verdict for an entire seeding run."""

    outcome: SeedOutcome = Field(..., description="Run outcome")
    reason: str = Field(..., description="Human readable reason")
    hosts_before: int = Field(default=0, ge=0, description="Registry size at start")
    hosts_after: int = Field(default=0, ge=0, description="Registry size at end")

    @property
    def success(self) -> bool:
        """Whether the run succeeded."""
        return self.outcome == SeedOutcome.SUCCESS

    @property
    def hosts_gained(self) -> int:
        """Net registry growth over the run."""
        return max(0, self.hosts_after - self.hosts_before)


class SeederConfig(BaseModel):
    """Seeding configuration."""

    seeds: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEEDS),
        description="Mainnet seed endpoints (host:port)",
    )
    testnet_seeds: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TESTNET_SEEDS),
        description="Testnet seed endpoints (host:port)",
    )
    testnet: bool = Field(default=False, description="Use the testnet seed list")
    attempt_timeout: float | None = Field(
        default=30.0,
        gt=0.0,
        le=3600.0,
        description="Per-seed deadline in seconds (None disables)",
    )
    relay: bool = Field(
        default=False,
        description="Relay flag advertised during seeding handshakes",
    )

    @field_validator("relay")
    @classmethod
    def validate_relay(cls, v):
        """Seeding sessions never request transaction relay."""
        if v:
            msg = "relay must be disabled for seeding sessions"
            raise ValueError(msg)
        return v

    def endpoints(self) -> list[SeedEndpoint]:
        """Parse the active seed list, skipping malformed entries."""
        raw = self.testnet_seeds if self.testnet else self.seeds
        endpoints: list[SeedEndpoint] = []
        for item in raw:
            try:
                endpoints.append(SeedEndpoint.parse(item))
            except ValueError:
                logger.warning("Invalid seed format: %s (expected host:port)", item)
        return endpoints


class HostsConfig(BaseModel):
    """Host registry configuration."""

    capacity: int = Field(
        default=1000,
        ge=1,
        le=1_000_000,
        description="Maximum number of stored addresses",
    )
    hosts_file: str | None = Field(None, description="Path to persist hosts")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(default=True, description="Use structured logging")
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Main configuration model."""

    seeder: SeederConfig = Field(
        default_factory=SeederConfig,
        description="Seeding configuration",
    )
    hosts: HostsConfig = Field(
        default_factory=HostsConfig,
        description="Host registry configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
