"""Tests for ccseed.network.hosts."""

from __future__ import annotations

import logging

import pytest

from ccseed.config.config import set_config
from ccseed.models import Config, HostsConfig, NetworkAddress
from ccseed.network.hosts import HostPool
from ccseed.network.interfaces import HostRegistry
from ccseed.utils.exceptions import StoreError
from tests.fakes import make_addresses

pytestmark = [pytest.mark.unit, pytest.mark.network]


class TestHostPool:
    """Test HostPool storage."""

    def test_satisfies_registry_protocol(self):
        """HostPool can be handed to the Seeder as its registry."""
        assert isinstance(HostPool(), HostRegistry)

    def test_invalid_capacity(self):
        """Capacity must allow at least one address."""
        with pytest.raises(ValueError, match="capacity"):
            HostPool(capacity=0)

    @pytest.mark.asyncio
    async def test_store_deduplicates(self):
        """Storing a known address does not grow the pool."""
        pool = HostPool()
        address = NetworkAddress(ip="10.0.0.1", port=8333)

        await pool.store(address)
        await pool.store(NetworkAddress(ip="10.0.0.1", port=8333, services=1))

        assert pool.size() == 1
        assert address in pool

    @pytest.mark.asyncio
    async def test_same_ip_different_port_is_distinct(self):
        """Endpoint identity includes the port."""
        pool = HostPool()

        await pool.store(NetworkAddress(ip="10.0.0.1", port=8333))
        await pool.store(NetworkAddress(ip="10.0.0.1", port=18333))

        assert pool.size() == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("ip", "port"),
        [("", 8333), ("10.0.0.1", 0)],
    )
    async def test_store_rejects_unusable_address(self, ip, port):
        """Addresses without an IP or port raise StoreError."""
        pool = HostPool()

        with pytest.raises(StoreError, match="Unusable address"):
            await pool.store(NetworkAddress(ip=ip, port=port))

        assert pool.size() == 0

    @pytest.mark.asyncio
    async def test_full_pool_evicts_oldest(self):
        """Capacity is enforced by dropping the oldest address."""
        pool = HostPool(capacity=2)
        first, second, third = make_addresses(3)

        await pool.store(first)
        await pool.store(second)
        await pool.store(third)

        assert pool.size() == 2
        assert first not in pool
        assert pool.addresses() == [second, third]

    @pytest.mark.asyncio
    async def test_remove(self):
        """remove() reports whether the address was present."""
        pool = HostPool()
        (address,) = make_addresses(1)
        await pool.store(address)

        assert await pool.remove(address) is True
        assert await pool.remove(address) is False
        assert pool.size() == 0

    @pytest.mark.asyncio
    async def test_fetch(self):
        """fetch() returns a stored address and fails on an empty pool."""
        pool = HostPool()
        with pytest.raises(StoreError, match="Host pool is empty"):
            await pool.fetch()

        addresses = make_addresses(3)
        for address in addresses:
            await pool.store(address)

        assert await pool.fetch() in addresses

    def test_contains_non_address(self):
        """Membership checks tolerate foreign objects."""
        assert "10.0.0.1:8333" not in HostPool()


class TestHostPoolPersistence:
    """Hosts file load and save."""

    @pytest.mark.asyncio
    async def test_save_then_load(self, tmp_path):
        """Saved hosts load back in order."""
        path = tmp_path / "hosts" / "hosts.txt"
        pool = HostPool()
        addresses = make_addresses(3)
        for address in addresses:
            await pool.store(address)

        pool.save(path)
        restored = HostPool()

        assert restored.load(path) == 3
        assert restored.addresses() == addresses
        assert path.read_text(encoding="utf-8").splitlines()[0] == "10.0.0.1:8333"

    def test_from_config(self, tmp_path):
        """Capacity and hosts file come from HostsConfig."""
        path = tmp_path / "hosts.txt"
        path.write_text("10.0.0.1:8333\n10.0.0.2:8333\n", encoding="utf-8")

        pool = HostPool.from_config(HostsConfig(capacity=5, hosts_file=str(path)))

        assert pool.capacity == 5
        assert pool.size() == 2

    def test_from_global_config(self):
        """Without arguments the global hosts section applies."""
        set_config(Config(hosts=HostsConfig(capacity=3)))

        pool = HostPool.from_config()

        assert pool.capacity == 3
        assert pool.size() == 0

    def test_load_missing_file(self, tmp_path):
        """A missing hosts file loads nothing."""
        assert HostPool().load(tmp_path / "absent.txt") == 0

    def test_load_skips_malformed_lines(self, tmp_path, caplog):
        """Comments and blanks are ignored; bad entries are warned about."""
        path = tmp_path / "hosts.txt"
        path.write_text(
            "# seeded hosts\n"
            "10.0.0.1:8333\n"
            "\n"
            "garbage\n"
            "10.0.0.2:notaport\n"
            "10.0.0.3:0\n"
            "10.0.0.1:8333\n"
            "[2001:db8::1]:8333\n",
            encoding="utf-8",
        )
        pool = HostPool()

        with caplog.at_level(logging.WARNING, logger="ccseed"):
            added = pool.load(path)

        assert added == 2
        assert NetworkAddress(ip="2001:db8::1", port=8333) in pool
        assert "Invalid hosts file entry: garbage" in caplog.text

    def test_load_respects_capacity(self, tmp_path):
        """Loading more hosts than fit keeps the newest."""
        path = tmp_path / "hosts.txt"
        path.write_text("10.0.0.1:1\n10.0.0.2:2\n10.0.0.3:3\n", encoding="utf-8")
        pool = HostPool(capacity=2)

        pool.load(path)

        assert [str(a) for a in pool.addresses()] == ["10.0.0.2:2", "10.0.0.3:3"]
