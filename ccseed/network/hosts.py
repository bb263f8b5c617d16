"""In-memory host registry.

HostPool keeps a bounded, insertion-ordered set of peer addresses. Storing
an address that is already known is a no-op; when the pool is full the
oldest address is evicted. The pool can be persisted to a text file with
one ``ip:port`` entry per line.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import OrderedDict
from pathlib import Path
from typing import TYPE_CHECKING

from ccseed.config.config import get_config
from ccseed.models import NetworkAddress
from ccseed.utils.exceptions import StoreError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ccseed.models import HostsConfig


class HostPool:
    """Bounded, deduplicating address book."""

    def __init__(self, capacity: int = 1000):
        """Initialize host pool.

        Args:
            capacity: Maximum number of addresses kept

        """
        if capacity < 1:
            msg = f"capacity must be >= 1, got {capacity}"
            raise ValueError(msg)
        self.capacity = capacity
        self._hosts: OrderedDict[tuple[str, int], NetworkAddress] = OrderedDict()
        self._lock = asyncio.Lock()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: HostsConfig | None = None) -> HostPool:
        """Build a pool from hosts configuration, loading the hosts file if set."""
        config = config or get_config().hosts
        pool = cls(capacity=config.capacity)
        if config.hosts_file:
            pool.load(Path(config.hosts_file).expanduser())
        return pool

    def size(self) -> int:
        """Number of stored addresses."""
        return len(self._hosts)

    def __contains__(self, address: object) -> bool:
        """Check whether an address is known."""
        if not isinstance(address, NetworkAddress):
            return False
        return (address.ip, address.port) in self._hosts

    def addresses(self) -> list[NetworkAddress]:
        """Snapshot of stored addresses, oldest first."""
        return list(self._hosts.values())

    async def store(self, address: NetworkAddress) -> None:
        """Store one address.

        Raises:
            StoreError: If the address has no IP or a zero port.

        """
        if not address.ip or address.port == 0:
            msg = f"Unusable address {address}"
            raise StoreError(msg, {"ip": address.ip, "port": address.port})

        async with self._lock:
            key = (address.ip, address.port)
            if key in self._hosts:
                return
            if len(self._hosts) >= self.capacity:
                evicted, _ = self._hosts.popitem(last=False)
                self.logger.debug("Host pool full, evicted %s:%s", *evicted)
            self._hosts[key] = address

    async def remove(self, address: NetworkAddress) -> bool:
        """Remove an address; returns whether it was present."""
        async with self._lock:
            return self._hosts.pop((address.ip, address.port), None) is not None

    async def fetch(self) -> NetworkAddress:
        """Return a random stored address.

        Raises:
            StoreError: If the pool is empty.

        """
        async with self._lock:
            if not self._hosts:
                msg = "Host pool is empty"
                raise StoreError(msg)
            return random.choice(list(self._hosts.values()))  # nosec B311 - not crypto

    def load(self, path: str | Path) -> int:
        """Load addresses from a hosts file; returns how many were added.

        Missing files load nothing. Malformed lines are skipped.
        """
        path = Path(path)
        if not path.exists():
            return 0

        added = 0
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                ip, port_str = line.rsplit(":", 1)
                address = NetworkAddress(ip=ip.strip("[]"), port=int(port_str))
            except ValueError:
                self.logger.warning("Invalid hosts file entry: %s", line)
                continue
            key = (address.ip, address.port)
            if address.port == 0 or key in self._hosts:
                continue
            if len(self._hosts) >= self.capacity:
                self._hosts.popitem(last=False)
            self._hosts[key] = address
            added += 1

        self.logger.info("Loaded %d hosts from %s", added, path)
        return added

    def save(self, path: str | Path) -> None:
        """Write stored addresses to a hosts file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [str(address) for address in self._hosts.values()]
        path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        self.logger.info("Saved %d hosts to %s", len(lines), path)
