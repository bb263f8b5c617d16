"""Collaborator interfaces for the seeding core.

The transport, handshake and host storage layers are supplied by the
embedding node. These protocols describe what the seeding core needs from
them; wire encoding is the transport's concern, so messages are plain
objects here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from ccseed.models import NetworkAddress


@dataclass(frozen=True)
class GetAddressMessage:
    """Request for a peer's known address list."""


@dataclass
class AddressMessage:
    """Peer address list sent in reply to GetAddressMessage."""

    addresses: list[NetworkAddress] = field(default_factory=list)


# handler(error, message): exactly one of the two is set
AddressHandler = Callable[[Optional[Exception], Optional[AddressMessage]], None]

# handler(reason): reason the session ended, None for a clean remote close
StopHandler = Callable[[Optional[Exception]], None]


@runtime_checkable
class PeerSession(Protocol):
    """One established connection to a peer.

    Handlers registered through the ``subscribe_*`` methods may be invoked
    from any thread. The stop handler fires at most once.
    """

    @property
    def address(self) -> str:
        """Remote address, for logging."""
        ...

    def start(self) -> None:
        """Begin reading from the connection."""
        ...

    def stop(self, reason: Exception) -> None:
        """Close the session; stop handlers receive ``reason``."""
        ...

    async def send(self, message: object) -> None:
        """Send a message, raising on failure."""
        ...

    def subscribe_address(self, handler: AddressHandler) -> None:
        """Register for inbound address-list notifications."""
        ...

    def subscribe_stop(self, handler: StopHandler) -> None:
        """Register for the one-shot session-ended notification."""
        ...


@runtime_checkable
class Connector(Protocol):
    """Dials a host and wraps the connection in a PeerSession."""

    async def connect(self, host: str, port: int) -> PeerSession:
        """Connect to ``host:port``, raising on failure."""
        ...


@runtime_checkable
class Handshaker(Protocol):
    """Performs protocol version negotiation on a fresh session."""

    async def perform(self, session: PeerSession, relay: bool = False) -> None:
        """Complete the handshake, raising on failure."""
        ...


@runtime_checkable
class HostRegistry(Protocol):
    """Address book for discovered peers; deduplicates internally."""

    def size(self) -> int:
        """Number of stored addresses."""
        ...

    async def store(self, address: NetworkAddress) -> None:
        """Store one address, raising on failure."""
        ...
