"""Seeding core and its collaborator interfaces."""

from __future__ import annotations

from ccseed.network.barrier import CompletionBarrier
from ccseed.network.hosts import HostPool
from ccseed.network.interfaces import (
    AddressMessage,
    Connector,
    GetAddressMessage,
    Handshaker,
    HostRegistry,
    PeerSession,
)
from ccseed.network.seed_attempt import SeedAttempt, SeedAttemptState
from ccseed.network.seeder import (
    REASON_NO_NEW_HOSTS,
    REASON_NO_SEEDS,
    REASON_SEEDED,
    Seeder,
)

__all__ = [
    "REASON_NO_NEW_HOSTS",
    "REASON_NO_SEEDS",
    "REASON_SEEDED",
    "AddressMessage",
    "CompletionBarrier",
    "Connector",
    "GetAddressMessage",
    "Handshaker",
    "HostPool",
    "HostRegistry",
    "PeerSession",
    "SeedAttempt",
    "SeedAttemptState",
    "Seeder",
]
