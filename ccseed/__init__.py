"""ccseed - Seed-based peer address bootstrapping for P2P nodes."""

from __future__ import annotations

__version__ = "0.1.0"

from ccseed.config.config import Config, ConfigManager, get_config, init_config
from ccseed.models import (
    AggregateResult,
    NetworkAddress,
    SeedEndpoint,
    SeedOutcome,
)
from ccseed.network import (
    AddressMessage,
    CompletionBarrier,
    GetAddressMessage,
    HostPool,
    SeedAttempt,
    Seeder,
)

__all__ = [
    "AddressMessage",
    "AggregateResult",
    "CompletionBarrier",
    "Config",
    "ConfigManager",
    "GetAddressMessage",
    "HostPool",
    "NetworkAddress",
    "SeedAttempt",
    "SeedEndpoint",
    "SeedOutcome",
    "Seeder",
    "__version__",
    "get_config",
    "init_config",
]
