"""Exception hierarchy for ccseed.

Per-seed failures (connection, handshake, message exchange, storage) are
absorbed by the seeding core; only SystemicError fails a seeding run.
"""

from __future__ import annotations

from typing import Any


class CCSeedError(Exception):
    """Base exception for all ccseed errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize ccseed error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class NetworkError(CCSeedError):
    """Network-related errors."""


class SeedConnectionError(NetworkError):
    """Seed endpoint could not be reached."""


class ChannelStoppedError(NetworkError):
    """Session was stopped by its owner."""

    def __init__(
        self,
        message: str = "Channel stopped",
        details: dict[str, Any] | None = None,
    ):
        """Initialize with the default stop message."""
        super().__init__(message, details)


class ProtocolError(CCSeedError):
    """Peer protocol errors."""


class HandshakeError(ProtocolError):
    """Handshake protocol errors."""


class SendError(ProtocolError):
    """Outbound message could not be sent."""


class ReceiveError(ProtocolError):
    """Inbound message could not be received or parsed."""


class StoreError(CCSeedError):
    """Address could not be stored in the host registry."""


class SystemicError(CCSeedError):
    """Fault not tied to any single seed; fails the whole run."""


class SeedTimeoutError(CCSeedError):
    """Seed attempt exceeded its deadline."""


class ValidationError(CCSeedError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""
