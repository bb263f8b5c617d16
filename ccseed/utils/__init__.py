"""Shared utilities and infrastructure.

This module contains common utilities used throughout the application.
"""

from __future__ import annotations

from ccseed.utils.exceptions import (
    CCSeedError,
    ConfigurationError,
    NetworkError,
    StoreError,
    SystemicError,
    ValidationError,
)
from ccseed.utils.logging_config import get_logger, setup_logging
from ccseed.utils.tasks import BackgroundTaskGroup

__all__ = [
    "BackgroundTaskGroup",
    # Exceptions
    "CCSeedError",
    "ConfigurationError",
    "NetworkError",
    "StoreError",
    "SystemicError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
