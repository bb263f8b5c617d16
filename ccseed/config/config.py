"""Configuration management for ccseed.

Provides centralized configuration with TOML support and validation,
loaded hierarchically from defaults, config file, then environment.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import toml

from ccseed.models import (
    Config,
    HostsConfig,
    ObservabilityConfig,
    SeederConfig,
)
from ccseed.utils.exceptions import ConfigurationError
from ccseed.utils.logging_config import setup_logging

# Global configuration instance
_config_manager: ConfigManager | None = None

# Mapping of environment variables to config paths
ENV_MAPPINGS: dict[str, str] = {
    # Seeder
    "CCSEED_SEEDS": "seeder.seeds",
    "CCSEED_TESTNET_SEEDS": "seeder.testnet_seeds",
    "CCSEED_TESTNET": "seeder.testnet",
    "CCSEED_ATTEMPT_TIMEOUT": "seeder.attempt_timeout",
    # Hosts
    "CCSEED_HOSTS_CAPACITY": "hosts.capacity",
    "CCSEED_HOSTS_FILE": "hosts.hosts_file",
    # Observability
    "CCSEED_LOG_LEVEL": "observability.log_level",
    "CCSEED_LOG_FILE": "observability.log_file",
    "CCSEED_STRUCTURED_LOGGING": "observability.structured_logging",
    "CCSEED_LOG_CORRELATION_ID": "observability.log_correlation_id",
}

_LIST_PATHS = frozenset({"seeder.seeds", "seeder.testnet_seeds"})
_STRING_PATHS = frozenset(
    {"hosts.hosts_file", "observability.log_file", "observability.log_level"}
)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_file: str | Path | None = None, setup_log: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for ccseed.toml
            setup_log: Configure logging from the loaded observability section

        """
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()
        if setup_log:
            self._setup_logging()

    def _find_config_file(
        self,
        config_file: str | Path | None,
    ) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            return Path(config_file)

        search_paths = [
            Path.cwd() / "ccseed.toml",
            Path.home() / ".config" / "ccseed" / "ccseed.toml",
            Path.home() / ".ccseed.toml",
        ]

        for path in search_paths:
            if path.exists():
                return path

        return None

    def _load_config(self) -> Config:
        """Load configuration from file and environment."""
        config_data: dict[str, Any] = {}

        if self.config_file and self.config_file.exists():
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data.update(toml.load(f))
            except (OSError, toml.TomlDecodeError) as e:
                msg = f"Failed to load config file {self.config_file}: {e}"
                raise ConfigurationError(msg) from e

        config_data = self._merge_config(config_data, self._get_env_config())

        try:
            return Config(**config_data)
        except Exception as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}

        def _parse_env_value(raw: str, path: str) -> Any:
            if path in _LIST_PATHS:
                return [item.strip() for item in raw.split(",") if item.strip()]
            if path in _STRING_PATHS:
                return raw

            low = raw.lower()
            if low in {"none", "null", ""}:
                return None
            if low in {"true", "yes", "on"}:
                return True
            if low in {"false", "no", "off"}:
                return False
            try:
                if "." in raw:
                    return float(raw)
                return int(raw)
            except ValueError:
                return raw

        def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
            parts = path.split(".")
            cur = d
            for p in parts[:-1]:
                cur = cur.setdefault(p, {})
            cur[parts[-1]] = value

        for env_name, cfg_path in ENV_MAPPINGS.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            _set_nested(env_config, cfg_path, _parse_env_value(raw, cfg_path))

        return env_config

    def _merge_config(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    def export(self, fmt: str = "toml") -> str:
        """Export current configuration as a string in the given format.

        Args:
            fmt: one of "toml" or "json"

        """
        data = self.config.model_dump(mode="json", exclude_none=True)
        if fmt == "toml":
            return toml.dumps(data)
        if fmt == "json":
            return json.dumps(data, indent=2)
        msg = f"Unsupported export format: {fmt}"
        raise ConfigurationError(msg)

    def _setup_logging(self) -> None:
        """Set up logging configuration."""
        setup_logging(self.config.observability)


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(setup_log=False)
    return _config_manager.config


def init_config(config_file: str | Path | None = None) -> ConfigManager:
    """Initialize the global configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager


def reload_config() -> Config:
    """Reload configuration from file."""
    if _config_manager is None:
        msg = "Configuration not initialized"
        raise ConfigurationError(msg)

    _config_manager.config = _config_manager._load_config()  # noqa: SLF001
    _config_manager._setup_logging()  # noqa: SLF001
    return _config_manager.config


def set_config(new_config: Config) -> None:
    """Replace the global configuration at runtime.

    Components that snapshot config must re-read values to pick up changes.
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(setup_log=False)
    _config_manager.config = new_config


def reset_config() -> None:
    """Drop the global configuration so the next access reloads it."""
    global _config_manager
    _config_manager = None
    logging.getLogger(__name__).debug("Global configuration reset")


def get_seeder_config() -> SeederConfig:
    """Get seeder configuration."""
    return get_config().seeder


def get_hosts_config() -> HostsConfig:
    """Get host registry configuration."""
    return get_config().hosts


def get_observability_config() -> ObservabilityConfig:
    """Get observability configuration."""
    return get_config().observability
