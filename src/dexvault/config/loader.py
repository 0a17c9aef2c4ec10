"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Thread-safe cached Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dexvault.config.models.settings import Settings
from dexvault.shared.constants import StorageConfig
from dexvault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Locations searched when no explicit config path is given."""
    return [
        Path("config/dexvault.toml"),
        Path("dexvault.toml"),
        Path.home() / StorageConfig.DIRECTORY_NAME / "config.toml",
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. If None, the default
            locations are tried before falling back to environment/defaults.

    Returns:
        Settings instance

    Raises:
        ApplicationError: If an explicit config file is missing or invalid
    """
    if config_path:
        try:
            return Settings.from_toml_file(config_path)
        except FileNotFoundError as e:
            raise ApplicationError(
                code=ErrorCode.CONFIG_MISSING,
                message=str(e),
                context=ErrorContext(
                    operation="load_settings",
                    additional_data={"config_path": str(config_path)},
                ),
                original_error=e,
            ) from e
        except ValueError as e:
            # pydantic.ValidationError and toml.TomlDecodeError are ValueErrors
            raise ApplicationError(
                code=ErrorCode.CONFIG_ERROR,
                message=f"Invalid configuration file {config_path}: {e}",
                context=ErrorContext(
                    operation="load_settings",
                    additional_data={"config_path": str(config_path)},
                ),
                original_error=e,
            ) from e

    for candidate in default_config_paths():
        if candidate.exists():
            return load_settings(candidate)

    return Settings()


class SettingsLoader:
    """Thread-safe holder of the process-wide Settings instance."""

    def __init__(self) -> None:
        self._instance: Settings | None = None
        self._lock = threading.RLock()

    def get_config(self) -> Settings:
        """Return the cached settings, loading them on first use."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()
        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload settings, optionally from an explicit file."""
        with self._lock:
            self._instance = load_settings(config_path)
            logger.debug("Configuration reloaded")
        return self._instance


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the process-wide settings instance."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the process-wide settings instance."""
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
]
