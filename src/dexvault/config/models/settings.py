"""DexVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dexvault.config.models.api_settings import APISettings
from dexvault.config.models.app_settings import (
    AppSettings,
    LoggingSettings,
    SearchSettings,
)
from dexvault.config.models.cache_settings import CacheSettings, StorageSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Unified configuration.

    Values come from (highest first) init arguments, ``DEXVAULT_*``
    environment variables (nested with ``__``, e.g.
    ``DEXVAULT_CACHE__MAX_SIZE=500``), a ``.env`` file, and defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEXVAULT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Keys present in the file take precedence; environment variables
        fill in whatever the file leaves out.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
