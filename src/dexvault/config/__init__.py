"""DexVault Configuration Module

Unified access to configuration models and settings loading:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: API, cache, storage, search, app and logging settings
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import (
    APISettings,
    AppSettings,
    CacheSettings,
    LoggingSettings,
    PokeAPISettings,
    SearchSettings,
    Settings,
    StorageSettings,
)

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "PokeAPISettings",
    "SearchSettings",
    "Settings",
    "StorageSettings",
    "get_config",
    "load_settings",
    "reload_config",
]
