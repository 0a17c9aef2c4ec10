"""Configuration models."""

from .api_settings import APISettings, PokeAPISettings
from .app_settings import AppSettings, LoggingSettings, SearchSettings
from .cache_settings import CacheSettings, StorageSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "PokeAPISettings",
    "SearchSettings",
    "Settings",
    "StorageSettings",
]
