"""
DexVault Constants Module

Centralized constants for DexVault. All magic values and configuration
defaults are defined here so that settings models, services and the CLI
agree on a single source of truth.
"""

from .api import HTTPStatusCodes, PokeAPIConfig, PokeAPIEndpoints
from .cache import CacheConfig, CacheKeys, StorageConfig
from .cli import CLIDefaults, CLIHelp, CLIMessages
from .logging import Logging
from .search import Navigation, SearchConfig, StarterPokemon

__all__ = [
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CacheConfig",
    "CacheKeys",
    "HTTPStatusCodes",
    "Logging",
    "Navigation",
    "PokeAPIConfig",
    "PokeAPIEndpoints",
    "SearchConfig",
    "StarterPokemon",
    "StorageConfig",
]
