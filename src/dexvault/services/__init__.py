"""DexVault services: transport, throttling, caching, indexing and resolution."""

from .data_service import DataService, ResolveOutcome
from .dex_session import DexSession, SearchOutcome, SearchOutcomeKind
from .http_fetcher import HttpFetcher
from .local_storage import LocalStorage
from .name_index import IndexSource, NameIndex
from .pokeapi_client import PokeAPIClient
from .record_cache import CacheStats, RecordCache
from .request_throttle import RequestThrottle, ThrottleRequest

__all__ = [
    "CacheStats",
    "DataService",
    "DexSession",
    "HttpFetcher",
    "IndexSource",
    "LocalStorage",
    "NameIndex",
    "PokeAPIClient",
    "RecordCache",
    "RequestThrottle",
    "ResolveOutcome",
    "SearchOutcome",
    "SearchOutcomeKind",
    "ThrottleRequest",
]
