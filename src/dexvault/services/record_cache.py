"""In-memory record cache with TTL and LRU eviction.

Holds composite records and the shared species/evolution sub-records. Keys
are either numeric ids or namespaced strings (see ``CacheKeys``). Expiry
and size bounding are independent: an entry past its TTL is never
returned even if size pressure has not evicted it yet.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

from dexvault.shared.constants import CacheConfig
from dexvault.shared.errors import ErrorContext, create_validation_error
from dexvault.shared.logging import log_operation_success

logger = logging.getLogger(__name__)

V = TypeVar("V")

CacheKey = Hashable


@dataclass
class CacheEntry(Generic[V]):
    """A cached value and the time it was stored."""

    value: V
    stored_at: float


@dataclass
class CacheStats:
    """Counters for cache effectiveness."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class RecordCache(Generic[V]):
    """Bounded key/value store with per-entry expiry and strict LRU eviction.

    Recency is the order in which keys were last read (``get``) or written
    (``set``); ``has`` checks freshness without touching recency.

    Args:
        max_size: Maximum number of entries kept after any mutation
        ttl: Entry time-to-live in seconds
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_size: int = CacheConfig.MAX_SIZE,
        ttl: float = CacheConfig.TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise create_validation_error(
                f"Cache max_size must be positive, got: {max_size}",
                field="max_size",
                value=max_size,
            )
        if ttl <= 0:
            raise create_validation_error(
                f"Cache ttl must be positive, got: {ttl}",
                field="ttl",
                value=ttl,
            )

        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[CacheKey, CacheEntry[V]] = OrderedDict()
        self.stats = CacheStats()

        log_operation_success(
            logger=logger,
            operation="record_cache_init",
            duration_ms=0,
            context=ErrorContext(
                operation="record_cache_init",
                additional_data={"max_size": max_size, "ttl": ttl},
            ),
        )

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry[V]) -> bool:
        return self._clock() - entry.stored_at >= self.ttl

    def _fresh_entry(self, key: CacheKey) -> CacheEntry[V] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            self.stats.expirations += 1
            logger.debug("Cache entry expired: %r", key)
            return None
        return entry

    def set(self, key: CacheKey, value: V) -> None:
        """Insert or overwrite ``key`` and mark it most recently used."""
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            self.stats.evictions += 1
            logger.debug("Cache evicted least recently used key: %r", evicted)

    def get(self, key: CacheKey) -> V | None:
        """Return the value for ``key`` or None when absent or expired."""
        entry = self._fresh_entry(key)
        if entry is None:
            self.stats.misses += 1
            return None
        self._entries.move_to_end(key)
        self.stats.hits += 1
        return entry.value

    def has(self, key: CacheKey) -> bool:
        """Return True if ``key`` holds a fresh entry; recency is unchanged."""
        return self._fresh_entry(key) is not None

    def delete(self, key: CacheKey) -> bool:
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        self.stats.expirations += len(expired)
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[CacheKey]:
        """Keys from least to most recently used, expired ones included."""
        return list(self._entries)
