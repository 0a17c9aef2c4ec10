"""Name to identifier index.

Built once per session from the paginated list endpoint, or adopted from
durable storage when the persisted copy is fresh and matches the remote
count. The live state is replaced only after a complete load, so a
failure part way through leaves the previous index in place.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Iterator

from dexvault.services.local_storage import LocalStorage
from dexvault.services.pokeapi_client import PokeAPIClient
from dexvault.shared.constants import PokeAPIConfig, StorageConfig
from dexvault.shared.errors import DexVaultError, DexVaultStorageError, ErrorContext
from dexvault.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from dexvault.shared.models import ListPage, NameIndexEntry

logger = logging.getLogger(__name__)


class IndexSource:
    """Where the live index came from."""

    STORAGE = "storage"
    REMOTE = "remote"


class NameIndex:
    """Lowercased names mapped to national dex ids, in catalog order.

    Args:
        client: Catalog client used for the count check and paging
        storage: Durable storage for the persisted list
        page_size: Entries requested per list page
        ttl: Maximum age in seconds of a persisted list
        list_key: Storage key of the serialized list
        ts_key: Storage key of the list timestamp
        clock: Wall clock in epoch seconds
    """

    def __init__(
        self,
        client: PokeAPIClient,
        storage: LocalStorage,
        *,
        page_size: int = PokeAPIConfig.PAGE_SIZE,
        ttl: float = StorageConfig.NAME_LIST_TTL,
        list_key: str = StorageConfig.NAME_LIST_KEY,
        ts_key: str = StorageConfig.NAME_LIST_TS_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.storage = storage
        self.page_size = page_size
        self.ttl = ttl
        self.list_key = list_key
        self.ts_key = ts_key
        self._clock = clock

        self._name_to_id: dict[str, int] = {}
        self._ordering: tuple[list[int], dict[int, int]] | None = None
        self.total = 0
        self.source: str | None = None
        self.loaded = False

    def __len__(self) -> int:
        return len(self._name_to_id)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._name_to_id

    def __iter__(self) -> Iterator[str]:
        return iter(self._name_to_id)

    @property
    def size(self) -> int:
        return len(self._name_to_id)

    @property
    def names(self) -> list[str]:
        """All names in catalog order."""
        return list(self._name_to_id)

    def entries(self) -> list[NameIndexEntry]:
        return [NameIndexEntry(name=name, id=id_) for name, id_ in self._name_to_id.items()]

    def lookup(self, name: str) -> int | None:
        return self._name_to_id.get(name.strip().lower())

    def register(self, name: str, pokemon_id: int) -> None:
        """Record ``name`` -> ``pokemon_id``; the last write wins."""
        self._name_to_id[name.strip().lower()] = pokemon_id
        self._ordering = None

    def _layout(self) -> tuple[list[int], dict[int, int]]:
        if self._ordering is None:
            order = list(self._name_to_id.values())
            positions: dict[int, int] = {}
            for position, id_ in enumerate(order):
                positions.setdefault(id_, position)
            self._ordering = (order, positions)
        return self._ordering

    def position_of(self, pokemon_id: int) -> int | None:
        """Position of the first entry with ``pokemon_id`` in catalog order."""
        _, positions = self._layout()
        return positions.get(pokemon_id)

    def id_at(self, position: int) -> int:
        order, _ = self._layout()
        return order[position]

    def _swap(self, entries: list[NameIndexEntry], total: int, source: str) -> None:
        mapping: dict[str, int] = {}
        for entry in entries:
            mapping[entry.name] = entry.id
        self._name_to_id = mapping
        self._ordering = None
        self.total = total
        self.source = source
        self.loaded = True

    def _read_persisted(self, remote_count: int) -> list[NameIndexEntry] | None:
        stored_at = self.storage.get_item(self.ts_key)
        if not isinstance(stored_at, (int, float)) or isinstance(stored_at, bool):
            return None
        age = self._clock() - stored_at
        if age < 0 or age > self.ttl:
            logger.debug("Persisted name list is stale (age %.0fs)", age)
            return None

        raw = self.storage.get_item(self.list_key)
        entries = _decode_entries(raw)
        if entries is None:
            logger.debug("Persisted name list has an unexpected shape, ignoring")
            return None
        if len(entries) != remote_count:
            logger.debug(
                "Persisted name list has %d entries, remote has %d",
                len(entries),
                remote_count,
            )
            return None
        return entries

    def _persist(self, entries: list[NameIndexEntry]) -> None:
        try:
            self.storage.set_item(self.list_key, [entry.to_dict() for entry in entries])
            self.storage.set_item(self.ts_key, self._clock())
        except DexVaultStorageError:
            # already logged by the storage layer; persistence is advisory
            return

    async def _fetch_all(self) -> list[NameIndexEntry]:
        entries: list[NameIndexEntry] = []
        page: ListPage | None = await self.client.get_pokemon_page(self.page_size)
        pages = 0
        while page is not None:
            pages += 1
            for resource in page.results:
                resource_id = resource.resource_id
                if resource_id is None:
                    continue
                entries.append(NameIndexEntry(name=resource.name.lower(), id=resource_id))
            page = await self.client.get_page(page.next) if page.next else None
            await asyncio.sleep(0)
        logger.debug("Fetched %d name index entries in %d pages", len(entries), pages)
        return entries

    async def load(self) -> None:
        """Populate the index from storage or the remote list.

        Raises:
            DexVaultError: If the count check or any page fetch fails; the
                live index is left unchanged
        """
        started = time.monotonic()
        log_operation_start(logger, "name_index_load")
        try:
            remote_count = await self.client.get_count()
            entries = self._read_persisted(remote_count)
            if entries is not None:
                self._swap(entries, remote_count, IndexSource.STORAGE)
            else:
                entries = await self._fetch_all()
                self._swap(entries, remote_count, IndexSource.REMOTE)
                self._persist(entries)
        except DexVaultError as e:
            log_operation_error(
                logger=logger,
                error=e,
                operation="name_index_load",
                additional_context=ErrorContext(
                    operation="name_index_load",
                    additional_data={"loaded_before": self.loaded},
                ),
            )
            raise

        logger.info("Name index ready: %d names from %s", self.size, self.source)
        log_operation_success(
            logger=logger,
            operation="name_index_load",
            duration_ms=(time.monotonic() - started) * 1000,
            result_info={"size": self.size, "source": self.source, "total": self.total},
        )


def _decode_entries(raw: Any) -> list[NameIndexEntry] | None:
    if not isinstance(raw, list):
        return None
    entries = []
    for item in raw:
        if not isinstance(item, dict):
            return None
        name = item.get("name")
        id_ = item.get("id")
        if not isinstance(name, str) or not isinstance(id_, int) or isinstance(id_, bool):
            return None
        entries.append(NameIndexEntry(name=name.lower(), id=id_))
    return entries
