"""Headless Pokédex session.

Ties the data service, the name index and the fuzzy matcher into the
interactions a front end needs: searching, showing a record, stepping
through the catalog, background preloading of likely next records, and
picking a starter. Rendering is left to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dexvault.core.matching import FuzzyMatcher
from dexvault.core.scheduling import CancellationToken, LatestOnlyScheduler, TaskHandle
from dexvault.services.data_service import DataService
from dexvault.services.http_fetcher import HttpFetcher
from dexvault.services.name_index import NameIndex
from dexvault.services.request_throttle import RequestThrottle
from dexvault.shared.constants import CLIMessages, Navigation, SearchConfig, StarterPokemon
from dexvault.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    create_validation_error,
)
from dexvault.shared.models import CompositeRecord

logger = logging.getLogger(__name__)


class SearchOutcomeKind(str, Enum):
    EMPTY = "empty"
    RECORD = "record"
    SUGGESTIONS = "suggestions"
    OUT_OF_RANGE = "out_of_range"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class SearchOutcome:
    """What a search produced, ready to be rendered."""

    kind: SearchOutcomeKind
    query: str
    record: CompositeRecord | None = None
    suggestions: tuple[str, ...] = ()
    message: str | None = None

    def suggestion_page(self, page: int, page_size: int) -> tuple[str, ...]:
        """Suggestions on 0-based ``page`` of ``page_size`` items."""
        start = page * page_size
        return self.suggestions[start : start + page_size]

    def page_count(self, page_size: int) -> int:
        return -(-len(self.suggestions) // page_size)


class DexSession:
    """Interactive operations over one loaded name index.

    Args:
        data_service: Resolves composite records
        name_index: Catalog order and name lookups
        matcher: Ranks names for free-text queries
        debounce: Delay in seconds applied by ``schedule_search``
        suggestion_limit: Suggestions per page
        max_preload: Upper bound on records preloaded after a show
        default_id: Id shown when the index is empty
        rng: Random source for ``starter``
        throttle: Closed by ``aclose`` when given
        fetcher: Closed by ``aclose`` when given
    """

    def __init__(
        self,
        data_service: DataService,
        name_index: NameIndex,
        matcher: FuzzyMatcher,
        *,
        debounce: float = SearchConfig.DEBOUNCE_SECONDS,
        suggestion_limit: int = SearchConfig.SUGGESTION_LIMIT,
        max_preload: int = Navigation.MAX_PRELOAD,
        default_id: int = Navigation.DEFAULT_ID,
        rng: random.Random | None = None,
        throttle: RequestThrottle | None = None,
        fetcher: HttpFetcher | None = None,
    ) -> None:
        self.data_service = data_service
        self.name_index = name_index
        self.matcher = matcher
        self.debounce = debounce
        self.suggestion_limit = suggestion_limit
        self.max_preload = max_preload
        self.default_id = default_id
        self._rng = rng or random.Random()
        self._throttle = throttle
        self._fetcher = fetcher

        self._search_scheduler = LatestOnlyScheduler("search")
        self._navigation_scheduler = LatestOnlyScheduler("navigation")
        self._navigation_target: int | None = None
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def current_id(self) -> int | None:
        return self.data_service.current_id

    @property
    def background_tasks(self) -> frozenset[asyncio.Task[Any]]:
        return frozenset(self._background)

    async def load(self) -> None:
        await self.name_index.load()

    def _require_index(self, operation: str) -> None:
        if not self.name_index.loaded:
            raise ApplicationError(
                code=ErrorCode.INDEX_NOT_LOADED,
                message="Name index has not been loaded",
                context=ErrorContext(operation=operation),
            )

    async def search(
        self,
        query: str,
        *,
        token: CancellationToken | None = None,
        preload: bool = True,
    ) -> SearchOutcome:
        """Interpret a raw query and resolve it when it is unambiguous.

        Numbers are range-checked against the catalog size, exact names
        are resolved directly, and anything else is ranked by the fuzzy
        matcher: one match is resolved, several become suggestions.
        """
        text = query.strip().lower()
        if not text:
            return SearchOutcome(SearchOutcomeKind.EMPTY, query, message=CLIMessages.EMPTY_QUERY)

        self._require_index("search")

        if text.isdigit():
            pokemon_id = int(text)
            if not 1 <= pokemon_id <= self.name_index.total:
                return SearchOutcome(
                    SearchOutcomeKind.OUT_OF_RANGE,
                    query,
                    message=CLIMessages.OUT_OF_RANGE.format(id=pokemon_id),
                )
            record = await self.show(pokemon_id, token=token, preload=preload)
            return SearchOutcome(SearchOutcomeKind.RECORD, query, record=record)

        exact = self.name_index.lookup(text)
        if exact is not None:
            record = await self.show(exact, token=token, preload=preload)
            return SearchOutcome(SearchOutcomeKind.RECORD, query, record=record)

        matches = self.matcher.match(text, self.name_index)
        if len(matches) == 1:
            match_id = self.name_index.lookup(matches[0])
            if match_id is not None:
                record = await self.show(match_id, token=token, preload=preload)
                return SearchOutcome(SearchOutcomeKind.RECORD, query, record=record)
        if matches:
            return SearchOutcome(
                SearchOutcomeKind.SUGGESTIONS,
                query,
                suggestions=tuple(matches),
                message=CLIMessages.SUGGESTIONS,
            )
        return SearchOutcome(SearchOutcomeKind.NOT_FOUND, query, message=CLIMessages.NOT_FOUND)

    def schedule_search(self, query: str) -> TaskHandle[SearchOutcome]:
        """Debounced search; a newer call supersedes a pending one."""
        return self._search_scheduler.submit(
            lambda token: self.search(query, token=token),
            delay=self.debounce,
        )

    async def show(
        self,
        pokemon_id: int,
        *,
        token: CancellationToken | None = None,
        preload: bool = True,
    ) -> CompositeRecord:
        """Resolve ``pokemon_id`` as the current record and preload neighbours."""
        record = await self.data_service.resolve(pokemon_id, token=token)
        self.data_service.current_id = record.id
        if preload:
            self.preload_adjacent(record.id)
        return record

    def navigate(self, direction: str) -> TaskHandle[CompositeRecord | None]:
        """Step ``left``/``right`` by one or ``up``/``down`` by a row.

        Movement follows catalog order and stops at either end. The
        returned handle yields None when there is nowhere to go.
        """
        step = Navigation.STEPS.get(direction)
        if step is None:
            raise create_validation_error(
                f"Unknown direction: {direction!r}",
                field="direction",
                value=direction,
            )

        pending = self._navigation_scheduler.current
        base_id = (
            self._navigation_target
            if pending is not None and not pending.done() and self._navigation_target is not None
            else self.current_id
        )
        target_id = self._step_from(base_id, step)
        self._navigation_target = target_id

        async def go(token: CancellationToken) -> CompositeRecord | None:
            if target_id is None or target_id == self.current_id:
                return None
            return await self.show(target_id, token=token)

        return self._navigation_scheduler.submit(go)

    def _step_from(self, pokemon_id: int | None, step: int) -> int | None:
        if pokemon_id is None:
            return None
        position = self.name_index.position_of(pokemon_id)
        if position is None:
            return None
        last = self.name_index.size - 1
        return self.name_index.id_at(min(max(position + step, 0), last))

    def adjacent_ids(self, pokemon_id: int) -> list[int]:
        """Ids one step and one row away, nearest first, without repeats."""
        ids: list[int] = []
        for direction in ("left", "right", "up", "down"):
            neighbour = self._step_from(pokemon_id, Navigation.STEPS[direction])
            if neighbour is not None and neighbour != pokemon_id and neighbour not in ids:
                ids.append(neighbour)
        return ids

    def preload_adjacent(self, pokemon_id: int) -> asyncio.Task[Any] | None:
        """Warm the cache with likely navigation targets in the background."""
        candidates = [
            id_ for id_ in self.adjacent_ids(pokemon_id) if not self.data_service.is_cached(id_)
        ][: self.max_preload]
        if not candidates:
            return None

        task = asyncio.create_task(self.data_service.resolve_batch(candidates))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        logger.debug("Preloading %s", candidates)
        return task

    def starter_id(self) -> int:
        """A random classic starter present in the index, else any indexed id."""
        indexed = {entry.id for entry in self.name_index.entries()}
        starters = [id_ for id_ in StarterPokemon.IDS if id_ in indexed]
        if starters:
            return self._rng.choice(starters)
        if indexed:
            return self._rng.choice(sorted(indexed))
        return self.default_id

    async def starter(self) -> CompositeRecord:
        return await self.show(self.starter_id())

    async def aclose(self) -> None:
        """Cancel pending work and release network resources."""
        await self._search_scheduler.aclose()
        await self._navigation_scheduler.aclose()
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()
        await self.data_service.aclose()
        if self._throttle is not None:
            await self._throttle.aclose()
        if self._fetcher is not None:
            await self._fetcher.aclose()
