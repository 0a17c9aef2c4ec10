"""Composite record resolution.

``DataService.resolve`` turns an id or a name into a ``CompositeRecord``:
the base entity, its species metadata and its evolution chain. Each of the
three parts is looked up in the cache before any network call is made,
and the finished composite is cached under both its id and its name.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from dexvault.core.scheduling import CancellationToken
from dexvault.services.name_index import NameIndex
from dexvault.services.pokeapi_client import PokeAPIClient
from dexvault.services.record_cache import CacheKey, RecordCache
from dexvault.shared.constants import CacheKeys
from dexvault.shared.errors import (
    DexVaultError,
    ErrorContext,
    OperationCancelledError,
    create_validation_error,
)
from dexvault.shared.logging import log_operation_error, log_operation_success
from dexvault.shared.models import (
    CompositeRecord,
    EvolutionChain,
    PokemonRecord,
    SpeciesRecord,
)

logger = logging.getLogger(__name__)

IdOrName = int | str


@dataclass(frozen=True)
class ResolveOutcome:
    """Settled result of one item in a batch."""

    query: IdOrName
    record: CompositeRecord | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _InFlight:
    """A running resolution and the tokens of everyone waiting on it."""

    task: asyncio.Task[CompositeRecord] | None = None
    tokens: list[CancellationToken | None] = field(default_factory=list)

    def abandoned(self) -> bool:
        return all(token is not None and token.cancelled for token in self.tokens)


def _consume_result(task: asyncio.Task[Any]) -> None:
    if not task.cancelled():
        # mark the exception as retrieved; waiters still attached re-raise it
        task.exception()


def normalize_query(id_or_name: IdOrName) -> IdOrName:
    """Return a positive int for numeric input, else a lowercased name.

    Raises:
        DomainError: For booleans, non-positive ids and blank names
    """
    if isinstance(id_or_name, bool):
        raise create_validation_error(
            "Identifier must be an int or a name",
            field="id_or_name",
            value=id_or_name,
        )
    if isinstance(id_or_name, str):
        text = id_or_name.strip()
        if not text:
            raise create_validation_error(
                "Name must not be blank",
                field="id_or_name",
                value=id_or_name,
            )
        if not text.isdigit():
            return text.lower()
        id_or_name = int(text)
    if id_or_name <= 0:
        raise create_validation_error(
            f"Identifier must be positive, got: {id_or_name}",
            field="id_or_name",
            value=id_or_name,
        )
    return id_or_name


class DataService:
    """Resolve composite records through the cache and the throttled client.

    Args:
        client: Catalog client (all its calls go through the throttle)
        cache: Shared record cache
        name_index: Index updated with every fetched name, if given
        dedupe_inflight: Let concurrent callers for the same key share
            one resolution instead of fetching twice
    """

    def __init__(
        self,
        client: PokeAPIClient,
        cache: RecordCache,
        name_index: NameIndex | None = None,
        *,
        dedupe_inflight: bool = True,
    ) -> None:
        self.client = client
        self.cache = cache
        self.name_index = name_index
        self.dedupe_inflight = dedupe_inflight
        self.current_id: int | None = None
        self._inflight: dict[CacheKey, _InFlight] = {}
        self._tasks: set[asyncio.Task[CompositeRecord]] = set()

    @staticmethod
    def cache_key(query: IdOrName) -> CacheKey:
        query = normalize_query(query)
        return query if isinstance(query, int) else CacheKeys.name(query)

    def is_cached(self, id_or_name: IdOrName) -> bool:
        return self.cache.has(self.cache_key(id_or_name))

    async def resolve(
        self,
        id_or_name: IdOrName,
        *,
        token: CancellationToken | None = None,
    ) -> CompositeRecord:
        """Return the composite record for an id or a name.

        Raises:
            DomainError: If the identifier is invalid
            DexVaultNetworkError: If any of the required calls fails
            DexVaultParsingError: If a payload lacks required fields
            OperationCancelledError: If ``token`` was cancelled; parts already
                fetched stay cached
        """
        query = normalize_query(id_or_name)
        key = query if isinstance(query, int) else CacheKeys.name(query)

        if token is not None:
            token.raise_if_cancelled("resolve")

        cached = self.cache.get(key)
        if cached is not None:
            if isinstance(query, str):
                self.current_id = cached.id
            logger.debug("Cache hit for %r", key)
            return cached

        flight = self._inflight.get(key) if self.dedupe_inflight else None
        if flight is None or flight.task is None or flight.task.done():
            flight = _InFlight(tokens=[token])
            flight.task = asyncio.create_task(self._assemble(query, flight))
            self._tasks.add(flight.task)
            flight.task.add_done_callback(self._tasks.discard)
            flight.task.add_done_callback(_consume_result)
            if self.dedupe_inflight:
                self._inflight[key] = flight
                flight.task.add_done_callback(
                    lambda _task, key=key, flight=flight: self._release(key, flight)
                )
        else:
            logger.debug("Joining in-flight resolution for %r", key)
            flight.tokens.append(token)

        record = await asyncio.shield(flight.task)
        if token is not None:
            token.raise_if_cancelled("resolve")
        return record

    def _release(self, key: CacheKey, flight: _InFlight) -> None:
        if self._inflight.get(key) is flight:
            del self._inflight[key]

    def _checkpoint(self, flight: _InFlight, step: str) -> None:
        if flight.abandoned():
            raise OperationCancelledError(
                context=ErrorContext(operation="resolve", additional_data={"step": step})
            )

    async def _pokemon_for(self, query: IdOrName) -> PokemonRecord:
        pokemon = self.cache.get(CacheKeys.pokemon(query))
        if pokemon is None:
            pokemon = await self.client.get_pokemon(query)
            self.cache.set(CacheKeys.pokemon(pokemon.id), pokemon)
            self.cache.set(CacheKeys.pokemon(pokemon.name), pokemon)
        return pokemon

    async def _species_for(self, pokemon: PokemonRecord) -> SpeciesRecord | None:
        species_id = pokemon.species_id
        if species_id is None:
            return None
        key = CacheKeys.species(species_id)
        species = self.cache.get(key)
        if species is None:
            species = await self.client.get_species(species_id)
            self.cache.set(key, species)
        return species

    async def _evolution_for(self, species: SpeciesRecord | None) -> EvolutionChain | None:
        chain_id = species.evolution_chain_id if species is not None else None
        if chain_id is None:
            return None
        key = CacheKeys.evolution(chain_id)
        evolution = self.cache.get(key)
        if evolution is None:
            evolution = await self.client.get_evolution_chain(chain_id)
            self.cache.set(key, evolution)
        return evolution

    async def _assemble(self, query: IdOrName, flight: _InFlight) -> CompositeRecord:
        started = time.monotonic()
        context = ErrorContext(
            operation="resolve",
            additional_data={"query": query},
        )
        try:
            pokemon = await self._pokemon_for(query)
            self._checkpoint(flight, "pokemon")

            species = await self._species_for(pokemon)
            self._checkpoint(flight, "species")

            evolution = await self._evolution_for(species)
            self._checkpoint(flight, "evolution")
        except OperationCancelledError:
            logger.debug("Resolution of %r abandoned", query)
            raise
        except DexVaultError as e:
            log_operation_error(
                logger=logger,
                error=e,
                operation="resolve",
                additional_context=context,
                level=logging.WARNING,
            )
            raise

        record = CompositeRecord(pokemon=pokemon, species=species, evolution=evolution)
        self.cache.set(record.id, record)
        self.cache.set(CacheKeys.name(record.name), record)
        if self.name_index is not None:
            self.name_index.register(record.name, record.id)

        log_operation_success(
            logger=logger,
            operation="resolve",
            duration_ms=(time.monotonic() - started) * 1000,
            result_info={"id": record.id, "name": record.name},
            context=context,
        )
        return record

    async def resolve_batch(
        self,
        ids: Iterable[IdOrName],
        *,
        token: CancellationToken | None = None,
    ) -> list[ResolveOutcome]:
        """Resolve every item independently and report each outcome in order.

        Per-item failures (including cancellation) are captured in the
        outcome; the batch itself never raises for them.
        """
        queries = list(ids)
        results = await asyncio.gather(
            *(self.resolve(query, token=token) for query in queries),
            return_exceptions=True,
        )

        outcomes = []
        for query, result in zip(queries, results):
            if isinstance(result, Exception):
                outcomes.append(ResolveOutcome(query=query, error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(ResolveOutcome(query=query, record=result))

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        if failed:
            logger.debug("Batch resolved %d of %d", len(outcomes) - failed, len(outcomes))
        return outcomes

    @property
    def inflight_tasks(self) -> frozenset[asyncio.Task[CompositeRecord]]:
        return frozenset(self._tasks)

    async def aclose(self) -> None:
        """Cancel resolutions that are still running and wait for them to settle."""
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d in-flight resolutions", len(tasks))
        self._tasks.clear()
        self._inflight.clear()
