"""DataService composite resolution tests."""

import asyncio
import gc

import pytest

from dexvault.core.scheduling import CancellationToken
from dexvault.services.data_service import DataService, normalize_query
from dexvault.services.name_index import NameIndex
from dexvault.shared.errors import (
    DexVaultNetworkError,
    DomainError,
    ErrorCode,
    OperationCancelledError,
)

BULBASAUR_LINE = ["bulbasaur", "ivysaur", "venusaur"]


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def service(client, cache):
    return DataService(client, cache)


class TestNormalizeQuery:
    """Identifier validation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(25, 25), ("25", 25), (" 007 ", 7), ("Pikachu ", "pikachu"), ("Mr-Mime", "mr-mime")],
    )
    def test_accepts(self, raw, expected):
        assert normalize_query(raw) == expected

    @pytest.mark.parametrize("raw", [0, -3, "0", "", "   ", True])
    def test_rejects(self, raw):
        with pytest.raises(DomainError) as exc_info:
            normalize_query(raw)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR


class TestResolve:
    """Single resolution."""

    @pytest.mark.asyncio
    async def test_builds_composite_record(self, fetcher, service, payloads):
        """Base entity, species and evolution are fetched in order."""
        # Given
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1, line=BULBASAUR_LINE)

        # When
        record = await service.resolve(1)

        # Then
        assert record.id == 1
        assert record.name == "bulbasaur"
        assert record.species.genus == "Seed Pokémon"
        assert record.evolution_line() == tuple(BULBASAUR_LINE)
        assert record.flavor_text() == "A strange seed was planted on its back (bulbasaur)."
        assert fetcher.calls == [
            f"{payloads.base_url}/pokemon/1",
            f"{payloads.base_url}/pokemon-species/1",
            f"{payloads.base_url}/evolution-chain/1",
        ]

    @pytest.mark.asyncio
    async def test_name_then_id_returns_same_object(self, fetcher, service):
        """A record fetched by name is served by id without any new call."""
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1, line=BULBASAUR_LINE)

        by_name = await service.resolve("Bulbasaur")
        calls = len(fetcher.calls)
        by_id = await service.resolve(1)
        by_digits = await service.resolve("1")

        assert by_id is by_name
        assert by_digits is by_name
        assert len(fetcher.calls) == calls
        assert service.current_id is None

    @pytest.mark.asyncio
    async def test_cached_name_hit_sets_current_id(self, fetcher, service):
        """Serving a name from the cache tracks the id being viewed."""
        fetcher.add_pokemon(4, "charmander", chain_id=2)
        await service.resolve(4)

        await service.resolve("charmander")

        assert service.current_id == 4

    @pytest.mark.asyncio
    async def test_species_and_chain_shared_between_records(self, fetcher, service, payloads):
        """Sub-records are cached independently of the composite."""
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1, line=BULBASAUR_LINE)
        fetcher.add_pokemon(2, "ivysaur", chain_id=1, line=BULBASAUR_LINE)

        await service.resolve(1)
        second = await service.resolve(2)

        assert fetcher.count(f"{payloads.base_url}/evolution-chain/1") == 1
        assert second.evolution_line() == tuple(BULBASAUR_LINE)

    @pytest.mark.asyncio
    async def test_missing_species_reference(self, fetcher, service, payloads):
        """An entity without species gets neither species nor evolution."""
        fetcher.add_pokemon(10001, "deoxys-attack", with_species=False)

        record = await service.resolve(10001)

        assert record.species is None
        assert record.evolution is None
        assert record.flavor_text() is None
        assert fetcher.calls == [f"{payloads.base_url}/pokemon/10001"]

    @pytest.mark.asyncio
    async def test_missing_evolution_reference(self, fetcher, service):
        """A species without a chain yields an empty evolution line."""
        fetcher.add_pokemon(132, "ditto")

        record = await service.resolve(132)

        assert record.species is not None
        assert record.evolution is None
        assert record.evolution_line() == ()

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self, fetcher, service, cache, payloads):
        """A failed species call rejects the resolve and caches no composite."""
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1)
        del fetcher.responses[f"{payloads.base_url}/pokemon-species/1"]

        with pytest.raises(DexVaultNetworkError):
            await service.resolve(1)

        assert not cache.has(1)
        assert not service.is_cached("bulbasaur")

    @pytest.mark.asyncio
    async def test_registers_name_in_index(self, fetcher, client, cache, storage):
        """Every fetched name becomes searchable."""
        index = NameIndex(client, storage)
        service = DataService(client, cache, index)
        fetcher.add_pokemon(25, "pikachu")

        await service.resolve("pikachu")

        assert index.lookup("pikachu") == 25


class TestResolveConcurrency:
    """Cancellation and in-flight sharing."""

    @pytest.mark.asyncio
    async def test_cancelled_token_before_start(self, fetcher, service):
        """Nothing is fetched for an already cancelled caller."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            await service.resolve(1, token=token)

        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_cancellation_keeps_fetched_parts(self, fetcher, service, cache, payloads):
        """Abandoning mid-way leaves finished sub-records cached."""
        # Given
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1, line=BULBASAUR_LINE)
        species_url = f"{payloads.base_url}/pokemon-species/1"
        fetcher.gates[species_url] = asyncio.Event()
        token = CancellationToken()
        task = asyncio.create_task(service.resolve(1, token=token))
        await settle()

        # When
        token.cancel()
        fetcher.gates[species_url].set()

        # Then
        with pytest.raises(OperationCancelledError):
            await task
        assert cache.has("species_1")
        assert not cache.has(1)
        assert fetcher.count(f"{payloads.base_url}/evolution-chain/1") == 0

    @pytest.mark.asyncio
    async def test_cancellation_keeps_base_record(self, fetcher, service, cache, payloads):
        """A base record fetched before cancellation is not fetched again."""
        # Given
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1, line=BULBASAUR_LINE)
        species_url = f"{payloads.base_url}/pokemon-species/1"
        fetcher.gates[species_url] = asyncio.Event()
        token = CancellationToken()
        task = asyncio.create_task(service.resolve(1, token=token))
        await settle()
        token.cancel()
        fetcher.gates[species_url].set()
        with pytest.raises(OperationCancelledError):
            await task

        # When
        record = await service.resolve(1)

        # Then
        assert record.name == "bulbasaur"
        assert cache.has("pokemon_1")
        assert fetcher.count(f"{payloads.base_url}/pokemon/1") == 1
        assert fetcher.count(species_url) == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self, fetcher, service, payloads):
        """Two resolves for the same id issue one set of calls."""
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1)

        first, second = await asyncio.gather(service.resolve(1), service.resolve(1))

        assert first is second
        assert fetcher.count(f"{payloads.base_url}/pokemon/1") == 1

    @pytest.mark.asyncio
    async def test_one_cancelled_waiter_does_not_abandon_shared_work(self, fetcher, service, payloads):
        """The shared resolution continues while any waiter still wants it."""
        # Given
        fetcher.add_pokemon(1, "bulbasaur", chain_id=1)
        species_url = f"{payloads.base_url}/pokemon-species/1"
        fetcher.gates[species_url] = asyncio.Event()
        token = CancellationToken()
        cancelled = asyncio.create_task(service.resolve(1, token=token))
        await settle()
        kept = asyncio.create_task(service.resolve(1))
        await settle()

        # When
        token.cancel()
        fetcher.gates[species_url].set()

        # Then
        with pytest.raises(OperationCancelledError):
            await cancelled
        record = await kept
        assert record.id == 1

    @pytest.mark.asyncio
    async def test_without_dedupe_each_caller_fetches(self, fetcher, client, cache, payloads):
        service = DataService(client, cache, dedupe_inflight=False)
        fetcher.add_pokemon(1, "bulbasaur")

        await asyncio.gather(service.resolve(1), service.resolve(1))

        assert fetcher.count(f"{payloads.base_url}/pokemon/1") == 2


class TestShutdown:
    """Resolutions left running when their callers go away."""

    @pytest.mark.asyncio
    async def test_aclose_cancels_running_resolutions(self, fetcher, service, payloads):
        # Given
        fetcher.add_pokemon(1, "bulbasaur")
        pokemon_url = f"{payloads.base_url}/pokemon/1"
        fetcher.gates[pokemon_url] = asyncio.Event()
        caller = asyncio.create_task(service.resolve(1))
        await settle()
        running = service.inflight_tasks

        # When
        caller.cancel()
        await service.aclose()

        # Then
        assert len(running) == 1
        assert all(task.cancelled() for task in running)
        assert service.inflight_tasks == frozenset()
        with pytest.raises(asyncio.CancelledError):
            await caller
        fetcher.gates[pokemon_url].set()
        await settle()

    @pytest.mark.asyncio
    async def test_abandoned_failure_is_not_reported_as_unretrieved(
        self, fetcher, service, throttle, payloads
    ):
        """A shared resolution that fails after its caller left is still consumed."""
        # Given
        reports = []
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, context: reports.append(context))
        fetcher.add_pokemon(1, "bulbasaur")
        pokemon_url = f"{payloads.base_url}/pokemon/1"
        fetcher.gates[pokemon_url] = asyncio.Event()
        caller = asyncio.create_task(service.resolve(1))
        await settle()
        (orphan,) = service.inflight_tasks
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        try:
            # When
            await throttle.aclose()
            await settle()

            # Then
            assert orphan.done()
            assert service.inflight_tasks == frozenset()
            del orphan
            gc.collect()
            assert reports == []
        finally:
            loop.set_exception_handler(None)


class TestResolveBatch:
    """Settled batch resolution."""

    @pytest.mark.asyncio
    async def test_partial_failure_reports_each_item(self, fetcher, service):
        """Failures are captured per item, in input order."""
        fetcher.add_pokemon(1, "bulbasaur")
        fetcher.add_pokemon(4, "charmander")

        outcomes = await service.resolve_batch([1, 9999, 4, 0])

        assert [o.query for o in outcomes] == [1, 9999, 4, 0]
        assert [o.ok for o in outcomes] == [True, False, True, False]
        assert outcomes[0].record.name == "bulbasaur"
        assert outcomes[1].error.code == ErrorCode.RESOURCE_NOT_FOUND
        assert isinstance(outcomes[3].error, DomainError)

    @pytest.mark.asyncio
    async def test_empty_batch(self, service):
        assert await service.resolve_batch([]) == []
