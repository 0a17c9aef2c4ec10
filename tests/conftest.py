"""
Pytest configuration and shared fixtures for DexVault tests.

The fixtures replace the HTTP transport with an in-memory catalog so that
services can be exercised end to end without network access.
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from dexvault.services import LocalStorage, PokeAPIClient, RecordCache, RequestThrottle
from dexvault.shared.errors import create_network_error

BASE_URL = "https://pokeapi.test/api/v2"


def pokemon_payload(
    pokemon_id: int,
    name: str,
    *,
    species_id: int | None = None,
    types: tuple[str, ...] = ("normal",),
    moves: tuple[str, ...] = ("tackle", "growl", "scratch", "ember", "leer"),
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": pokemon_id,
        "name": name,
        "height": 7,
        "weight": 69,
        "sprites": {
            "front_default": f"https://img.test/{pokemon_id}.png",
            "back_default": None,
            "other": {"official-artwork": {"front_default": f"https://art.test/{pokemon_id}.png"}},
        },
        # slots deliberately out of order
        "types": [
            {"slot": slot, "type": {"name": type_name, "url": ""}}
            for slot, type_name in reversed(list(enumerate(types, start=1)))
        ],
        "abilities": [{"ability": {"name": "overgrow"}, "is_hidden": False}],
        "moves": [{"move": {"name": move}} for move in moves],
    }
    if species_id is not None:
        payload["species"] = {
            "name": name,
            "url": f"{BASE_URL}/pokemon-species/{species_id}/",
        }
    return payload


def species_payload(
    species_id: int,
    name: str,
    *,
    chain_id: int | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": species_id,
        "name": name,
        "genera": [
            {"genus": "Seed Pokémon", "language": {"name": "en"}},
        ],
        "flavor_text_entries": [
            {
                "flavor_text": "Une graine\fbizarre.",
                "language": {"name": "fr"},
                "version": {"name": "red"},
            },
            {
                "flavor_text": f"A strange seed was\nplanted on\fits back ({name}).",
                "language": {"name": "en"},
                "version": {"name": "red"},
            },
        ],
    }
    if chain_id is not None:
        payload["evolution_chain"] = {"url": f"{BASE_URL}/evolution-chain/{chain_id}/"}
    return payload


def chain_payload(chain_id: int, line: list[str]) -> dict[str, Any]:
    node: dict[str, Any] | None = None
    for name in reversed(line):
        node = {
            "species": {"name": name, "url": ""},
            "evolves_to": [node] if node is not None else [],
        }
    return {"id": chain_id, "chain": node}


class FakeFetcher:
    """In-memory stand-in for ``HttpFetcher``.

    Unknown urls fail with a 404 network error. A url can be gated with an
    ``asyncio.Event`` to hold its response until the test releases it.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    def add(self, url: str, payload: Any) -> None:
        self.responses[url] = payload

    def count(self, url: str) -> int:
        return self.calls.count(url)

    async def fetch_json(self, url: str) -> Any:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        if url not in self.responses:
            raise create_network_error("Request failed with status 404", url, status=404)
        value = self.responses[url]
        if isinstance(value, BaseException):
            raise value
        return copy.deepcopy(value)

    async def aclose(self) -> None:
        self.closed = True

    def add_pokemon(
        self,
        pokemon_id: int,
        name: str,
        *,
        chain_id: int | None = None,
        line: list[str] | None = None,
        with_species: bool = True,
    ) -> None:
        """Register the three resources a composite record is built from."""
        species_id = pokemon_id if with_species else None
        payload = pokemon_payload(pokemon_id, name, species_id=species_id)
        self.add(f"{BASE_URL}/pokemon/{pokemon_id}", payload)
        self.add(f"{BASE_URL}/pokemon/{name}", payload)
        if species_id is None:
            return
        self.add(
            f"{BASE_URL}/pokemon-species/{species_id}",
            species_payload(species_id, name, chain_id=chain_id),
        )
        if chain_id is not None:
            self.add(f"{BASE_URL}/evolution-chain/{chain_id}", chain_payload(chain_id, line or [name]))

    def add_name_list(self, names: list[str], page_size: int) -> list[str]:
        """Serve ``names`` (ids 1..n) through the paginated list endpoint.

        Returns:
            The page urls in fetch order
        """
        total = len(names)
        results = [
            {"name": name, "url": f"{BASE_URL}/pokemon/{position}/"}
            for position, name in enumerate(names, start=1)
        ]
        self.add(
            f"{BASE_URL}/pokemon?limit=1",
            {"count": total, "results": results[:1], "next": f"{BASE_URL}/pokemon?offset=1&limit=1"},
        )

        urls = []
        for offset in range(0, max(total, 1), page_size):
            if offset == 0:
                url = f"{BASE_URL}/pokemon?limit={page_size}&offset=0"
            else:
                url = f"{BASE_URL}/pokemon?offset={offset}&limit={page_size}"
            following = offset + page_size
            next_url = (
                f"{BASE_URL}/pokemon?offset={following}&limit={page_size}"
                if following < total
                else None
            )
            self.add(
                url,
                {"count": total, "results": results[offset:following], "next": next_url},
            )
            urls.append(url)
        return urls


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def throttle(fetcher: FakeFetcher) -> RequestThrottle:
    return RequestThrottle(fetcher, min_interval=0)


@pytest.fixture
def client(throttle: RequestThrottle) -> PokeAPIClient:
    return PokeAPIClient(throttle, base_url=BASE_URL)


@pytest.fixture
def cache() -> RecordCache:
    return RecordCache(max_size=50, ttl=3600)


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


class ManualClock:
    """Settable clock for time-dependent tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_clock() -> type[ManualClock]:
    return ManualClock


@pytest.fixture
def payloads() -> SimpleNamespace:
    """Payload builders and the fake base url, for tests that build responses."""
    return SimpleNamespace(
        base_url=BASE_URL,
        pokemon=pokemon_payload,
        species=species_payload,
        chain=chain_payload,
    )
