"""Typed client for the PokeAPI catalog.

Every call goes through the ``RequestThrottle``; payloads are turned into
records at this boundary.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from dexvault.services.request_throttle import RequestThrottle
from dexvault.shared.constants import PokeAPIConfig, PokeAPIEndpoints
from dexvault.shared.models import (
    EvolutionChain,
    ListPage,
    PokemonRecord,
    SpeciesRecord,
)

logger = logging.getLogger(__name__)


class PokeAPIClient:
    """Build endpoint urls and parse responses into records."""

    def __init__(
        self,
        throttle: RequestThrottle,
        base_url: str = PokeAPIConfig.BASE_URL,
    ) -> None:
        self.throttle = throttle
        self.base_url = base_url.rstrip("/")

    def url_for(self, endpoint: str, key: int | str | None = None, **params: int) -> str:
        """Return the absolute url of ``endpoint[/key][?params]``.

        Example:
            >>> client.url_for("pokemon", limit=1)
            'https://pokeapi.co/api/v2/pokemon?limit=1'
        """
        url = f"{self.base_url}/{endpoint}"
        if key is not None:
            url = f"{url}/{key}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def get_pokemon(self, id_or_name: int | str) -> PokemonRecord:
        key = id_or_name if isinstance(id_or_name, int) else id_or_name.strip().lower()
        payload = await self.throttle.enqueue(self.url_for(PokeAPIEndpoints.POKEMON, key))
        return PokemonRecord.from_api(payload)

    async def get_species(self, species_id: int) -> SpeciesRecord:
        payload = await self.throttle.enqueue(
            self.url_for(PokeAPIEndpoints.SPECIES, species_id)
        )
        return SpeciesRecord.from_api(payload)

    async def get_evolution_chain(self, chain_id: int) -> EvolutionChain:
        payload = await self.throttle.enqueue(
            self.url_for(PokeAPIEndpoints.EVOLUTION_CHAIN, chain_id)
        )
        return EvolutionChain.from_api(payload)

    async def get_page(self, url: str) -> ListPage:
        """Fetch a list page by absolute url (as found in ``next``)."""
        if not url.startswith(("http://", "https://")):
            url = f"{self.base_url}/{url.lstrip('/')}"
        return ListPage.from_api(await self.throttle.enqueue(url))

    async def get_pokemon_page(self, limit: int, offset: int = 0) -> ListPage:
        return await self.get_page(
            self.url_for(PokeAPIEndpoints.POKEMON, limit=limit, offset=offset)
        )

    async def get_count(self) -> int:
        """Return the catalog size using a one-item page."""
        page = await self.get_page(self.url_for(PokeAPIEndpoints.POKEMON, limit=1))
        logger.debug("Remote catalog reports %d entries", page.count)
        return page.count
