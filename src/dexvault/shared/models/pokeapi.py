"""PokeAPI Record Models.

Typed records for the upstream catalog responses. Payloads are validated
once at the API boundary: fields the rest of the system relies on (``id``,
``name``) are required and raise ``DexVaultParsingError`` when missing,
while references that some entities legitimately lack (species, evolution
chain, back sprite) are optional and simply become ``None``.

All records are frozen so a cached composite can be shared by every caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from dexvault.shared.errors import create_parsing_error
from dexvault.shared.types.base import BaseDataclass


def resource_id_from_url(url: str | None) -> int | None:
    """Extract the trailing numeric id of a resource url.

    Example:
        >>> resource_id_from_url("https://pokeapi.co/api/v2/pokemon-species/25/")
        25
    """
    if not url:
        return None
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    return int(segment) if segment.isdigit() else None


def clean_flavor_text(text: str) -> str:
    """Collapse form feeds, newlines and repeated whitespace."""
    text = text.replace("\f", " ").replace("\n", " ").replace("\r", " ")
    return " ".join(text.split())


def _require(payload: Any, key: str, expected: type, record: str) -> Any:
    if not isinstance(payload, dict):
        raise create_parsing_error(
            f"{record} payload must be an object, got {type(payload).__name__}",
            field=key,
            operation=f"parse_{record}",
        )
    value = payload.get(key)
    # bool is an int subclass and never a valid id
    if not isinstance(value, expected) or isinstance(value, bool):
        raise create_parsing_error(
            f"{record} payload is missing required field '{key}'",
            field=key,
            operation=f"parse_{record}",
        )
    return value


def _nested_name(item: Any, key: str) -> str | None:
    if not isinstance(item, dict):
        return None
    inner = item.get(key)
    if isinstance(inner, dict) and isinstance(inner.get("name"), str):
        return inner["name"]
    return None


@dataclass(frozen=True)
class NamedResource(BaseDataclass):
    """A ``{name, url}`` reference as returned by list endpoints."""

    name: str
    url: str

    @property
    def resource_id(self) -> int | None:
        return resource_id_from_url(self.url)


@dataclass(frozen=True)
class ListPage(BaseDataclass):
    """One page of a paginated collection."""

    count: int
    results: tuple[NamedResource, ...] = ()
    next: str | None = None

    @classmethod
    def from_api(cls, payload: Any) -> ListPage:
        count = _require(payload, "count", int, "list_page")
        results = []
        for item in payload.get("results") or []:
            if isinstance(item, dict) and isinstance(item.get("name"), str):
                results.append(NamedResource(name=item["name"], url=str(item.get("url") or "")))
        next_url = payload.get("next")
        return cls(
            count=count,
            results=tuple(results),
            next=next_url if isinstance(next_url, str) and next_url else None,
        )


@dataclass(frozen=True)
class Sprites(BaseDataclass):
    """Sprite urls; any of them may be absent."""

    front_default: str | None = None
    back_default: str | None = None
    official_artwork: str | None = None

    @classmethod
    def from_api(cls, payload: Any) -> Sprites:
        if not isinstance(payload, dict):
            return cls()
        other = payload.get("other")
        artwork = other.get("official-artwork") if isinstance(other, dict) else None
        return cls(
            front_default=payload.get("front_default"),
            back_default=payload.get("back_default"),
            official_artwork=artwork.get("front_default") if isinstance(artwork, dict) else None,
        )

    @property
    def best_front(self) -> str | None:
        return self.official_artwork or self.front_default


@dataclass(frozen=True)
class PokemonRecord(BaseDataclass):
    """Base entity from ``/pokemon/{idOrName}``."""

    id: int
    name: str
    species_url: str | None = None
    sprites: Sprites = field(default_factory=Sprites)
    types: tuple[str, ...] = ()
    abilities: tuple[str, ...] = ()
    moves: tuple[str, ...] = ()
    height: int | None = None
    weight: int | None = None

    @classmethod
    def from_api(cls, payload: Any) -> PokemonRecord:
        pokemon_id = _require(payload, "id", int, "pokemon")
        name = _require(payload, "name", str, "pokemon")

        raw_types = [t for t in payload.get("types") or [] if isinstance(t, dict)]
        raw_types.sort(key=lambda t: t.get("slot") or 0)
        types = tuple(n for n in (_nested_name(t, "type") for t in raw_types) if n)
        abilities = tuple(
            n for n in (_nested_name(a, "ability") for a in payload.get("abilities") or []) if n
        )
        moves = tuple(n for n in (_nested_name(m, "move") for m in payload.get("moves") or []) if n)

        species = payload.get("species")
        species_url = species.get("url") if isinstance(species, dict) else None

        height = payload.get("height")
        weight = payload.get("weight")
        return cls(
            id=pokemon_id,
            name=name.lower(),
            species_url=species_url or None,
            sprites=Sprites.from_api(payload.get("sprites")),
            types=types,
            abilities=abilities,
            moves=moves,
            height=height if isinstance(height, int) else None,
            weight=weight if isinstance(weight, int) else None,
        )

    @property
    def species_id(self) -> int | None:
        return resource_id_from_url(self.species_url)

    @property
    def primary_type(self) -> str:
        return self.types[0] if self.types else "normal"


@dataclass(frozen=True)
class FlavorTextEntry(BaseDataclass):
    """A Pokédex entry in one language for one game version."""

    text: str
    language: str
    version: str | None = None


@dataclass(frozen=True)
class SpeciesRecord(BaseDataclass):
    """Species metadata from ``/pokemon-species/{id}``."""

    id: int
    name: str
    flavor_text_entries: tuple[FlavorTextEntry, ...] = ()
    evolution_chain_url: str | None = None
    genus: str | None = None

    @classmethod
    def from_api(cls, payload: Any) -> SpeciesRecord:
        species_id = _require(payload, "id", int, "species")
        name = _require(payload, "name", str, "species")

        entries = []
        for entry in payload.get("flavor_text_entries") or []:
            if not isinstance(entry, dict) or not isinstance(entry.get("flavor_text"), str):
                continue
            language = _nested_name(entry, "language")
            if language is None:
                continue
            entries.append(
                FlavorTextEntry(
                    text=entry["flavor_text"],
                    language=language,
                    version=_nested_name(entry, "version"),
                )
            )

        genus = None
        for item in payload.get("genera") or []:
            if _nested_name(item, "language") == "en" and isinstance(item.get("genus"), str):
                genus = item["genus"]
                break

        chain = payload.get("evolution_chain")
        chain_url = chain.get("url") if isinstance(chain, dict) else None
        return cls(
            id=species_id,
            name=name.lower(),
            flavor_text_entries=tuple(entries),
            evolution_chain_url=chain_url or None,
            genus=genus,
        )

    @property
    def evolution_chain_id(self) -> int | None:
        return resource_id_from_url(self.evolution_chain_url)

    def flavor_text(self, language: str = "en") -> str | None:
        """Return the first entry in ``language`` with whitespace cleaned."""
        for entry in self.flavor_text_entries:
            if entry.language == language:
                return clean_flavor_text(entry.text)
        return None


@dataclass(frozen=True)
class EvolutionNode(BaseDataclass):
    """One species in an evolution tree and the species it evolves into."""

    species_name: str
    evolves_to: tuple[EvolutionNode, ...] = ()

    @classmethod
    def from_api(cls, payload: Any) -> EvolutionNode:
        species = _require(payload, "species", dict, "evolution_node")
        name = _require(species, "name", str, "evolution_node")
        children = tuple(
            cls.from_api(child)
            for child in payload.get("evolves_to") or []
            if isinstance(child, dict)
        )
        return cls(species_name=name.lower(), evolves_to=children)

    def primary_line(self) -> tuple[str, ...]:
        """Names along the first branch, root first."""
        line = [self.species_name]
        if self.evolves_to:
            line.extend(self.evolves_to[0].primary_line())
        return tuple(line)

    def species_names(self) -> tuple[str, ...]:
        """Every species in the tree, depth-first."""
        names = [self.species_name]
        for child in self.evolves_to:
            names.extend(child.species_names())
        return tuple(names)


@dataclass(frozen=True)
class EvolutionChain(BaseDataclass):
    """Evolution chain from ``/evolution-chain/{id}``."""

    id: int
    chain: EvolutionNode

    @classmethod
    def from_api(cls, payload: Any) -> EvolutionChain:
        chain_id = _require(payload, "id", int, "evolution_chain")
        root = _require(payload, "chain", dict, "evolution_chain")
        return cls(id=chain_id, chain=EvolutionNode.from_api(root))


@dataclass(frozen=True)
class CompositeRecord(BaseDataclass):
    """Base entity with its species metadata and evolution chain attached."""

    pokemon: PokemonRecord
    species: SpeciesRecord | None = None
    evolution: EvolutionChain | None = None

    @property
    def id(self) -> int:
        return self.pokemon.id

    @property
    def name(self) -> str:
        return self.pokemon.name

    def flavor_text(self, language: str = "en") -> str | None:
        if self.species is None:
            return None
        return self.species.flavor_text(language)

    def evolution_line(self) -> tuple[str, ...]:
        if self.evolution is None:
            return ()
        return self.evolution.chain.primary_line()


@dataclass(frozen=True)
class NameIndexEntry(BaseDataclass):
    """Lowercased name and national dex id."""

    name: str
    id: int


__all__ = [
    "CompositeRecord",
    "EvolutionChain",
    "EvolutionNode",
    "FlavorTextEntry",
    "ListPage",
    "NameIndexEntry",
    "NamedResource",
    "PokemonRecord",
    "SpeciesRecord",
    "Sprites",
    "clean_flavor_text",
    "resource_id_from_url",
]
