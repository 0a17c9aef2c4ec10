"""Typed records for catalog responses."""

from .pokeapi import (
    CompositeRecord,
    EvolutionChain,
    EvolutionNode,
    FlavorTextEntry,
    ListPage,
    NameIndexEntry,
    NamedResource,
    PokemonRecord,
    SpeciesRecord,
    Sprites,
    clean_flavor_text,
    resource_id_from_url,
)

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
