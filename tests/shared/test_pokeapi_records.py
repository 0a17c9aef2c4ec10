"""Parsing of catalog payloads into records."""

import pytest

from dexvault.shared.errors import DexVaultParsingError, ErrorCode
from dexvault.shared.models import (
    CompositeRecord,
    EvolutionChain,
    ListPage,
    PokemonRecord,
    SpeciesRecord,
    clean_flavor_text,
    resource_id_from_url,
)


class TestHelpers:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://pokeapi.co/api/v2/pokemon-species/25/", 25),
            ("https://pokeapi.co/api/v2/evolution-chain/10", 10),
            ("https://pokeapi.co/api/v2/pokemon/", None),
            ("", None),
            (None, None),
        ],
    )
    def test_resource_id_from_url(self, url, expected):
        assert resource_id_from_url(url) == expected

    def test_clean_flavor_text(self):
        assert clean_flavor_text("A strange\fseed\nwas  planted.") == "A strange seed was planted."


class TestPokemonRecord:
    """Base entity parsing."""

    def test_parses_payload(self, payloads):
        payload = payloads.pokemon(1, "Bulbasaur", species_id=1, types=("grass", "poison"))

        record = PokemonRecord.from_api(payload)

        assert record.id == 1
        assert record.name == "bulbasaur"
        assert record.types == ("grass", "poison")
        assert record.primary_type == "grass"
        assert record.species_id == 1
        assert record.moves[:2] == ("tackle", "growl")
        assert record.sprites.best_front == "https://art.test/1.png"

    def test_optional_parts_may_be_absent(self):
        record = PokemonRecord.from_api({"id": 10001, "name": "deoxys-attack"})

        assert record.species_id is None
        assert record.types == ()
        assert record.primary_type == "normal"
        assert record.sprites.best_front is None
        assert record.height is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "bulbasaur"},
            {"id": "1", "name": "bulbasaur"},
            {"id": True, "name": "bulbasaur"},
            {"id": 1},
            ["not", "an", "object"],
        ],
    )
    def test_missing_required_fields(self, payload):
        with pytest.raises(DexVaultParsingError) as exc_info:
            PokemonRecord.from_api(payload)

        assert exc_info.value.code == ErrorCode.MISSING_REQUIRED_FIELD


class TestSpeciesRecord:
    def test_english_flavor_text_and_genus(self, payloads):
        record = SpeciesRecord.from_api(payloads.species(1, "bulbasaur", chain_id=1))

        assert record.flavor_text() == "A strange seed was planted on its back (bulbasaur)."
        assert record.flavor_text("fr") == "Une graine bizarre."
        assert record.flavor_text("de") is None
        assert record.genus == "Seed Pokémon"
        assert record.evolution_chain_id == 1

    def test_without_chain(self, payloads):
        record = SpeciesRecord.from_api(payloads.species(132, "ditto"))

        assert record.evolution_chain_id is None


class TestEvolutionChain:
    def test_linear_chain(self, payloads):
        chain = EvolutionChain.from_api(payloads.chain(1, ["bulbasaur", "ivysaur", "venusaur"]))

        assert chain.chain.primary_line() == ("bulbasaur", "ivysaur", "venusaur")

    def test_branching_chain_follows_first_branch(self):
        payload = {
            "id": 67,
            "chain": {
                "species": {"name": "eevee"},
                "evolves_to": [
                    {"species": {"name": "vaporeon"}, "evolves_to": []},
                    {"species": {"name": "jolteon"}, "evolves_to": []},
                ],
            },
        }

        chain = EvolutionChain.from_api(payload)

        assert chain.chain.primary_line() == ("eevee", "vaporeon")
        assert chain.chain.species_names() == ("eevee", "vaporeon", "jolteon")

    def test_missing_root_species(self):
        with pytest.raises(DexVaultParsingError):
            EvolutionChain.from_api({"id": 1, "chain": {"evolves_to": []}})


class TestListPage:
    def test_skips_malformed_results(self):
        page = ListPage.from_api(
            {
                "count": 3,
                "next": "",
                "results": [
                    {"name": "bulbasaur", "url": "https://pokeapi.co/api/v2/pokemon/1/"},
                    {"url": "https://pokeapi.co/api/v2/pokemon/2/"},
                    "venusaur",
                ],
            }
        )

        assert [r.name for r in page.results] == ["bulbasaur"]
        assert page.results[0].resource_id == 1
        assert page.next is None


class TestCompositeRecord:
    def test_delegates_to_parts(self, payloads):
        pokemon = PokemonRecord.from_api(payloads.pokemon(132, "ditto"))
        record = CompositeRecord(pokemon=pokemon)

        assert record.id == 132
        assert record.name == "ditto"
        assert record.flavor_text() is None
        assert record.evolution_line() == ()

    def test_records_are_frozen(self, payloads):
        record = PokemonRecord.from_api(payloads.pokemon(1, "bulbasaur"))

        with pytest.raises(AttributeError):
            record.name = "ivysaur"
