"""End-to-end CLI tests over an in-memory catalog."""

import orjson
import pytest
from dependency_injector import providers
from typer.testing import CliRunner

from dexvault.cli.common.context import clear_cli_context
from dexvault.cli.typer_app import app
from dexvault.config import Settings
from dexvault.containers import Container

CATALOG = ["bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon", "charizard"]

runner = CliRunner()


@pytest.fixture
def settings(tmp_path, payloads):
    return Settings(
        api={"pokeapi": {"base_url": payloads.base_url, "min_request_interval": 0, "page_size": 4}},
        storage={"directory": str(tmp_path / "store")},
        logging={"file": "", "console_output": False},
    )


@pytest.fixture(autouse=True)
def offline_container(mocker, settings, fetcher):
    """Route every command through a container backed by the fake transport."""
    fetcher.add_name_list(CATALOG, page_size=4)
    for pokemon_id, name in enumerate(CATALOG, start=1):
        line = CATALOG[:3] if pokemon_id <= 3 else CATALOG[3:]
        fetcher.add_pokemon(pokemon_id, name, chain_id=1 if pokemon_id <= 3 else 2, line=line)

    def build(context):
        container = Container()
        container.config.override(providers.Object(settings))
        container.http_fetcher.override(providers.Object(fetcher))
        return container

    for module in ("lookup_handler", "search_handler", "index_handler"):
        mocker.patch(f"dexvault.cli.{module}.build_container", side_effect=build)
    yield
    clear_cli_context()


def envelope(result):
    return orjson.loads(result.stdout)


class TestLookupCommand:
    """``dexvault lookup``"""

    def test_json_output(self):
        result = runner.invoke(app, ["lookup", "bulbasaur", "--json"])

        assert result.exit_code == 0
        body = envelope(result)
        assert body["success"] is True
        assert body["command"] == "lookup"
        assert body["errors"] == []
        assert body["data"]["id"] == 1
        assert body["data"]["evolution_line"] == ["bulbasaur", "ivysaur", "venusaur"]
        assert body["data"]["moves"] == ["tackle", "growl", "scratch", "ember"]

    def test_rich_output(self):
        result = runner.invoke(app, ["lookup", "4"])

        assert result.exit_code == 0
        assert "Charmander" in result.stdout

    def test_not_found_exit_code(self):
        result = runner.invoke(app, ["lookup", "9999", "--json"])

        assert result.exit_code == 2
        body = envelope(result)
        assert body["success"] is False
        assert body["data"]["error_code"] == "RESOURCE_NOT_FOUND"

    def test_invalid_identifier(self):
        result = runner.invoke(app, ["lookup", "0", "--json"])

        assert result.exit_code == 1
        assert envelope(result)["data"]["error_code"] == "VALIDATION_ERROR"


class TestSearchCommand:
    """``dexvault search``"""

    def test_suggestions(self):
        result = runner.invoke(app, ["search", "char", "--json"])

        assert result.exit_code == 0
        data = envelope(result)["data"]
        assert data["kind"] == "suggestions"
        assert data["suggestions"] == ["charizard", "charmander", "charmeleon"]

    def test_limit_trims_suggestions(self):
        result = runner.invoke(app, ["search", "char", "--limit", "1", "--json"])

        data = envelope(result)["data"]
        assert data["suggestions"] == ["charizard"]
        assert data["total_suggestions"] == 3

    def test_typo_resolves_single_match(self):
        result = runner.invoke(app, ["search", "bulbsaur", "--json"])

        assert result.exit_code == 0
        data = envelope(result)["data"]
        assert data["kind"] == "record"
        assert data["record"]["name"] == "bulbasaur"

    def test_out_of_range(self):
        result = runner.invoke(app, ["search", "25", "--json"])

        assert result.exit_code == 2
        body = envelope(result)
        assert body["data"]["kind"] == "out_of_range"
        assert body["warnings"] == ["Pokémon #25 out of range."]

    def test_not_found_plain_output(self):
        result = runner.invoke(app, ["search", "zzzz"])

        assert result.exit_code == 2
        assert "not found" in result.stdout

    def test_blank_query(self):
        result = runner.invoke(app, ["search", "  ", "--json"])

        assert result.exit_code == 1
        assert envelope(result)["data"]["kind"] == "empty"


class TestIndexCommand:
    """``dexvault index``"""

    def test_second_run_reads_storage(self, fetcher, payloads):
        first = runner.invoke(app, ["index", "--json"])
        fetcher.calls.clear()
        second = runner.invoke(app, ["index", "--json"])

        assert first.exit_code == 0
        assert envelope(first)["data"]["source"] == "remote"
        assert envelope(second)["data"]["source"] == "storage"
        assert envelope(second)["data"]["size"] == 6
        assert fetcher.calls == [f"{payloads.base_url}/pokemon?limit=1"]


class TestAppOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "dexvault 0.1.0" in result.stdout

    def test_missing_config_file_is_rejected(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "absent.toml"), "index"])

        assert result.exit_code != 0
