"""
DexVault Typer CLI Application

Commands:
- lookup: resolve a record by national dex number or name
- search: free-text search with typo tolerance
- index: load the name index and report its source
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from dexvault.cli.common.context import CliContext, LogLevel, set_cli_context
from dexvault.cli.common.options import (
    config_option,
    json_output_option,
    limit_option,
    log_level_option,
    verbose_option,
    version_option,
)
from dexvault.cli.index_handler import handle_index_command
from dexvault.cli.lookup_handler import handle_lookup_command
from dexvault.cli.search_handler import handle_search_command
from dexvault.shared.constants import CLIDefaults, CLIHelp

__version__ = CLIDefaults.VERSION


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{CLIHelp.APP_NAME} {__version__}")
        raise typer.Exit


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    invoke_without_command=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel | None, log_level_option] = None,
    config: Annotated[Path | None, config_option] = None,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Pokédex data access: cached lookups and fuzzy name search."""
    version_callback(version)
    set_cli_context(
        CliContext(
            verbose=verbose,
            log_level=log_level,
            config_path=config,
        )
    )


@app.command("lookup", help=CLIHelp.LOOKUP_HELP)
def lookup_command(
    id_or_name: Annotated[str, typer.Argument(help="National dex number or name.")],
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    Resolve a Pokémon and print its types, entry, abilities and evolution line.

    Examples:
        dexvault lookup 25
        dexvault lookup pikachu --json
    """
    exit_code = handle_lookup_command(id_or_name, json_output=json_output)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command("search", help=CLIHelp.SEARCH_HELP)
def search_command(
    query: Annotated[str, typer.Argument(help="Name, partial name or number.")],
    limit: Annotated[int | None, limit_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    Search the name index.

    A single confident match is resolved and printed; several matches
    are listed best first.

    Examples:
        dexvault search pikacu
        dexvault search "mega charizard" --limit 5
    """
    exit_code = handle_search_command(query, limit=limit, json_output=json_output)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command("index", help=CLIHelp.INDEX_HELP)
def index_command(
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    exit_code = handle_index_command(json_output=json_output)
    if exit_code:
        raise typer.Exit(exit_code)
