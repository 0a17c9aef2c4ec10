"""Search command handler for the DexVault CLI.

Runs the same search flow an interactive front end uses: numbers are
range-checked, exact names resolve directly, and anything else is ranked
by the fuzzy matcher.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rich.console import Console

from dexvault.cli.common.context import get_cli_context
from dexvault.cli.common.error_handler import handle_cli_error
from dexvault.cli.common.runtime import build_container, open_session
from dexvault.cli.formatting import record_to_dict, render_record, render_suggestions
from dexvault.cli.json_formatter import format_json_output, write_json_output
from dexvault.services import SearchOutcome, SearchOutcomeKind
from dexvault.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)

COMMAND = "search"

_EXIT_CODES = {
    SearchOutcomeKind.RECORD: CLIDefaults.EXIT_SUCCESS,
    SearchOutcomeKind.SUGGESTIONS: CLIDefaults.EXIT_SUCCESS,
    SearchOutcomeKind.EMPTY: CLIDefaults.EXIT_ERROR,
    SearchOutcomeKind.OUT_OF_RANGE: CLIDefaults.EXIT_NOT_FOUND,
    SearchOutcomeKind.NOT_FOUND: CLIDefaults.EXIT_NOT_FOUND,
}


async def _search(query: str) -> tuple[SearchOutcome, int]:
    container = build_container(get_cli_context())
    async with open_session(container) as session:
        if query.strip():
            await session.load()
        outcome = await session.search(query, preload=False)
        return outcome, session.suggestion_limit


def outcome_to_dict(outcome: SearchOutcome, limit: int) -> dict[str, Any]:
    return {
        "kind": outcome.kind.value,
        "query": outcome.query,
        "message": outcome.message,
        "record": record_to_dict(outcome.record) if outcome.record else None,
        "suggestions": list(outcome.suggestions[:limit]),
        "total_suggestions": len(outcome.suggestions),
    }


def handle_search_command(
    query: str,
    *,
    limit: int | None = None,
    json_output: bool = False,
) -> int:
    """Search for ``query`` and print a record or ranked suggestions.

    Returns:
        Exit code (0 for a record or suggestions, non-zero otherwise)
    """
    try:
        outcome, default_limit = asyncio.run(_search(query))
    except Exception as e:  # noqa: BLE001
        return handle_cli_error(e, COMMAND, json_output=json_output)

    limit = limit or default_limit
    exit_code = _EXIT_CODES[outcome.kind]

    if json_output:
        warnings = [] if exit_code == CLIDefaults.EXIT_SUCCESS else [outcome.message or ""]
        write_json_output(
            format_json_output(
                exit_code == CLIDefaults.EXIT_SUCCESS,
                COMMAND,
                data=outcome_to_dict(outcome, limit),
                warnings=warnings,
            )
        )
        return exit_code

    console = Console()
    if outcome.kind is SearchOutcomeKind.RECORD and outcome.record is not None:
        render_record(console, outcome.record)
    elif outcome.kind is SearchOutcomeKind.SUGGESTIONS:
        render_suggestions(console, outcome.query, outcome.suggestion_page(0, limit))
        hidden = len(outcome.suggestions) - limit
        if hidden > 0:
            console.print(f"[dim]… and {hidden} more[/dim]")
    else:
        console.print(f"[yellow]{outcome.message}[/yellow]")
    return exit_code
