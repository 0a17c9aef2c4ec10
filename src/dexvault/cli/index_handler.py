"""Index command handler for the DexVault CLI."""

from __future__ import annotations

import asyncio
from typing import Any

from rich.console import Console

from dexvault.cli.common.context import get_cli_context
from dexvault.cli.common.error_handler import handle_cli_error
from dexvault.cli.common.runtime import build_container, open_session
from dexvault.cli.json_formatter import format_json_output, write_json_output
from dexvault.shared.constants import CLIDefaults

COMMAND = "index"


async def _load_index() -> dict[str, Any]:
    container = build_container(get_cli_context())
    async with open_session(container) as session:
        await session.load()
        index = session.name_index
        return {
            "size": index.size,
            "total": index.total,
            "source": index.source,
            "storage": str(index.storage.directory),
        }


def handle_index_command(*, json_output: bool = False) -> int:
    try:
        summary = asyncio.run(_load_index())
    except Exception as e:  # noqa: BLE001
        return handle_cli_error(e, COMMAND, json_output=json_output)

    if json_output:
        write_json_output(format_json_output(True, COMMAND, data=summary))
    else:
        Console().print(
            f"[green]{summary['size']}[/green] names indexed "
            f"(remote count {summary['total']}, loaded from {summary['source']})"
        )
    return CLIDefaults.EXIT_SUCCESS
