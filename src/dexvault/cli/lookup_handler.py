"""Lookup command handler for the DexVault CLI."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console

from dexvault.cli.common.context import get_cli_context
from dexvault.cli.common.error_handler import handle_cli_error
from dexvault.cli.common.runtime import build_container, open_session
from dexvault.cli.formatting import record_to_dict, render_record
from dexvault.cli.json_formatter import format_json_output, write_json_output
from dexvault.shared.constants import CLIDefaults
from dexvault.shared.models import CompositeRecord

logger = logging.getLogger(__name__)

COMMAND = "lookup"


async def _lookup(id_or_name: str) -> CompositeRecord:
    container = build_container(get_cli_context())
    async with open_session(container) as session:
        return await session.data_service.resolve(id_or_name)


def handle_lookup_command(id_or_name: str, *, json_output: bool = False) -> int:
    """Resolve one record and print it.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        record = asyncio.run(_lookup(id_or_name))
    except Exception as e:  # noqa: BLE001
        return handle_cli_error(e, COMMAND, json_output=json_output)

    if json_output:
        write_json_output(format_json_output(True, COMMAND, data=record_to_dict(record)))
    else:
        render_record(Console(), record)
    return CLIDefaults.EXIT_SUCCESS
