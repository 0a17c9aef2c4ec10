"""
Reusable Typer Options Module

Options shared by the main callback and the commands.
"""

from __future__ import annotations

import typer

from dexvault.shared.constants import CLIHelp

verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
)

config_option = typer.Option(
    "--config",
    "-c",
    help=CLIHelp.CONFIG_HELP,
    exists=True,
    dir_okay=False,
    readable=True,
)

json_output_option = typer.Option(
    "--json",
    help=CLIHelp.JSON_HELP,
)

limit_option = typer.Option(
    "--limit",
    "-n",
    min=1,
    help=CLIHelp.LIMIT_HELP,
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)

__all__ = [
    "config_option",
    "json_output_option",
    "limit_option",
    "log_level_option",
    "verbose_option",
    "version_option",
]
