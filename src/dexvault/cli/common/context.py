"""
CLI Context Management Module

Global CLI state parsed by the main callback and read by the commands,
held in a ContextVar.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    CLI context model for managing global state.

    Attributes:
        verbose: Verbosity level (0 = normal, 1+ = verbose)
        log_level: Logging level
        config_path: Explicit TOML configuration file, if any
    """

    verbose: int = Field(default=0, ge=0)
    log_level: LogLevel | None = Field(default=None)
    config_path: Path | None = Field(default=None)

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self, configured: str) -> str:
        """Log level after applying the command line over ``configured``."""
        if self.is_verbose():
            return LogLevel.DEBUG.value
        if self.log_level is not None:
            return self.log_level.value
        return configured.upper()


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """
    Get the current CLI context.

    Returns a default context when the main callback has not run, so the
    command functions can also be called directly.
    """
    context = cli_context_var.get()
    if context is None:
        return CliContext()
    return context


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    cli_context_var.set(None)
