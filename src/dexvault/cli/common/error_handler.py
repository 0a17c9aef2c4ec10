"""
CLI Error Handling Utilities

Maps exceptions raised by commands to exit codes and prints them either
as a short message on stderr or as a JSON error envelope.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from dexvault.cli.json_formatter import format_json_output, write_json_output
from dexvault.shared.constants import CLIDefaults
from dexvault.shared.errors import (
    ApplicationError,
    CliError,
    DexVaultError,
    DomainError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    OperationCancelledError,
)
from dexvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


def create_cli_error(
    message: str,
    command: str,
    *,
    code: ErrorCode = ErrorCode.CLI_COMMAND_FAILED,
    original_error: BaseException | None = None,
    exit_code: int = CLIDefaults.EXIT_ERROR,
) -> CliError:
    return CliError(
        code=code,
        message=message,
        context=ErrorContext(operation=command),
        original_error=original_error,
        exit_code=exit_code,
    )


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle a command failure with consistent logging and output.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to print a JSON error envelope

    Returns:
        Exit code for the CLI command
    """
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
    }
    cli_error = _map_error_to_cli_error(error, command, error_context)
    _log_error(error, command, cli_error)

    if json_output:
        write_json_output(
            format_json_output(
                success=False,
                command=command,
                errors=[cli_error.message],
                data={
                    "error_code": error_context.get("error_code", cli_error.code.value),
                    "error_type": error_context["error_type"],
                    "exit_code": cli_error.exit_code,
                },
            )
        )
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code


def _map_error_to_cli_error(
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
) -> CliError:
    if isinstance(error, CliError):
        error_context["error_code"] = error.code.value
        return error

    if isinstance(error, OperationCancelledError):
        error_context["error_code"] = error.code.value
        return create_cli_error(
            "Operation cancelled",
            command,
            original_error=error,
            exit_code=CLIDefaults.EXIT_CANCELLED,
        )

    if isinstance(error, DexVaultError):
        error_context["error_code"] = error.code.value
        if error.code == ErrorCode.RESOURCE_NOT_FOUND:
            return create_cli_error(
                error.message,
                command,
                original_error=error,
                exit_code=CLIDefaults.EXIT_NOT_FOUND,
            )
        if isinstance(error, DomainError):
            return create_cli_error(
                f"Invalid input: {error.message}",
                command,
                code=ErrorCode.CLI_INVALID_ARGUMENTS,
                original_error=error,
            )
        if isinstance(error, InfrastructureError):
            return create_cli_error(
                f"Infrastructure error: {error.message}",
                command,
                original_error=error,
            )
        if isinstance(error, ApplicationError):
            return create_cli_error(
                f"Application error: {error.message}",
                command,
                original_error=error,
            )

    if isinstance(error, KeyboardInterrupt):
        return create_cli_error(
            "Command interrupted by user",
            command,
            original_error=error,
            exit_code=CLIDefaults.EXIT_CANCELLED,
        )

    error_context["error_category"] = "unexpected"
    return create_cli_error(
        f"Unexpected error: {error}",
        command,
        code=ErrorCode.CLI_UNEXPECTED_ERROR,
        original_error=error,
    )


def _log_error(error: BaseException, command: str, cli_error: CliError) -> None:
    if isinstance(error, DexVaultError):
        level = logging.ERROR if cli_error.exit_code == CLIDefaults.EXIT_ERROR else logging.WARNING
        log_operation_error(logger=logger, error=error, operation=command, level=level)
    elif isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", command)
    else:
        logger.exception("CLI error in %s: %s", command, cli_error.message)
