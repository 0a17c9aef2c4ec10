"""
JSON Output Formatter for the DexVault CLI

Every command prints the same envelope when ``--json`` is given.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any

import orjson

_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Build the JSON envelope for a command result.

    Args:
        success: Whether the command succeeded (forced False when errors exist)
        command: The command name (e.g. "lookup")
        data: Command payload
        errors: Error messages
        warnings: Warning messages

    Returns:
        JSON-encoded bytes

    Example:
        >>> format_json_output(True, "index", data={"size": 1025})
        b'{\\n  "command": "index",\\n  "data": {\\n    "size": 1025\\n  }, ...'
    """
    errors = errors or []
    envelope = {
        "success": success and not errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
        "warnings": warnings or [],
    }
    try:
        return orjson.dumps(envelope, option=_OPTIONS)
    except TypeError as e:
        envelope.update(
            success=False,
            data=None,
            errors=[f"JSON serialization failed: {e!s}"],
        )
        return orjson.dumps(envelope, option=_OPTIONS)


def write_json_output(payload: bytes) -> None:
    """Write an encoded envelope followed by a newline to stdout."""
    sys.stdout.buffer.write(payload)
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()
