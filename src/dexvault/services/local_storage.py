"""File-backed key/value storage.

Each key is one JSON file under the storage directory. Entries are
advisory: a missing, unreadable or corrupted file reads as absent and the
caller rebuilds whatever it needed.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import orjson

from dexvault.shared.constants import StorageConfig
from dexvault.shared.errors import (
    DexVaultStorageError,
    ErrorCode,
    ErrorContext,
    create_validation_error,
)
from dexvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """Persist JSON-serializable values, one file per key.

    Writes go to a temporary sibling file that is then moved into place,
    so a reader never observes a half-written entry.

    Args:
        directory: Directory holding the entry files (created on first write)
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise create_validation_error(
                f"Invalid storage key: {key!r}",
                field="key",
                value=key,
            )
        return self.directory / f"{key}{StorageConfig.FILE_SUFFIX}"

    def get_item(self, key: str) -> Any | None:
        """Return the stored value for ``key`` or None when unavailable."""
        path = self._path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug("Storage entry '%s' unreadable: %s", key, e)
            return None

        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.debug("Storage entry '%s' corrupted, ignoring: %s", key, e)
            return None

    def set_item(self, key: str, value: Any) -> None:
        """Serialize ``value`` and store it under ``key``.

        Raises:
            DexVaultStorageError: If the value cannot be serialized or written
        """
        path = self._path_for(key)
        tmp_path = path.with_suffix(f"{path.suffix}.tmp")
        context = ErrorContext(
            operation="storage_set_item",
            additional_data={"key": key, "path": path},
        )
        try:
            data = orjson.dumps(value)
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except (OSError, TypeError) as e:
            error = DexVaultStorageError(
                code=ErrorCode.STORAGE_WRITE_FAILED,
                message=f"Failed to write storage entry '{key}': {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, level=logging.WARNING)
            raise error from e

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
