"""Cache and storage configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from dexvault.shared.constants import CacheConfig, StorageConfig


class CacheSettings(BaseModel):
    """In-memory record cache configuration."""

    ttl: float = Field(
        default=CacheConfig.TTL,
        gt=0,
        description="Entry time-to-live in seconds",
    )
    max_size: int = Field(
        default=CacheConfig.MAX_SIZE,
        gt=0,
        description="Maximum number of cached entries",
    )
    dedupe_inflight: bool = Field(
        default=True,
        description="Share one in-flight resolution between concurrent callers of the same key",
    )


class StorageSettings(BaseModel):
    """Durable local storage for the persisted name list."""

    directory: Path = Field(
        default_factory=lambda: Path.home() / StorageConfig.DIRECTORY_NAME,
        description="Directory holding persisted entries",
    )
    name_list_key: str = Field(default=StorageConfig.NAME_LIST_KEY)
    name_list_ts_key: str = Field(default=StorageConfig.NAME_LIST_TS_KEY)
    name_list_ttl: float = Field(
        default=StorageConfig.NAME_LIST_TTL,
        gt=0,
        description="Maximum age of the persisted name list in seconds",
    )

    @field_validator("directory")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()


__all__ = [
    "CacheSettings",
    "StorageSettings",
]
