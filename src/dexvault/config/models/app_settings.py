"""Application, search and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from dexvault.shared.constants import Logging, Navigation, SearchConfig


class AppSettings(BaseModel):
    """Session behaviour."""

    default_id: int = Field(default=Navigation.DEFAULT_ID, gt=0)
    max_preload: int = Field(
        default=Navigation.MAX_PRELOAD,
        ge=0,
        description="Maximum neighbours preloaded after a record is shown",
    )


class SearchSettings(BaseModel):
    """Name search configuration."""

    max_results: int = Field(default=SearchConfig.MAX_RESULTS, gt=0)
    debounce: float = Field(
        default=SearchConfig.DEBOUNCE_SECONDS,
        ge=0,
        description="Seconds a scheduled search waits before running",
    )
    suggestion_limit: int = Field(default=SearchConfig.SUGGESTION_LIMIT, gt=0)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str = Field(default=Logging.DEFAULT_FILE_PATH, description="JSON log file path, empty to disable")
    console_output: bool = Field(default=True, description="Use the rich console handler")


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "SearchSettings",
]
