"""API configuration models.

Settings for the upstream catalog service and the request throttle in
front of it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from dexvault.shared.constants import PokeAPIConfig


class PokeAPISettings(BaseModel):
    """PokeAPI configuration.

    The catalog is public and read-only, so there is no credential here;
    ``min_request_interval`` is the politeness knob.
    """

    base_url: str = Field(
        default=PokeAPIConfig.BASE_URL,
        description="Base url of the catalog API",
    )
    timeout: float = Field(
        default=PokeAPIConfig.TIMEOUT,
        gt=0,
        description="Total request timeout in seconds",
    )
    connect_timeout: float = Field(
        default=PokeAPIConfig.CONNECT_TIMEOUT,
        gt=0,
        description="Connection timeout in seconds",
    )
    min_request_interval: float = Field(
        default=PokeAPIConfig.MIN_REQUEST_INTERVAL,
        ge=0,
        description="Minimum seconds between the end of one request and the start of the next",
    )
    page_size: int = Field(
        default=PokeAPIConfig.PAGE_SIZE,
        gt=0,
        le=2000,
        description="Batch size used while paging the name list",
    )
    user_agent: str = Field(
        default=PokeAPIConfig.USER_AGENT,
        description="User-Agent header sent upstream",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class APISettings(BaseModel):
    """API configuration container."""

    pokeapi: PokeAPISettings = Field(
        default_factory=PokeAPISettings,
        description="PokeAPI configuration",
    )


__all__ = [
    "APISettings",
    "PokeAPISettings",
]
