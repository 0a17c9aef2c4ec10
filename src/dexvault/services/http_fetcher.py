"""Async HTTP transport for the catalog API.

Owns one ``aiohttp.ClientSession`` per instance. The session is created
lazily inside the running event loop and closed through ``aclose``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
import orjson

from dexvault.shared.constants import PokeAPIConfig
from dexvault.shared.errors import (
    DexVaultNetworkError,
    ErrorCode,
    ErrorContext,
    create_network_error,
)

logger = logging.getLogger(__name__)


class HttpFetcher:
    """GET JSON documents and map transport failures to DexVault errors.

    Args:
        timeout: Total request timeout in seconds
        connect_timeout: Connection timeout in seconds
        user_agent: Value of the User-Agent header
    """

    def __init__(
        self,
        timeout: float = PokeAPIConfig.TIMEOUT,
        connect_timeout: float = PokeAPIConfig.CONNECT_TIMEOUT,
        user_agent: str = PokeAPIConfig.USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.timeout,
                connect=self.connect_timeout,
            )
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
            logger.debug("aiohttp.ClientSession created")
        return self._session

    async def fetch_json(self, url: str) -> Any:
        """Fetch ``url`` and return the decoded JSON body.

        Raises:
            DexVaultNetworkError: On transport failure, timeout, a non-2xx
                status, or a body that is not valid JSON
        """
        session = self._get_session()
        try:
            async with session.get(url) as response:
                body = await response.read()
                if not 200 <= response.status < 300:
                    raise create_network_error(
                        f"Request failed with status {response.status}",
                        url,
                        status=response.status,
                    )
        except DexVaultNetworkError:
            raise
        except asyncio.TimeoutError as e:
            raise DexVaultNetworkError(
                code=ErrorCode.API_TIMEOUT,
                message=f"Request timed out after {self.timeout}s",
                context=ErrorContext(operation="http_get", url=url),
                original_error=e,
            ) from e
        except aiohttp.ClientError as e:
            raise create_network_error(
                f"Transport failure: {e!s}",
                url,
                original_error=e,
            ) from e

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise DexVaultNetworkError(
                code=ErrorCode.INVALID_RESPONSE,
                message="Response body is not valid JSON",
                context=ErrorContext(
                    operation="http_get",
                    url=url,
                    additional_data={"status": response.status},
                ),
                original_error=e,
                status=response.status,
            ) from e

    async def aclose(self) -> None:
        """Close the underlying session if it was opened."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("aiohttp.ClientSession closed")
        self._session = None
