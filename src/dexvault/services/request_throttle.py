"""Serialized request throttle.

Outbound calls are queued and dispatched one at a time by a single drain
task, oldest first. Consecutive calls are spaced so that the next call
never starts earlier than ``min_interval`` seconds after the previous one
completed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from dexvault.shared.constants import PokeAPIConfig
from dexvault.shared.errors import (
    ApplicationError,
    DexVaultError,
    DexVaultNetworkError,
    ErrorCode,
    ErrorContext,
    create_validation_error,
)
from dexvault.shared.logging import log_api_call

logger = logging.getLogger(__name__)


class JsonFetcher(Protocol):
    async def fetch_json(self, url: str) -> Any: ...


@dataclass
class ThrottleRequest:
    """A queued call and the future its caller is waiting on."""

    url: str
    future: asyncio.Future[Any]


class RequestThrottle:
    """FIFO queue of outbound calls with completion-to-start spacing.

    A failed call rejects only its own caller; the queue keeps draining.
    A caller that stops waiting (its task is cancelled) has its request
    skipped if it has not been dispatched yet. A request that is already
    in flight runs to completion.

    Args:
        fetcher: Transport performing the actual call
        min_interval: Minimum seconds between one completion and the next start
        clock: Monotonic time source
        sleep: Coroutine used to wait, injectable for tests
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        min_interval: float = PokeAPIConfig.MIN_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise create_validation_error(
                f"Throttle min_interval must not be negative, got: {min_interval}",
                field="min_interval",
                value=min_interval,
            )
        self._fetcher = fetcher
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._queue: deque[ThrottleRequest] = deque()
        self._drain_task: asyncio.Task[None] | None = None
        self._last_completed_at: float | None = None
        self._in_flight: ThrottleRequest | None = None
        self._closed = False
        self.dispatched = 0

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def closed(self) -> bool:
        return self._closed

    async def enqueue(self, url: str) -> Any:
        """Queue ``url`` and wait for its decoded response body."""
        if self._closed:
            raise ApplicationError(
                code=ErrorCode.THROTTLE_CLOSED,
                message="Request throttle is closed",
                context=ErrorContext(operation="throttle_enqueue", url=url),
            )

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._queue.append(ThrottleRequest(url=url, future=future))
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.create_task(self._drain())
        return await future

    async def _wait_for_slot(self) -> None:
        if self._last_completed_at is None:
            return
        remaining = self._last_completed_at + self.min_interval - self._clock()
        if remaining > 0:
            await self._sleep(remaining)

    async def _drain(self) -> None:
        while self._queue:
            request = self._queue[0]
            if request.future.done():
                self._queue.popleft()
                continue

            await self._wait_for_slot()

            self._queue.popleft()
            if request.future.done():
                logger.debug("Skipping abandoned request: %s", request.url)
                continue
            await self._dispatch(request)

    async def _dispatch(self, request: ThrottleRequest) -> None:
        started = self._clock()
        self.dispatched += 1
        self._in_flight = request
        try:
            payload = await self._fetcher.fetch_json(request.url)
        except DexVaultError as e:
            status = e.status if isinstance(e, DexVaultNetworkError) else None
            log_api_call(
                logger,
                request.url,
                status_code=status,
                duration_ms=(self._clock() - started) * 1000,
                context={"error_code": e.code.value},
            )
            if not request.future.done():
                request.future.set_exception(e)
        except Exception as e:  # noqa: BLE001
            log_api_call(
                logger,
                request.url,
                duration_ms=(self._clock() - started) * 1000,
                context={"error_type": type(e).__name__},
            )
            if not request.future.done():
                request.future.set_exception(e)
        else:
            log_api_call(
                logger,
                request.url,
                status_code=200,
                duration_ms=(self._clock() - started) * 1000,
            )
            if not request.future.done():
                request.future.set_result(payload)
        finally:
            self._in_flight = None
            self._last_completed_at = self._clock()

    async def aclose(self) -> None:
        """Reject queued requests and stop the drain task."""
        self._closed = True
        abandoned = list(self._queue)
        self._queue.clear()
        if self._in_flight is not None:
            abandoned.append(self._in_flight)
        for request in abandoned:
            if not request.future.done():
                request.future.set_exception(
                    ApplicationError(
                        code=ErrorCode.THROTTLE_CLOSED,
                        message="Request throttle closed before dispatch",
                        context=ErrorContext(operation="throttle_close", url=request.url),
                    )
                )
        if self._drain_task is not None and not self._drain_task.done():
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
        self._drain_task = None
