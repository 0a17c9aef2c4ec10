"""Latest-only task scheduling.

Search-as-you-type and navigation produce bursts of requests where only
the newest one matters. ``LatestOnlyScheduler`` keeps at most one live
operation: submitting a new one cancels the previous handle.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from dexvault.core.scheduling.cancellation import CancellationToken
from dexvault.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    OperationCancelledError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[CancellationToken], Awaitable[T]]


class TaskHandle(Generic[T]):
    """Handle to a scheduled operation.

    ``cancel`` marks the token; if the operation is still waiting out its
    delay the task itself is cancelled and never runs.
    """

    def __init__(self, token: CancellationToken) -> None:
        self.token = token
        self.started = False
        self.task: asyncio.Task[T] | None = None

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def done(self) -> bool:
        return self.task is not None and self.task.done()

    def cancel(self) -> None:
        self.token.cancel()
        if self.task is not None and not self.started and not self.task.done():
            self.task.cancel()

    async def wait(self) -> T:
        """Wait for the operation and return its result.

        Raises:
            OperationCancelledError: If the operation was superseded or cancelled
            ApplicationError: If the handle was never submitted
        """
        if self.task is None:
            raise ApplicationError(
                code=ErrorCode.APPLICATION_ERROR,
                message="Task handle has not been submitted",
                context=ErrorContext(
                    operation="scheduled_task",
                    additional_data={"token": self.token.label or ""},
                ),
            )
        await asyncio.wait({self.task})
        if self.task.cancelled():
            raise OperationCancelledError(
                context=ErrorContext(
                    operation="scheduled_task",
                    additional_data={"token": self.token.label or ""},
                )
            )
        return self.task.result()


def _consume_result(task: asyncio.Task[Any]) -> None:
    if not task.cancelled():
        # mark the exception as retrieved; the handle owner decides whether it matters
        task.exception()


class LatestOnlyScheduler:
    """Run at most one operation at a time, newest wins.

    Args:
        name: Label used for tokens and log messages
        sleep: Coroutine used for the submit delay
    """

    def __init__(
        self,
        name: str = "scheduler",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.name = name
        self._sleep = sleep
        self._current: TaskHandle[Any] | None = None
        self._counter = itertools.count(1)

    @property
    def current(self) -> TaskHandle[Any] | None:
        return self._current

    def submit(self, operation: Operation[T], delay: float = 0.0) -> TaskHandle[T]:
        """Schedule ``operation`` after ``delay`` seconds, cancelling the prior one."""
        if self._current is not None and not self._current.done():
            logger.debug("%s: superseding %r", self.name, self._current.token)
            self._current.cancel()

        token = CancellationToken(f"{self.name}-{next(self._counter)}")
        handle: TaskHandle[T] = TaskHandle(token)

        async def runner() -> T:
            if delay > 0:
                await self._sleep(delay)
            token.raise_if_cancelled(self.name)
            handle.started = True
            return await operation(token)

        handle.task = asyncio.create_task(runner())
        handle.task.add_done_callback(_consume_result)
        self._current = handle
        return handle

    async def aclose(self) -> None:
        """Cancel the live operation and wait for it to settle."""
        handle = self._current
        self._current = None
        if handle is None or handle.task is None:
            return
        handle.cancel()
        await asyncio.wait({handle.task})
