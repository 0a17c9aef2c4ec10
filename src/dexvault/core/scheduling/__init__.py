"""Cancellation and superseding task scheduling."""

from .cancellation import CancellationToken
from .scheduler import LatestOnlyScheduler, TaskHandle

__all__ = [
    "CancellationToken",
    "LatestOnlyScheduler",
    "TaskHandle",
]
