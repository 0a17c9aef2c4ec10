"""Cooperative cancellation tokens."""

from __future__ import annotations

from dexvault.shared.errors import ErrorContext, OperationCancelledError


class CancellationToken:
    """Flag checked by long-running operations between their steps.

    Cancelling a token does not interrupt work already in progress; the
    operation notices at its next checkpoint and stops there.
    """

    def __init__(self, label: str | None = None) -> None:
        self.label = label
        self._cancelled = False

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"CancellationToken({self.label!r}, {state})"

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self, operation: str | None = None) -> None:
        """Raise ``OperationCancelledError`` if the token was cancelled."""
        if self._cancelled:
            raise OperationCancelledError(
                context=ErrorContext(
                    operation=operation,
                    additional_data={"token": self.label} if self.label else None,
                ),
            )
