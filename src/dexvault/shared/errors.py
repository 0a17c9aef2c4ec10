"""DexVault Error Handling Module

This module defines the error handling system for DexVault, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
- Cancellation is not failure: OperationCancelledError is its own branch
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for DexVault.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Storage Errors
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    OPERATION_CANCELLED = "OPERATION_CANCELLED"
    INDEX_NOT_LOADED = "INDEX_NOT_LOADED"
    THROTTLE_CLOSED = "THROTTLE_CLOSED"

    # CLI Errors
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        elif val is None:
            continue
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so that the context is always safe to serialize.

    Attributes:
        operation: Optional operation name that caused the error
        url: Optional upstream url involved in the failure
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    url: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict; additional_data is never None.

        Example:
            >>> ErrorContext(operation="resolve").safe_dict()
            {'operation': 'resolve', 'additional_data': {}}
        """
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.url is not None:
            data["url"] = self.url
        data["additional_data"] = dict(self.additional_data or {})
        return data


class DexVaultError(Exception):
    """Base exception class for all DexVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        """Initialize DexVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(DexVaultError):
    """Domain-specific errors.

    Raised when a domain rule is violated, e.g. an identifier outside the
    known catalog range.
    """


class InfrastructureError(DexVaultError):
    """Infrastructure-related errors (network, storage, transport)."""


class DexVaultNetworkError(InfrastructureError):
    """Transport or HTTP failure for a single upstream call.

    Attributes:
        status: HTTP status code when the server answered, else None
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        return data


class DexVaultStorageError(InfrastructureError):
    """Local persistence errors."""


class DexVaultParsingError(DomainError):
    """Upstream payload is missing fields that are required."""


class ApplicationError(DexVaultError):
    """Application-level errors (configuration, lifecycle, usage)."""


class OperationCancelledError(DexVaultError):
    """A superseded or abandoned operation.

    Callers must treat this as "nothing to report", never as a failure.
    """

    def __init__(
        self,
        message: str = "Operation was cancelled",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(ErrorCode.OPERATION_CANCELLED, message, context)


class CliError(ApplicationError):
    """CLI-specific error carrying its process exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: BaseException | None = None,
        exit_code: int = 1,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.exit_code = exit_code


def create_network_error(
    message: str,
    url: str,
    *,
    status: int | None = None,
    original_error: BaseException | None = None,
    operation: str = "http_get",
) -> DexVaultNetworkError:
    """Create a network error, picking the code from the HTTP status."""
    if status is None:
        code = ErrorCode.NETWORK_ERROR
    elif status == 404:
        code = ErrorCode.RESOURCE_NOT_FOUND
    elif status == 429:
        code = ErrorCode.API_RATE_LIMIT
    elif status >= 500:
        code = ErrorCode.API_SERVER_ERROR
    else:
        code = ErrorCode.API_REQUEST_FAILED

    context = ErrorContext(
        operation=operation,
        url=url,
        additional_data={"status": status} if status is not None else None,
    )
    return DexVaultNetworkError(
        code=code,
        message=message,
        context=context,
        original_error=original_error,
        status=status,
    )


def create_parsing_error(
    message: str,
    field: str,
    *,
    operation: str | None = None,
    original_error: BaseException | None = None,
) -> DexVaultParsingError:
    """Create a parsing error for a missing or malformed required field."""
    context = ErrorContext(
        operation=operation,
        additional_data={"field": field},
    )
    return DexVaultParsingError(
        code=ErrorCode.MISSING_REQUIRED_FIELD,
        message=message,
        context=context,
        original_error=original_error,
    )


def create_validation_error(
    message: str,
    field: str,
    value: Any = None,
) -> DomainError:
    """Create a validation error for a rejected input value."""
    additional: dict[str, Any] = {"field": field}
    if isinstance(value, (str, int, float, bool)):
        additional["value"] = value
    return DomainError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        context=ErrorContext(operation="validation", additional_data=additional),
    )


__all__ = [
    "ApplicationError",
    "CliError",
    "DexVaultError",
    "DexVaultNetworkError",
    "DexVaultParsingError",
    "DexVaultStorageError",
    "DomainError",
    "ErrorCode",
    "ErrorContext",
    "InfrastructureError",
    "OperationCancelledError",
    "create_network_error",
    "create_parsing_error",
    "create_validation_error",
]
