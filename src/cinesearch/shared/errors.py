"""CineSearch Error Handling Module

This module defines the error handling system for CineSearch, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- User-facing categories: SearchErrorKind is what the presentation layer sees
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key",)


class ErrorCode(str, Enum):
    """Error codes for CineSearch.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Query Errors
    EMPTY_QUERY = "EMPTY_QUERY"

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"

    # Storage Errors
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    MISSING_CONFIG = "MISSING_CONFIG"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    OPERATION_CANCELLED = "OPERATION_CANCELLED"

    # CLI Errors
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
    additional_data so the context is always safe to serialize into logs.

    Attributes:
        operation: Optional operation name that caused the error
        key: Optional storage key or query associated with the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    key: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with sensitive keys removed.

        Args:
            mask_keys: additional_data keys to exclude. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary that always carries an ``additional_data`` key.
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.key is not None:
            data["key"] = self.key

        extra = self.additional_data or {}
        data["additional_data"] = {k: v for k, v in extra.items() if k not in mask_keys}
        return data


class CineSearchError(Exception):
    """Base exception class for all CineSearch errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize CineSearchError.

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
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(CineSearchError):
    """Domain-specific errors.

    These errors occur when business rules are violated, e.g. a query
    that is too short to be searched.
    """


class InfrastructureError(CineSearchError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems like
    the key-value store or the remote catalog.
    """


class ApplicationError(CineSearchError):
    """Application-level errors (configuration, command handling)."""


class EmptyQueryError(DomainError):
    """Raised when a search term is shorter than the minimum query length."""

    def __init__(self, term: str, min_length: int) -> None:
        super().__init__(
            ErrorCode.EMPTY_QUERY,
            "Please enter a search term",
            ErrorContext(
                operation="search",
                additional_data={"term_length": len(term), "min_length": min_length},
            ),
        )


class CatalogNetworkError(InfrastructureError):
    """The remote catalog could not be reached."""


class CatalogTimeoutError(InfrastructureError):
    """The remote catalog did not answer in time."""


class CatalogApiError(InfrastructureError):
    """The remote catalog answered with a failure."""


class StorageError(InfrastructureError):
    """Reading from or writing to the key-value store failed."""


class OperationCancelledError(CineSearchError):
    """The operation was superseded by a newer request."""

    def __init__(self, operation: str = "remote_search") -> None:
        super().__init__(
            ErrorCode.OPERATION_CANCELLED,
            "Operation was cancelled",
            ErrorContext(operation=operation),
        )


class CliError(ApplicationError):
    """CLI-specific error carrying the command and its exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


class SearchErrorKind(str, Enum):
    """Error categories surfaced to the presentation layer."""

    EMPTY_QUERY = "empty_query"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    API_ERROR = "api_error"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


ERROR_MESSAGES: dict[SearchErrorKind, str] = {
    SearchErrorKind.EMPTY_QUERY: "Please enter a search term",
    SearchErrorKind.NETWORK_ERROR: "Network error. Please check your connection.",
    SearchErrorKind.API_ERROR: "Search failed. Please try again.",
    SearchErrorKind.RATE_LIMITED: "Daily search limit reached. Please try again tomorrow.",
    SearchErrorKind.TIMEOUT: "Search timed out. Please try again.",
    SearchErrorKind.CANCELED: "Search was cancelled.",
    SearchErrorKind.UNKNOWN: "Search failed. Please check your connection and try again.",
}


@dataclass(frozen=True)
class SearchFailure:
    """Observable error value held in the search state."""

    kind: SearchErrorKind
    message: str

    @classmethod
    def of(cls, kind: SearchErrorKind) -> SearchFailure:
        return cls(kind=kind, message=ERROR_MESSAGES[kind])


_CODE_TO_KIND: dict[ErrorCode, SearchErrorKind] = {
    ErrorCode.EMPTY_QUERY: SearchErrorKind.EMPTY_QUERY,
    ErrorCode.RATE_LIMITED: SearchErrorKind.RATE_LIMITED,
    ErrorCode.NETWORK_ERROR: SearchErrorKind.NETWORK_ERROR,
    ErrorCode.API_TIMEOUT: SearchErrorKind.TIMEOUT,
    ErrorCode.API_REQUEST_FAILED: SearchErrorKind.API_ERROR,
    ErrorCode.API_INVALID_RESPONSE: SearchErrorKind.API_ERROR,
    ErrorCode.MISSING_CONFIG: SearchErrorKind.API_ERROR,
    ErrorCode.OPERATION_CANCELLED: SearchErrorKind.CANCELED,
}


def classify_error(error: BaseException) -> SearchErrorKind:
    """Map an exception raised around a remote call to a SearchErrorKind.

    Args:
        error: Exception raised by the catalog source or its transport

    Returns:
        The category the presentation layer should see
    """
    if isinstance(error, CineSearchError):
        return _CODE_TO_KIND.get(error.code, SearchErrorKind.UNKNOWN)
    if isinstance(error, TimeoutError):
        return SearchErrorKind.TIMEOUT
    if isinstance(error, ConnectionError):
        return SearchErrorKind.NETWORK_ERROR
    return SearchErrorKind.UNKNOWN


def create_storage_error(
    message: str,
    key: str,
    *,
    write: bool,
    original_error: Exception | None = None,
) -> StorageError:
    """Create a storage read/write error with context."""
    code = ErrorCode.STORAGE_WRITE_FAILED if write else ErrorCode.STORAGE_READ_FAILED
    return StorageError(
        code,
        message,
        ErrorContext(operation="storage_write" if write else "storage_read", key=key),
        original_error,
    )


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
