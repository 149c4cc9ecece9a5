"""
Structured error types for the FactorialHR SDK.

Every failure the SDK surfaces is one of the classes below. Each class carries
a fixed ``kind`` tag and retryability flag so callers can branch on type
instead of parsing messages.
"""

import asyncio
import builtins
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx


class ErrorKind(str, Enum):
    """Closed set of error kinds raised by the SDK."""
    GENERIC = "generic"
    HTTP = "http"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    NETWORK = "network"
    CONFIGURATION = "configuration"
    SCHEMA_VALIDATION = "schema_validation"
    OPERATION_CANCELLED = "operation_cancelled"
    CONFIRMATION_EXPIRED = "confirmation_expired"


class FactorialError(Exception):
    """
    Base exception for all FactorialHR errors.

    Attributes:
        message: Human-readable error message
        is_retryable: Whether the failed call may succeed if repeated
        context: Optional structured details about the failure
        cause: The underlying exception, if this error wraps one
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        is_retryable: bool = False,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable
        self.context = context
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class HttpError(FactorialError):
    """Error raised for a non-2xx upstream response."""

    kind = ErrorKind.HTTP

    def __init__(
        self,
        status_code: int,
        endpoint: str,
        message: str,
        is_retryable: bool = False,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, is_retryable=is_retryable, context=context)
        self.status_code = status_code
        self.endpoint = endpoint


class AuthenticationError(HttpError):
    """401 - the API key was rejected."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, endpoint: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            401, endpoint,
            "Invalid API key. Please check your FACTORIAL_API_KEY.",
            context=context
        )


class AuthorizationError(HttpError):
    """403 - the API key lacks permission."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, endpoint: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            403, endpoint,
            "Access denied. Your API key may not have permission for this operation.",
            context=context
        )


class NotFoundError(HttpError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, endpoint: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            404, endpoint,
            "Resource not found. The requested employee, team, or location may not exist.",
            context=context
        )


class ValidationError(HttpError):
    kind = ErrorKind.VALIDATION

    def __init__(self, endpoint: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(400, endpoint, message, context=context)


class ConflictError(HttpError):
    """409 - resource already exists or is in a conflicting state."""

    kind = ErrorKind.CONFLICT

    def __init__(self, endpoint: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(409, endpoint, message, context=context)


def _extract_validation_errors(context: Optional[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Pull ``{field: [messages]}`` out of ``context["raw"]``, skipping malformed entries."""
    if not context or not isinstance(context.get("raw"), dict):
        return {}

    errors = context["raw"].get("errors")
    if not isinstance(errors, dict):
        return {}

    result: Dict[str, List[str]] = {}
    for field, value in errors.items():
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            result[field] = value
    return result


class UnprocessableEntityError(HttpError):
    """422 - the server rejected the payload during validation."""

    kind = ErrorKind.UNPROCESSABLE_ENTITY

    def __init__(self, endpoint: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(422, endpoint, message, context=context)
        self.validation_errors = _extract_validation_errors(context)


class RateLimitError(HttpError):
    """429 - too many requests. ``retry_after`` is in seconds."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        endpoint: str,
        retry_after: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        if retry_after:
            message = f"Rate limit exceeded. Please wait {retry_after:g} seconds before trying again."
        else:
            message = "Rate limit exceeded. Please wait a moment before trying again."
        super().__init__(429, endpoint, message, is_retryable=True, context=context)
        self.retry_after = retry_after


class ServerError(HttpError):
    kind = ErrorKind.SERVER_ERROR

    def __init__(
        self,
        status_code: int,
        endpoint: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code, endpoint,
            message or f"Server error ({status_code}). Please try again later.",
            is_retryable=True,
            context=context
        )


class TimeoutError(FactorialError):
    """A single request attempt exceeded its deadline. ``timeout`` is in seconds."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float, endpoint: Optional[str] = None):
        super().__init__(
            f"Request timed out after {timeout:g} seconds. Please try again.",
            is_retryable=True,
            context={"endpoint": endpoint, "timeout": timeout}
        )
        self.timeout = timeout
        self.endpoint = endpoint


class NetworkError(FactorialError):
    kind = ErrorKind.NETWORK

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, is_retryable=True, cause=cause)


class ConfigurationError(FactorialError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)


class SchemaValidationError(FactorialError):
    """The API answered, but the body did not have the expected shape."""

    kind = ErrorKind.SCHEMA_VALIDATION

    def __init__(self, schema_name: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"API response validation failed for {schema_name}: {message}",
            context=context
        )
        self.schema_name = schema_name


class OperationCancelledError(FactorialError):
    kind = ErrorKind.OPERATION_CANCELLED

    def __init__(self, operation: str):
        super().__init__(f'Operation "{operation}" was cancelled.')
        self.operation = operation


class ConfirmationExpiredError(FactorialError):
    kind = ErrorKind.CONFIRMATION_EXPIRED

    def __init__(self):
        super().__init__(
            "Confirmation token has expired or is invalid. Please try the operation again."
        )


# Generic timeout/abort exceptions raised outside the SDK's own pipeline
_ABORT_ERRORS = (builtins.TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)


def is_retryable_error(error: Any) -> bool:
    """
    Determine if an error is retryable.

    Args:
        error: Any value, typically a caught exception

    Returns:
        bool: The error's own flag for SDK errors, True for generic
        timeouts, False for everything else
    """
    if isinstance(error, FactorialError):
        return error.is_retryable
    if isinstance(error, _ABORT_ERRORS):
        return True
    return False


def get_user_message(error: Any) -> str:
    """Get a user-friendly message from any error. Never raises."""
    if isinstance(error, FactorialError):
        return error.message
    if isinstance(error, Exception):
        return str(error)
    return "An unexpected error occurred"


def format_validation_errors(error_data: Optional[Dict[str, Any]]) -> str:
    """
    Format validation errors from an API response into a readable message.

    A structured ``errors`` map takes precedence over a flat ``message``.
    """
    if not error_data:
        return "Validation failed"

    errors = error_data.get("errors")
    if isinstance(errors, dict) and errors:
        messages = "; ".join(
            f"{field}: {', '.join(str(m) for m in msgs) if isinstance(msgs, list) else msgs}"
            for field, msgs in errors.items()
        )
        return f"Validation failed: {messages}"

    return error_data.get("message") or "Validation failed"
