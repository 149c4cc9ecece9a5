"""
FactorialHR SDK - Async client for the FactorialHR API with write safety.

Features:
- Typed error taxonomy with retryability flags
- Retries with exponential backoff, gated on idempotency for mutations
- TTL cache for read operations
- Risk policies and confirmation tokens for destructive writes
- In-memory audit log of write operations
"""

__version__ = "0.1.0"

from .api.client import FactorialClient
from .cache.manager import CacheManager
from .config.settings import FactorialConfig, get_config, load_env
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConfirmationExpiredError,
    ConflictError,
    ErrorKind,
    FactorialError,
    HttpError,
    NetworkError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    SchemaValidationError,
    ServerError,
    TimeoutError,
    UnprocessableEntityError,
    ValidationError,
    format_validation_errors,
    get_user_message,
    is_retryable_error,
)
from .http.client import FactorialHTTPClient
from .observability.logging import configure_logging
from .safety import (
    AuditLogger,
    ConfirmationManager,
    OperationRisk,
    get_operation_policy,
    get_warning_message,
    requires_confirmation,
)

__all__ = [
    # Clients
    "FactorialClient",
    "FactorialHTTPClient",
    "CacheManager",

    # Configuration
    "FactorialConfig",
    "get_config",
    "load_env",
    "configure_logging",

    # Errors
    "ErrorKind",
    "FactorialError",
    "HttpError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "UnprocessableEntityError",
    "RateLimitError",
    "ServerError",
    "TimeoutError",
    "NetworkError",
    "ConfigurationError",
    "SchemaValidationError",
    "OperationCancelledError",
    "ConfirmationExpiredError",
    "is_retryable_error",
    "get_user_message",
    "format_validation_errors",

    # Write safety
    "AuditLogger",
    "ConfirmationManager",
    "OperationRisk",
    "get_operation_policy",
    "get_warning_message",
    "requires_confirmation",
]
