"""Reliability layer for response classification and retries.

This layer handles:
- Mapping upstream responses to typed errors
- Retry budgets per HTTP method and idempotency key
- Exponential backoff with jitter
- Respect for Retry-After on rate limits
"""

from .error_classifier import ResponseClassifier
from .retry import (
    RetryConfig,
    RetryManager,
    get_backoff_delay,
    is_retry_allowed,
    resolve_max_attempts,
)

__all__ = [
    "ResponseClassifier",
    "RetryConfig",
    "RetryManager",
    "get_backoff_delay",
    "is_retry_allowed",
    "resolve_max_attempts",
]
