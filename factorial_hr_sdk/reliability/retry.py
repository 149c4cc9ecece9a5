from __future__ import annotations

from asyncio import sleep
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from ..config.constants import (
    IDEMPOTENT_MUTATION_RETRIES,
    RETRY_BASE_DELAY,
    RETRY_JITTER_FACTOR,
    RETRY_MAX_DELAY,
)
from ..errors import FactorialError, NetworkError, RateLimitError, is_retryable_error
from ..observability.logging import StructuredLogger

T = TypeVar('T')

logger = StructuredLogger("retry")


@dataclass
class RetryConfig:
    max_attempts: int = 1
    initial_delay: float = RETRY_BASE_DELAY
    max_delay: float = RETRY_MAX_DELAY
    jitter_factor: float = RETRY_JITTER_FACTOR
    # False for mutations without an idempotency key
    retry_allowed: bool = True


def resolve_max_attempts(
    method: str,
    default_attempts: int,
    idempotency_key: Optional[str] = None,
    max_retries: Optional[int] = None,
    no_retry: bool = False
) -> int:
    """
    Compute the attempt budget for one logical request.

    GET requests get the configured default. Mutations get a single attempt
    unless they carry an idempotency key, since a repeated POST could
    create a resource twice.
    """
    if no_retry:
        return 1
    if max_retries is not None:
        return max(1, max_retries)
    if method.upper() == "GET":
        return default_attempts
    if idempotency_key:
        return IDEMPOTENT_MUTATION_RETRIES
    return 1


def is_retry_allowed(method: str, idempotency_key: Optional[str] = None) -> bool:
    return method.upper() == "GET" or bool(idempotency_key)


def get_backoff_delay(
    attempt: int,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    jitter_factor: float = RETRY_JITTER_FACTOR
) -> float:
    """
    Calculate delay for exponential backoff.

    Args:
        attempt: Current attempt number (1-based)
        base_delay: Base delay in seconds
        max_delay: Cap applied before jitter
        jitter_factor: Relative jitter, applied as +/- factor

    Returns:
        Delay in seconds
    """
    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
    jitter = random.uniform(-jitter_factor, jitter_factor)
    return delay * (1 + jitter)


class RetryManager:
    """
    Manages retry logic for HTTP operations.

    This class handles:
    - Retryability checks on typed SDK errors
    - Exponential backoff with jitter
    - Respect for Retry-After on rate limits
    - Fail-fast for unsafe mutations
    """

    async def execute_with_retry(
        self,
        func: Callable[[], Awaitable[T]],
        config: RetryConfig,
        endpoint: str = ""
    ) -> T:
        """
        Execute a function with retry logic.

        Attempts are strictly sequential: the next one starts only after the
        previous attempt and its backoff sleep have finished.

        Args:
            func: Async function performing one attempt
            config: Retry configuration
            endpoint: Endpoint used for log context

        Returns:
            Result from successful function execution

        Raises:
            The last error if all attempts are exhausted or it is not retryable
        """
        last_error: Optional[FactorialError] = None

        for attempt in range(1, config.max_attempts + 1):
            try:
                return await func()
            except FactorialError as e:
                last_error = e

                if not self._should_retry(e, attempt, config):
                    raise

                delay = self._calculate_delay(e, attempt, config)
                logger.debug(
                    f"Retry attempt {attempt}/{config.max_attempts} after {delay:.2f}s",
                    endpoint=endpoint,
                    error_type=type(e).__name__,
                    error_msg=e.message[:200]
                )
                await sleep(delay)

        raise last_error or NetworkError("Request failed after all retries")

    def _should_retry(self, error: FactorialError, attempt: int, config: RetryConfig) -> bool:
        """Determine if an error should be retried."""
        if attempt >= config.max_attempts:
            return False
        if not config.retry_allowed:
            return False
        return is_retryable_error(error)

    def _calculate_delay(self, error: FactorialError, attempt: int, config: RetryConfig) -> float:
        """Calculate retry delay, respecting Retry-After if present."""
        if isinstance(error, RateLimitError) and error.retry_after:
            return float(error.retry_after)

        return get_backoff_delay(
            attempt,
            base_delay=config.initial_delay,
            max_delay=config.max_delay,
            jitter_factor=config.jitter_factor
        )
