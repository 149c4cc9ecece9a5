"""Unit tests for retry budgets, backoff and the retry manager."""

import pytest
from unittest.mock import AsyncMock, patch

from factorial_hr_sdk.errors import (
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ServerError,
    TimeoutError,
)
from factorial_hr_sdk.reliability.retry import (
    RetryConfig,
    RetryManager,
    get_backoff_delay,
    is_retry_allowed,
    resolve_max_attempts,
)


class TestRetryBudget:
    """Test attempt budgets per method and idempotency key."""

    def test_get_uses_configured_default(self):
        assert resolve_max_attempts("GET", 3) == 3
        assert resolve_max_attempts("get", 5) == 5

    def test_mutation_without_key_gets_single_attempt(self):
        for method in ("POST", "PUT", "PATCH", "DELETE"):
            assert resolve_max_attempts(method, 3) == 1

    def test_mutation_with_key_gets_two_attempts(self):
        for method in ("POST", "PUT", "PATCH", "DELETE"):
            assert resolve_max_attempts(method, 3, idempotency_key="key-1") == 2

    def test_explicit_override_wins(self):
        assert resolve_max_attempts("POST", 3, max_retries=4) == 4
        assert resolve_max_attempts("GET", 3, max_retries=1) == 1

    def test_no_retry_forces_single_attempt(self):
        assert resolve_max_attempts("GET", 3, no_retry=True) == 1
        assert resolve_max_attempts("POST", 3, idempotency_key="k", max_retries=5, no_retry=True) == 1

    def test_retry_allowed(self):
        assert is_retry_allowed("GET")
        assert is_retry_allowed("POST", "key-1")
        assert not is_retry_allowed("POST")
        assert not is_retry_allowed("DELETE", "")


class TestBackoff:
    """Test exponential backoff with jitter."""

    def test_doubles_per_attempt(self):
        with patch("factorial_hr_sdk.reliability.retry.random.uniform", return_value=0.0):
            assert get_backoff_delay(1) == 1.0
            assert get_backoff_delay(2) == 2.0
            assert get_backoff_delay(3) == 4.0
            assert get_backoff_delay(4) == 8.0

    def test_capped_before_jitter(self):
        with patch("factorial_hr_sdk.reliability.retry.random.uniform", return_value=0.0):
            assert get_backoff_delay(10) == 10.0
        with patch("factorial_hr_sdk.reliability.retry.random.uniform", return_value=0.2):
            assert get_backoff_delay(10) == pytest.approx(12.0)

    def test_jitter_bounds(self):
        for _ in range(50):
            delay = get_backoff_delay(2)
            assert 1.6 <= delay <= 2.4


class TestRetryManager:
    """Test the retry loop."""

    @pytest.fixture
    def manager(self):
        return RetryManager()

    @pytest.mark.asyncio
    async def test_success_first_try(self, manager, no_sleep):
        func = AsyncMock(return_value="ok")

        result = await manager.execute_with_retry(func, RetryConfig(max_attempts=3))

        assert result == "ok"
        assert func.call_count == 1
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_retries_retryable_errors(self, manager, no_sleep):
        func = AsyncMock(side_effect=[ServerError(500, "/x"), NetworkError("reset"), "ok"])

        result = await manager.execute_with_retry(func, RetryConfig(max_attempts=3))

        assert result == "ok"
        assert func.call_count == 3
        assert no_sleep.call_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_raises_last_error(self, manager, no_sleep):
        last = TimeoutError(5, "/x")
        func = AsyncMock(side_effect=[ServerError(500, "/x"), ServerError(502, "/x"), last])

        with pytest.raises(TimeoutError) as exc_info:
            await manager.execute_with_retry(func, RetryConfig(max_attempts=3))

        assert exc_info.value is last
        assert func.call_count == 3
        assert no_sleep.call_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_raises_immediately(self, manager, no_sleep):
        func = AsyncMock(side_effect=AuthenticationError("/x"))

        with pytest.raises(AuthenticationError):
            await manager.execute_with_retry(func, RetryConfig(max_attempts=3))

        assert func.call_count == 1
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_retry_not_allowed_fails_fast(self, manager, no_sleep):
        func = AsyncMock(side_effect=ServerError(500, "/x"))

        with pytest.raises(ServerError):
            await manager.execute_with_retry(func, RetryConfig(max_attempts=3, retry_allowed=False))

        assert func.call_count == 1
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_rate_limit_uses_retry_after(self, manager, no_sleep):
        func = AsyncMock(side_effect=[RateLimitError("/x", retry_after=60), "ok"])

        await manager.execute_with_retry(func, RetryConfig(max_attempts=2))

        no_sleep.assert_awaited_once_with(60.0)

    @pytest.mark.asyncio
    async def test_rate_limit_without_retry_after_uses_backoff(self, manager, no_sleep):
        func = AsyncMock(side_effect=[RateLimitError("/x"), "ok"])

        with patch("factorial_hr_sdk.reliability.retry.random.uniform", return_value=0.0):
            await manager.execute_with_retry(func, RetryConfig(max_attempts=2))

        no_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_non_sdk_errors_propagate(self, manager, no_sleep):
        func = AsyncMock(side_effect=KeyError("bug"))

        with pytest.raises(KeyError):
            await manager.execute_with_retry(func, RetryConfig(max_attempts=3))

        assert func.call_count == 1
