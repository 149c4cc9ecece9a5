"""Shared pytest fixtures for FactorialHR SDK tests."""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, patch

from factorial_hr_sdk.config.settings import FactorialConfig
from factorial_hr_sdk.http.client import FactorialHTTPClient
from tests.helpers.mock_api import BASE_URL, MockFactorialAPI


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    env_vars = {
        "FACTORIAL_API_KEY": "test-api-key",
        "FACTORIAL_BASE_URL": BASE_URL,
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    for key in ("FACTORIAL_API_VERSION", "FACTORIAL_TIMEOUT_MS", "FACTORIAL_MAX_RETRIES", "DEBUG"):
        monkeypatch.delenv(key, raising=False)
    return env_vars


@pytest.fixture
def config():
    """Configuration pointing at the mock API."""
    return FactorialConfig(
        api_key="test-api-key",
        base_url=BASE_URL,
        timeout=5.0,
        max_retries=3,
    )


@pytest.fixture
def mock_api():
    """Scripted upstream API served through httpx.MockTransport."""
    return MockFactorialAPI()


@pytest.fixture
def no_sleep():
    """Make retry backoff instantaneous and record the requested delays."""
    with patch("factorial_hr_sdk.reliability.retry.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest_asyncio.fixture
async def http_client(config, mock_api, no_sleep):
    """HTTP client wired to the mock API."""
    client = FactorialHTTPClient(config, transport=mock_api.transport)
    yield client
    await client.aclose()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: tests spanning several components")
