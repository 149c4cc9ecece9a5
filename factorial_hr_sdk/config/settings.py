"""
Configuration management for the FactorialHR SDK.

Centralizes environment variable handling and produces an immutable
FactorialConfig snapshot that is passed into the HTTP pipeline.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError
from .constants import (
    API_KEY_ENV_VAR,
    API_VERSION_ENV_VAR,
    BASE_URL_ENV_VAR,
    DEBUG_ENV_VAR,
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL_TEMPLATE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_FILE_PATH_ENV_VAR,
    MAX_RETRIES_ENV_VAR,
    TIMEOUT_ENV_VAR,
)


class FactorialConfig(BaseModel):
    """Immutable configuration snapshot for the FactorialHR API client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, description="FactorialHR API key")
    api_version: str = Field(default=DEFAULT_API_VERSION, description="API version, e.g. 2025-10-01")
    base_url: str = Field(..., description="Base URL including the versioned resources path")
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Per-attempt timeout in seconds")
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1, description="Attempts for GET requests")
    debug: bool = Field(default=False, description="Enable debug logging")


def load_env() -> Optional[Path]:
    """
    Load environment variables from a .env file.

    Lookup order:
    1. ENV_FILE_PATH environment variable
    2. Current working directory .env
    3. Home directory .env
    4. Default python-dotenv search

    Returns:
        The path that was loaded, or None when falling back to the default search
    """
    explicit = os.getenv(ENV_FILE_PATH_ENV_VAR)
    candidates = [Path(explicit)] if explicit else []
    candidates += [Path.cwd() / ".env", Path.home() / ".env"]

    for path in candidates:
        if path.is_file():
            load_dotenv(path)
            return path

    load_dotenv()
    return None


def get_api_key() -> str:
    """
    Get the FactorialHR API key.

    Raises:
        ConfigurationError: If FACTORIAL_API_KEY is not set
    """
    api_key = os.getenv(API_KEY_ENV_VAR)
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV_VAR} is not set. "
            "Please add it to your .env file or pass it via the MCP configuration."
        )
    return api_key


def get_api_version() -> str:
    return os.getenv(API_VERSION_ENV_VAR) or DEFAULT_API_VERSION


def get_base_url() -> str:
    override = os.getenv(BASE_URL_ENV_VAR)
    if override:
        return override.rstrip("/")
    return DEFAULT_BASE_URL_TEMPLATE.format(version=get_api_version())


def is_debug_enabled() -> bool:
    return os.getenv(DEBUG_ENV_VAR, "").lower() == "true"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def get_config() -> FactorialConfig:
    """
    Build the complete configuration from the environment.

    FACTORIAL_TIMEOUT_MS is read in milliseconds and stored in seconds.
    """
    timeout_ms = _int_env(TIMEOUT_ENV_VAR, int(DEFAULT_TIMEOUT_SECONDS * 1000))
    if timeout_ms <= 0:
        raise ConfigurationError(f"{TIMEOUT_ENV_VAR} must be positive, got {timeout_ms}")

    max_retries = _int_env(MAX_RETRIES_ENV_VAR, DEFAULT_MAX_RETRIES)
    if max_retries < 1:
        raise ConfigurationError(f"{MAX_RETRIES_ENV_VAR} must be at least 1, got {max_retries}")

    return FactorialConfig(
        api_key=get_api_key(),
        api_version=get_api_version(),
        base_url=get_base_url(),
        timeout=timeout_ms / 1000,
        max_retries=max_retries,
        debug=is_debug_enabled(),
    )
