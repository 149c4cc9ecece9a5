"""Configuration module for the FactorialHR SDK."""

from .settings import (
    FactorialConfig,
    get_api_key,
    get_api_version,
    get_base_url,
    get_config,
    is_debug_enabled,
    load_env,
)

# Import all constants
from .constants import *

__all__ = [
    "FactorialConfig",
    "get_api_key",
    "get_api_version",
    "get_base_url",
    "get_config",
    "is_debug_enabled",
    "load_env",
]
