"""
FactorialHR API defaults.

Environment variable names and fallback values used by
factorial_hr_sdk/config/settings.py.
"""

DEFAULT_API_VERSION = "2025-10-01"
DEFAULT_BASE_URL_TEMPLATE = "https://api.factorialhr.com/api/{version}/resources"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3

# Retry budget for mutations that carry an Idempotency-Key header
IDEMPOTENT_MUTATION_RETRIES = 2

# Backoff bounds (seconds)
RETRY_BASE_DELAY = 1.0
RETRY_MAX_DELAY = 10.0
RETRY_JITTER_FACTOR = 0.2

# Confirmation tokens live for 5 minutes
CONFIRMATION_TOKEN_TTL_SECONDS = 300.0

# Cache sweep interval
CACHE_CLEANUP_INTERVAL_SECONDS = 60.0

# Environment variables
API_KEY_ENV_VAR = "FACTORIAL_API_KEY"
API_VERSION_ENV_VAR = "FACTORIAL_API_VERSION"
BASE_URL_ENV_VAR = "FACTORIAL_BASE_URL"
TIMEOUT_ENV_VAR = "FACTORIAL_TIMEOUT_MS"
MAX_RETRIES_ENV_VAR = "FACTORIAL_MAX_RETRIES"
DEBUG_ENV_VAR = "DEBUG"
ENV_FILE_PATH_ENV_VAR = "ENV_FILE_PATH"
