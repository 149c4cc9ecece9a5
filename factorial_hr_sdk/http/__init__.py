"""HTTP transport for the FactorialHR REST API."""

from .client import FactorialHTTPClient
from .endpoints import ENDPOINTS, endpoint_with_action, endpoint_with_id

__all__ = [
    "FactorialHTTPClient",
    "ENDPOINTS",
    "endpoint_with_action",
    "endpoint_with_id",
]
