"""
HTTP client with retry logic for the FactorialHR API.

Every request goes through FactorialHTTPClient.request, which builds the
request, classifies failures into typed errors and retries according to
the method's retry budget.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from ..config.settings import FactorialConfig
from ..errors import NetworkError, SchemaValidationError, TimeoutError
from ..observability.logging import StructuredLogger
from ..reliability.error_classifier import ResponseClassifier
from ..reliability.retry import RetryConfig, RetryManager, is_retry_allowed, resolve_max_attempts

QueryParams = Dict[str, Any]


class FactorialHTTPClient:
    """
    Async HTTP client for the FactorialHR REST API.

    The client is responsible for:
    - Building URLs, query strings and headers
    - Enforcing a per-attempt timeout
    - Converting non-2xx responses and transport failures into SDK errors
    - Retrying GETs, and mutations only when an idempotency key is supplied
    - Unwrapping the ``{"data": ...}`` envelope
    """

    def __init__(
        self,
        config: FactorialConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None
    ):
        """
        Args:
            config: Immutable configuration snapshot
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
            retry_manager: Optional retry manager override
        """
        self.config = config
        self.retry_manager = retry_manager or RetryManager()
        self.logger = StructuredLogger("http")
        self._client = httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "FactorialHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{endpoint}"

    def _build_headers(self, has_body: bool, idempotency_key: Optional[str]) -> Dict[str, str]:
        headers = {
            "x-api-key": self.config.api_key,
            "Accept": "application/json",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[QueryParams] = None,
        body: Optional[Any] = None,
        idempotency_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        no_retry: bool = False
    ) -> Any:
        """
        Make an HTTP request with retry logic.

        Args:
            endpoint: Path appended to the configured base URL
            method: HTTP method
            params: Query parameters; None values are dropped
            body: JSON body
            idempotency_key: Sent as Idempotency-Key; enables retries for mutations
            timeout: Per-attempt timeout in seconds (overrides config)
            max_retries: Attempt budget (overrides the method default)
            no_retry: Force a single attempt

        Returns:
            Parsed JSON body, or None for 204 / empty responses

        Raises:
            FactorialError: One of the typed errors from factorial_hr_sdk.errors
        """
        method = method.upper()
        url = self._build_url(endpoint)
        query = {k: v for k, v in (params or {}).items() if v is not None}
        effective_timeout = timeout if timeout is not None else self.config.timeout
        headers = self._build_headers(body is not None, idempotency_key)

        retry_config = RetryConfig(
            max_attempts=resolve_max_attempts(
                method,
                self.config.max_retries,
                idempotency_key=idempotency_key,
                max_retries=max_retries,
                no_retry=no_retry
            ),
            retry_allowed=is_retry_allowed(method, idempotency_key)
        )

        async def attempt() -> Any:
            return await self._send(method, url, endpoint, query, body, headers, effective_timeout)

        with self.logger.track_request(method, endpoint):
            return await self.retry_manager.execute_with_retry(attempt, retry_config, endpoint)

    async def _send(
        self,
        method: str,
        url: str,
        endpoint: str,
        query: QueryParams,
        body: Optional[Any],
        headers: Dict[str, str],
        timeout: float
    ) -> Any:
        """Perform a single attempt, bounded by ``timeout`` from start to full body."""
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    method,
                    url,
                    params=query or None,
                    json=body,
                    headers=headers,
                    timeout=timeout
                ),
                timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TimeoutError(timeout, endpoint) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Network error while contacting FactorialHR: {e}", cause=e)

        return self._handle_response(response, endpoint)

    def _handle_response(self, response: httpx.Response, endpoint: str) -> Any:
        if not response.is_success:
            self.logger.debug(
                f"API error ({response.status_code})",
                endpoint=endpoint,
                error=response.text[:200]
            )
            raise ResponseClassifier.classify_response(response, endpoint)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SchemaValidationError("JSON body", str(e), context={"endpoint": endpoint})

    @staticmethod
    def _unwrap_one(response: Any, endpoint: str) -> Any:
        if not isinstance(response, dict) or "data" not in response:
            raise SchemaValidationError(
                "ApiResponse", "expected an object with a 'data' field", context={"endpoint": endpoint}
            )
        return response["data"]

    @staticmethod
    def _unwrap_list(response: Any, endpoint: str) -> List[Any]:
        if not isinstance(response, dict):
            raise SchemaValidationError(
                "ApiListResponse", "expected an object envelope", context={"endpoint": endpoint}
            )
        data = response.get("data")
        if data is None:
            return []
        if not isinstance(data, list):
            raise SchemaValidationError(
                "ApiListResponse", "'data' is not a list", context={"endpoint": endpoint}
            )
        return data

    async def fetch_one(self, endpoint: str, **options) -> Any:
        """GET a single-item envelope and return the inner item."""
        response = await self.request(endpoint, **options)
        return self._unwrap_one(response, endpoint)

    async def fetch_list(self, endpoint: str, **options) -> List[Any]:
        """GET a list envelope and return the inner list ([] when data is absent)."""
        response = await self.request(endpoint, **options)
        return self._unwrap_list(response, endpoint)

    async def post_one(self, endpoint: str, body: Any, idempotency_key: Optional[str] = None, **options) -> Any:
        """Create a resource."""
        response = await self.request(
            endpoint, method="POST", body=body, idempotency_key=idempotency_key, **options
        )
        return self._unwrap_one(response, endpoint)

    async def put_one(self, endpoint: str, body: Any, idempotency_key: Optional[str] = None, **options) -> Any:
        """Replace a resource."""
        response = await self.request(
            endpoint, method="PUT", body=body, idempotency_key=idempotency_key, **options
        )
        return self._unwrap_one(response, endpoint)

    async def patch_one(self, endpoint: str, body: Any, idempotency_key: Optional[str] = None, **options) -> Any:
        """Partially update a resource."""
        response = await self.request(
            endpoint, method="PATCH", body=body, idempotency_key=idempotency_key, **options
        )
        return self._unwrap_one(response, endpoint)

    async def delete_one(self, endpoint: str, idempotency_key: Optional[str] = None, **options) -> None:
        """Delete a resource. The API answers 204 with no body."""
        await self.request(endpoint, method="DELETE", idempotency_key=idempotency_key, **options)

    async def post_action(
        self,
        endpoint: str,
        body: Optional[Any] = None,
        idempotency_key: Optional[str] = None,
        **options
    ) -> Any:
        """
        Trigger a state-transition endpoint such as ``/leaves/1/approve``.

        An empty object is sent when no body is given. Returns the inner
        item, or None when the action answers without content.
        """
        response = await self.request(
            endpoint,
            method="POST",
            body=body if body is not None else {},
            idempotency_key=idempotency_key,
            **options
        )
        if response is None:
            return None
        return self._unwrap_one(response, endpoint)
