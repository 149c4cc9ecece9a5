"""
Response classification for the HTTP pipeline.

This module converts non-2xx upstream responses into exactly one error
class from factorial_hr_sdk.errors. It is the only place where status codes
are mapped to error types.
"""

import json
from typing import Any, Dict, Mapping, Optional, Set

import httpx

from ..errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FactorialError,
    HttpError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnprocessableEntityError,
    ValidationError,
    format_validation_errors,
)


class ResponseClassifier:
    """Maps upstream HTTP responses to typed SDK errors."""

    RETRYABLE_STATUS_CODES: Set[int] = {429, 500, 502, 503, 504}

    @staticmethod
    def parse_error_body(text: str) -> Optional[Dict[str, Any]]:
        """
        Parse an error body of shape ``{errors?, message?}``.

        Returns:
            The decoded object, or None for empty, non-JSON or non-object bodies
        """
        if not text:
            return None
        try:
            parsed = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            return None
        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def get_retry_after(headers: Mapping[str, str]) -> Optional[float]:
        """
        Extract the Retry-After value in seconds.

        Only the delta-seconds form is honoured; HTTP dates are ignored.
        """
        retry_after = headers.get('Retry-After')
        if retry_after:
            try:
                value = float(retry_after)
            except ValueError:
                return None
            return value if value >= 0 else None
        return None

    @classmethod
    def classify_response(cls, response: httpx.Response, endpoint: str) -> FactorialError:
        """
        Classify a non-2xx response.

        Args:
            response: The upstream response
            endpoint: The endpoint path used for the request

        Returns:
            The error instance matching the status code
        """
        status = response.status_code
        text = response.text
        parsed = cls.parse_error_body(text)
        context = {"raw": parsed if parsed is not None else text}

        if status == 401:
            return AuthenticationError(endpoint, context=context)
        if status == 403:
            return AuthorizationError(endpoint, context=context)
        if status == 404:
            return NotFoundError(endpoint, context=context)
        if status == 400:
            return ValidationError(endpoint, format_validation_errors(parsed), context=context)
        if status == 409:
            message = (parsed or {}).get("message") or "Resource conflict. The resource may already exist."
            return ConflictError(endpoint, message, context=context)
        if status == 422:
            return UnprocessableEntityError(endpoint, format_validation_errors(parsed), context=context)
        if status == 429:
            return RateLimitError(endpoint, cls.get_retry_after(response.headers), context=context)
        if status >= 500:
            return ServerError(status, endpoint, text or None, context=context)

        return HttpError(status, endpoint, f"FactorialHR API error ({status}): {text}", context=context)
