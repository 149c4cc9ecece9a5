"""
Structured logging utility for SDK components.

Provides a consistent logging interface for the HTTP pipeline, cache,
confirmation manager and audit log, with ``key=value`` fields prefixed to
every message.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Optional

ROOT_LOGGER_NAME = "factorial_hr_sdk"


def configure_logging(debug: bool = False, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """
    Configure the package root logger.

    Args:
        debug: Emit DEBUG records (cache hits, retries, audit entries) when True
        handler: Optional handler; a stderr StreamHandler is added if the
            logger has none

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if handler is not None:
        logger.addHandler(handler)
    elif not logger.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("[%(asctime)s] [%(name)s] %(levelname)s %(message)s"))
        logger.addHandler(stream)

    return logger


class StructuredLogger:
    """Structured logger for one SDK component."""

    def __init__(self, component: str):
        """
        Initialize logger for a specific component.

        Args:
            component: Name of the component (e.g., "http", "cache")
        """
        self.component = component
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with structured fields."""
        fields = [f"component={self.component}"]

        for key, value in kwargs.items():
            if value is not None:
                fields.append(f"{key}={value}")

        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, error: Optional[BaseException] = None, **kwargs):
        """Log error message with structured fields."""
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)

        self.logger.error(self._format_message(message, **kwargs))

    @contextmanager
    def track_request(self, method: str, endpoint: str, request_id: Optional[str] = None):
        """
        Context manager to track request timing and log key events.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            request_id: Optional request ID (generated if not provided)

        Yields:
            Dict with request metadata including request_id
        """
        if request_id is None:
            request_id = str(uuid.uuid4())[:8]

        start_time = time.time()

        self.debug(
            f"Starting {method} request",
            endpoint=endpoint,
            request_id=request_id
        )

        metadata = {
            'request_id': request_id,
            'endpoint': endpoint,
            'method': method,
            'start_time': start_time
        }

        try:
            yield metadata

            duration = time.time() - start_time
            self.debug(
                f"Completed {method} request",
                endpoint=endpoint,
                request_id=request_id,
                duration_ms=int(duration * 1000)
            )

        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Failed {method} request",
                endpoint=endpoint,
                request_id=request_id,
                duration_ms=int(duration * 1000),
                error=e
            )
            raise
