"""Observability layer: structured logging for the SDK components."""

from .logging import StructuredLogger, configure_logging

__all__ = [
    "StructuredLogger",
    "configure_logging",
]
