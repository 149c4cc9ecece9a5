"""Public API interface for the FactorialHR SDK."""

from .client import FactorialClient

__all__ = ["FactorialClient"]
