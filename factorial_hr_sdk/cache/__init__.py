"""In-memory TTL cache for read operations."""

from .manager import CACHE_TTL, CacheEntry, CacheManager, get_ttl

__all__ = [
    "CACHE_TTL",
    "CacheEntry",
    "CacheManager",
    "get_ttl",
]
