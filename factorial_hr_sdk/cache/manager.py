"""
Simple in-memory TTL cache.

Reduces API calls by memoizing read results for a bounded time. Expired
entries are removed on read, and a periodic sweep reclaims entries that
nobody reads again.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from ..config.constants import CACHE_CLEANUP_INTERVAL_SECONDS
from ..observability.logging import StructuredLogger

T = TypeVar('T')

logger = StructuredLogger("cache")

# TTL per resource type, in seconds
CACHE_TTL: Dict[str, float] = {
    "employees": 5 * 60,
    "teams": 10 * 60,
    "locations": 15 * 60,
    "contracts": 3 * 60,
    "leaves": 2 * 60,
    "shifts": 1 * 60,
    "default": 5 * 60,
}


def get_ttl(resource_type: str) -> float:
    """Get the TTL for a resource type, falling back to the default."""
    return CACHE_TTL.get(resource_type, CACHE_TTL["default"])


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class CacheManager:
    """
    TTL-only cache keyed by strings built with CacheManager.key.

    Not safe for concurrent access from multiple threads; all access is
    expected to happen on one event loop.
    """

    def __init__(self, cleanup_interval: float = CACHE_CLEANUP_INTERVAL_SECONDS):
        self.cleanup_interval = cleanup_interval
        self._cache: Dict[str, CacheEntry] = {}
        self._cleanup_task: Optional[asyncio.Task] = None
        self._destroyed = False
        self.start()

    @staticmethod
    def key(resource: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a cache key from a resource name and parameters.

        Parameters are sorted by name and None values are dropped, so the
        same logical query always yields the same key.
        """
        if not params:
            return resource

        parts = [
            f"{name}={json.dumps(params[name], sort_keys=True, default=str)}"
            for name in sorted(params)
            if params[name] is not None
        ]
        if not parts:
            return resource
        return f"{resource}:{'&'.join(parts)}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Returns:
            The cached value, or None if not found or expired
        """
        entry = self._cache.get(key)
        if entry is None:
            return None

        if time.time() > entry.expires_at:
            self._cache.pop(key, None)
            logger.debug("Cache miss (expired)", key=key)
            return None

        logger.debug("Cache hit", key=key)
        return entry.data

    def set(self, key: str, data: Any, ttl: float = CACHE_TTL["default"]) -> None:
        """
        Store a value, overwriting any existing entry.

        Args:
            key: Cache key
            data: Data to cache
            ttl: Time to live in seconds
        """
        self._cache[key] = CacheEntry(data=data, expires_at=time.time() + ttl)
        logger.debug("Cache set", key=key, ttl=ttl)

    def invalidate(self, key: str) -> bool:
        removed = self._cache.pop(key, None) is not None
        if removed:
            logger.debug("Cache invalidated", key=key)
        return removed

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix. Returns the count removed."""
        to_delete = [k for k in self._cache if k.startswith(prefix)]
        for k in to_delete:
            self._cache.pop(k, None)
        if to_delete:
            logger.debug(f"Cache invalidated {len(to_delete)} entries", prefix=prefix)
        return len(to_delete)

    def clear(self) -> None:
        size = len(self._cache)
        self._cache.clear()
        logger.debug(f"Cache cleared ({size} entries)")

    def stats(self) -> Dict[str, Any]:
        keys: List[str] = list(self._cache.keys())
        return {"size": len(keys), "keys": keys}

    def cleanup(self) -> int:
        """Remove expired entries. Returns the count removed."""
        now = time.time()
        expired = [k for k, entry in self._cache.items() if now > entry.expires_at]
        for k in expired:
            self._cache.pop(k, None)
        if expired:
            logger.debug(f"Cache cleanup: removed {len(expired)} expired entries")
        return len(expired)

    def start(self) -> None:
        """
        Start the periodic sweep on the running event loop.

        No-op when no loop is running, when the sweep is already active, or
        after destroy().
        """
        if self._destroyed:
            return
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._cleanup_task = loop.create_task(self._cleanup_loop())

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            self.cleanup()

    @property
    def is_sweeping(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def destroy(self) -> None:
        """Stop the periodic sweep. Safe to call more than once."""
        self._destroyed = True
        task, self._cleanup_task = self._cleanup_task, None
        if task is None or task.done():
            return
        try:
            task.cancel()
        except RuntimeError:
            # owning loop already closed; the task can never run again
            logger.debug("Cache sweep loop already closed")

    async def cached(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None
    ) -> T:
        """
        Return the cached value for key, or fetch, store and return it.

        Errors raised by fetcher propagate and nothing is stored.
        """
        self.start()

        value = self.get(key)
        if value is not None:
            return value

        data = await fetcher()
        self.set(key, data, ttl if ttl is not None else CACHE_TTL["default"])
        return data
