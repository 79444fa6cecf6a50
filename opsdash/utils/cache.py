import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple


class TTLCache:
    """In-memory TTL cache for read-only picker data (categories, projects, tasks)."""

    def __init__(self, default_ttl_seconds: int = 300):
        """
        Args:
            default_ttl_seconds: Default TTL in seconds for cache entries
        """
        self.default_ttl = default_ttl_seconds
        self._cache: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        if key not in self._cache:
            return None

        value, expiry_time = self._cache[key]
        if time.time() > expiry_time:
            del self._cache[key]
            return None

        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        self._cache[key] = (value, time.time() + ttl)

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, awaiting fetch() on a miss.

        Failed fetches are not cached; the exception propagates to the caller.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = await fetch()
        if self.default_ttl > 0:
            self.set(key, value)
        return value

    def cleanup_expired(self) -> int:
        """
        Remove expired entries from cache.

        Returns:
            Number of expired entries removed
        """
        current_time = time.time()
        expired_keys = [
            key for key, (_, expiry_time) in self._cache.items()
            if current_time > expiry_time
        ]
        for key in expired_keys:
            del self._cache[key]
        return len(expired_keys)

    def size(self) -> int:
        return len(self._cache)
