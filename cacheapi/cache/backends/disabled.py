"""
CacheAPI — Disabled Cache Backend

No-op backend used when caching is switched off or no other backend is
usable. Every read misses and no write is stored.
"""

from ..base import BaseCacheBackend


class DisabledCacheBackend(BaseCacheBackend):
    """Backend that caches nothing."""

    name = "disabled"

    def _read(self, full_key: str) -> None:
        return None

    def _write(self, full_key: str, payload: str, ttl: int) -> bool:
        # Not cached; callers recompute
        return False

    def _remove(self, full_key: str) -> bool:
        return True

    def _clear(self, cache_type: str) -> bool:
        return True

    def invalidate_cache(self) -> bool:
        return True
