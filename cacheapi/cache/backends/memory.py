"""
CacheAPI — Memory Cache Backend

In-process cache on cachetools.TLRUCache with per-key TTL support.
Suitable for single-process deployments and tests; the store is lost when
the process exits.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

from ...config.schemas import CacheConfig
from ..base import BaseCacheBackend
from ..settings import FieldKind, SettingField, SettingsSurface, add_setting

logger = logging.getLogger(__name__)

# Stored item: (payload, ttl_seconds)
_Item = tuple[str, int]


def _time_to_use(key: str, item: _Item, now: float) -> float:
    """Expiry timestamp for an item; TTL 0 never expires."""
    ttl = item[1]
    return now + ttl if ttl > 0 else math.inf


class MemoryCacheBackend(BaseCacheBackend):
    """
    In-memory cache backend.

    Features:
    - Per-key TTL via cachetools TLRUCache
    - Bounded size; when full, the least recently used live item is evicted
    - Injectable clock for deterministic expiry in tests
    """

    name = "memory"

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize memory cache backend.

        Args:
            config: Cache configuration (max_size bounds the store)
            clock: Time source in seconds
        """
        super().__init__(config)
        self.max_size = self.config.max_size
        self._clock = clock
        self._store: TLRUCache[str, _Item] = TLRUCache(
            maxsize=self.max_size,
            ttu=_time_to_use,
            timer=clock,
        )

    def _read(self, full_key: str) -> str | None:
        item = self._store.get(full_key)
        if item is None:
            return None
        return item[0]

    def _write(self, full_key: str, payload: str, ttl: int) -> bool:
        self._store[full_key] = (payload, ttl)
        return True

    def _remove(self, full_key: str) -> bool:
        self._store.pop(full_key, None)
        return True

    def _clear(self, cache_type: str) -> bool:
        # Single category: cache_type is ignored
        size = len(self._store)
        self._store.clear()
        logger.debug(f"Cleared {size} entries from memory cache")
        return True

    def _sweep(self) -> None:
        before = len(self._store)
        self._store.expire()
        expired = before - len(self._store)
        if expired:
            logger.debug(f"Expired {expired} memory cache entries")

    def invalidate_cache(self) -> bool:
        """Flush the whole store, then apply the default anchor touch."""
        self._store.clear()
        return super().invalidate_cache()

    def cache_settings(self, config_vars: SettingsSurface) -> None:
        add_setting(
            config_vars,
            SettingField(
                name="max_size",
                kind=FieldKind.INT,
                label="Maximum cached entries",
                default=self.config.max_size,
                backend=self.name,
            ),
        )

    def get_stats(self) -> dict[str, Any]:
        stats = super().get_stats()
        stats["size"] = len(self._store)
        stats["max_size"] = self.max_size
        return stats
