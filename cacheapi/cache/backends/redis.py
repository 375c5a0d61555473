"""
CacheAPI — Redis Cache Backend

Redis cache implementation with:
- JSON payloads (serialized by the shared base)
- Per-key TTL via SET ... EX
- Prefixed keys so installations can share one server
- Namespace flush via SCAN + DEL batches

Requires: redis>=5.0

Example:
    cache = RedisCacheBackend(CacheConfig(backend="redis", redis_url="redis://localhost:6379/0"))
    if cache.connect():
        cache.put_data("greeting", {"msg": "hello"}, ttl=60)
        val = cache.get_data("greeting")
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ...config.schemas import CacheConfig
from ..base import BaseCacheBackend
from ..settings import FieldKind, SettingField, SettingsSurface, add_setting

logger = logging.getLogger(__name__)

try:
    from redis import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class RedisCacheBackend(BaseCacheBackend):
    """
    Redis cache backend.

    Notes:
    - The client is created in connect() and verified with PING.
    - TTL 0 stores without expiry.
    - clean_cache() ignores cache_type and removes every key under the
      current prefix; invalidate_cache() does the same, then rotates the
      prefix like the default backend.
    """

    name = "redis"

    def __init__(self, config: CacheConfig | None = None) -> None:
        super().__init__(config)
        self._client: Redis | None = None

    # ------------ Helpers ------------

    def _match_pattern(self) -> str:
        """SCAN pattern covering every key under the current prefix."""
        return _GLOB_SPECIAL.sub(r"\\\1", self.prefix) + "*"

    def _is_available(self) -> bool:
        return bool(self.config.redis_url)

    def _open(self) -> bool:
        try:
            client = Redis.from_url(
                self.config.redis_url,
                decode_responses=True,
                max_connections=self.config.redis_max_connections,
                socket_timeout=self.config.redis_socket_timeout,
            )
            client.ping()
        except Exception as e:
            logger.error(
                f"Failed to connect to Redis: {e}",
                extra={"redis_url": self.config.redis_url, "error": str(e)},
            )
            return False

        self._client = client
        logger.info("Connected to Redis cache backend", extra={"redis_url": self.config.redis_url})
        return True

    def _close(self) -> None:
        if self._client is None:
            return
        try:
            self._client.close()
        finally:
            try:
                self._client.connection_pool.disconnect()
            except Exception as e:
                logger.warning(f"Error disconnecting Redis connection pool: {e}", extra={"error": str(e)})
            self._client = None
        logger.info(f"Closed Redis cache backend for prefix '{self.prefix}'")

    # ------------ Storage hooks ------------

    def _read(self, full_key: str) -> str | bytes | None:
        return self._client.get(full_key)  # type: ignore[union-attr]

    def _write(self, full_key: str, payload: str, ttl: int) -> bool:
        # redis-py returns True or 'OK' depending on decode_responses
        res = self._client.set(name=full_key, value=payload, ex=ttl if ttl > 0 else None)  # type: ignore[union-attr]
        return bool(res)

    def _remove(self, full_key: str) -> bool:
        self._client.delete(full_key)  # type: ignore[union-attr]
        return True

    def _clear(self, cache_type: str) -> bool:
        if self._client is None:
            logger.warning("Cannot clean Redis cache before connect()")
            return False

        batch_size = 1000
        batch: list[str] = []
        total_deleted = 0

        for key in self._client.scan_iter(match=self._match_pattern(), count=batch_size):
            batch.append(key)
            if len(batch) >= batch_size:
                total_deleted += int(self._client.delete(*batch))
                batch.clear()
        if batch:
            total_deleted += int(self._client.delete(*batch))

        logger.info(f"Cleared {total_deleted} keys under prefix '{self.prefix}'")
        return True

    # ------------ Overrides ------------

    def invalidate_cache(self) -> bool:
        """Flush the current prefix, then rotate it."""
        if self._client is not None:
            try:
                self._clear("")
            except Exception as e:
                logger.warning(
                    f"Redis flush during invalidation failed: {e}",
                    extra={"prefix": self.prefix, "error": str(e)},
                )
        return super().invalidate_cache()

    def cache_settings(self, config_vars: SettingsSurface) -> None:
        add_setting(
            config_vars,
            SettingField(
                name="redis_url",
                kind=FieldKind.TEXT,
                label="Redis server URL",
                help="redis://host:port/db, or rediss:// for TLS",
                default=self.config.redis_url or "",
                backend=self.name,
            ),
        )
        add_setting(
            config_vars,
            SettingField(
                name="redis_max_connections",
                kind=FieldKind.INT,
                label="Connection pool size",
                default=self.config.redis_max_connections,
                backend=self.name,
            ),
        )
        add_setting(
            config_vars,
            SettingField(
                name="redis_socket_timeout",
                kind=FieldKind.INT,
                label="Socket timeout (seconds)",
                default=self.config.redis_socket_timeout,
                backend=self.name,
            ),
        )

    def get_stats(self) -> dict[str, Any]:
        """Return cache statistics and basic Redis info."""
        stats = super().get_stats()
        if self._client is None:
            return stats

        try:
            info = self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
            stats["redis_mode"] = info.get("redis_mode")
        except Exception as e:
            # INFO may be restricted
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})

        return stats
