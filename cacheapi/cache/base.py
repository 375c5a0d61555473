"""
CacheAPI — Default Cache Backend

Shared behavior every backend inherits:
- Key prefixing, with a default prefix derived from the installation
  identity and the modification time of a filesystem anchor
- Default TTL bookkeeping
- Invalidation by touching the anchor (lazy, O(1))
- JSON serialization of payloads
- Lifecycle guards (constructed -> connected -> quit)
- Hit/miss statistics
- Version reporting, settings surface and housekeeping defaults

Concrete backends implement the storage hooks ``_read``, ``_write``,
``_remove`` and ``_clear`` and optionally ``_open``, ``_close``, ``_sweep``
and ``_is_available``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from abc import abstractmethod
from pathlib import Path
from typing import Any

from ..config.schemas import CacheConfig
from .interface import CacheInterface
from .settings import SettingsSurface

logger = logging.getLogger(__name__)


class BaseCacheBackend(CacheInterface):
    """
    Default implementation of the cache contract.

    Subclasses only deal with prefixed keys and already-serialized payloads;
    prefixing, TTL resolution, serialization and error containment happen
    here.
    """

    name = "base"

    # Host version range this backend supports
    compatible_version = "1.0.999"
    min_version = "1.0 RC1"

    def __init__(self, config: CacheConfig | None = None) -> None:
        """
        Initialize the backend and compute its default prefix.

        Args:
            config: Cache configuration (defaults when omitted)
        """
        self.config = config or CacheConfig()
        self.prefix = ""
        self.default_ttl = self.config.ttl_seconds

        self._custom_prefix = False
        self._connected = False
        self._closed = False

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        self.set_prefix()

    # ------------ Storage hooks ------------

    @abstractmethod
    def _read(self, full_key: str) -> str | bytes | None:
        """Return the raw payload stored under a prefixed key, or None."""

    @abstractmethod
    def _write(self, full_key: str, payload: str, ttl: int) -> bool:
        """Store a serialized payload; ttl 0 means no expiry."""

    @abstractmethod
    def _remove(self, full_key: str) -> bool:
        """Delete a prefixed key. Deleting a missing key still succeeds."""

    @abstractmethod
    def _clear(self, cache_type: str) -> bool:
        """Remove entries of the given category."""

    def _is_available(self) -> bool:
        """Static capability probe (required package importable, etc.)."""
        return True

    def _open(self) -> bool:
        return True

    def _close(self) -> None:
        pass

    def _sweep(self) -> None:
        pass

    # ------------ Helpers ------------

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def prefix_suffix(self) -> str:
        """Constant tail of every computed prefix, identifying the namespace."""
        return f"-{self.config.namespace.upper()}-"

    def _make_key(self, key: str) -> str:
        """Create prefixed cache key."""
        return f"{self.prefix}{key}"

    def _resolve_ttl(self, ttl: int | None) -> int:
        """None or 0 defers to the default TTL."""
        if not ttl or ttl < 0:
            return self.default_ttl
        return int(ttl)

    @staticmethod
    def _to_json(value: Any) -> str:
        """Serialize value to JSON string."""
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes | None) -> Any | None:
        """Deserialize a stored payload. Undecodable data reads as a miss."""
        if data is None:
            return None
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(
                f"Failed to decode cached payload, treating as a miss: {e}",
                extra={"error": str(e)},
            )
            return None

    def _anchor(self) -> Path | None:
        """
        Locate the filesystem object whose mtime feeds the default prefix.

        Prefers the sentinel file inside the cache directory, then the
        directory itself. None when neither exists.
        """
        cache_dir = self.config.cache_dir
        if cache_dir is None:
            return None

        sentinel = cache_dir / self.config.anchor_name
        if sentinel.is_file():
            return sentinel
        if cache_dir.is_dir():
            return cache_dir
        return None

    def _volatile_marker(self) -> str:
        anchor = self._anchor()
        if anchor is None:
            return ""
        try:
            return str(anchor.stat().st_mtime_ns)
        except OSError as e:
            logger.debug(f"Could not stat cache anchor {anchor}: {e}")
            return ""

    def _touch_anchor(self) -> bool:
        """Bump the anchor's mtime so freshly computed prefixes change."""
        anchor = self._anchor()
        if anchor is None or not os.access(anchor, os.W_OK):
            logger.debug(
                "Cache anchor missing or not writable, skipping touch",
                extra={"anchor": str(anchor) if anchor else None},
            )
            return False

        stat = anchor.stat()
        # Strictly later than the current mtime, even within one clock tick
        mtime_ns = max(time.time_ns(), stat.st_mtime_ns + 1_000_000)
        os.utime(anchor, ns=(stat.st_atime_ns, mtime_ns))
        return True

    def _ready(self, operation: str, key: str | None = None) -> bool:
        if self._connected:
            return True
        logger.warning(
            f"Cache {operation} called on a {self.name} backend that is not connected",
            extra={"backend": self.name, "operation": operation, "key": key, "closed": self._closed},
        )
        return False

    # ------------ Core Interface ------------

    def is_supported(self, test: bool = False) -> bool:
        try:
            available = self._is_available()
        except Exception as e:
            logger.warning(
                f"Capability probe failed for {self.name} backend: {e}",
                extra={"backend": self.name, "error": str(e)},
            )
            return False

        if not available:
            return False
        if test:
            return True
        return self.config.enabled

    def connect(self) -> bool:
        if self._closed:
            logger.warning(
                f"Refusing to reconnect a {self.name} backend after quit()",
                extra={"backend": self.name},
            )
            return False
        if self._connected:
            return True

        try:
            self._connected = bool(self._open())
        except Exception as e:
            logger.error(
                f"Failed to connect {self.name} cache backend: {e}",
                extra={"backend": self.name, "error": str(e)},
                exc_info=True,
            )
            self._connected = False

        return self._connected

    def set_prefix(self, prefix: str = "") -> bool:
        if prefix:
            self.prefix = prefix
            self._custom_prefix = True
            return True

        seed = f"{self.config.identity}{self._volatile_marker()}"
        digest = hashlib.md5(seed.encode("utf-8"), usedforsecurity=False).hexdigest()
        self.prefix = f"{digest}{self.prefix_suffix}"
        self._custom_prefix = False
        return True

    def get_prefix(self) -> str:
        return self.prefix

    def set_default_ttl(self, ttl: int = 120) -> bool:
        try:
            self.default_ttl = max(0, int(ttl))
        except (TypeError, ValueError):
            logger.warning(
                f"Ignoring invalid default TTL {ttl!r}",
                extra={"backend": self.name, "ttl": repr(ttl)},
            )
        return True

    def get_default_ttl(self) -> int:
        return self.default_ttl

    def get_data(self, key: str, ttl: int | None = None) -> Any | None:
        if not self._ready("get_data", key):
            self._misses += 1
            return None

        try:
            raw = self._read(self._make_key(key))
        except Exception as e:
            logger.error(
                f"Failed to get key '{key}' from {self.name} cache: {e}",
                extra={"key": key, "backend": self.name, "error": str(e)},
                exc_info=True,
            )
            self._misses += 1
            return None

        value = self._from_json(raw)
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def put_data(self, key: str, value: Any, ttl: int | None = None) -> bool:
        # None means delete; new callers should use delete_data()
        if value is None:
            return self.delete_data(key)

        if not self._ready("put_data", key):
            return False

        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            logger.error(
                f"Failed to serialize value for key '{key}': {e}",
                extra={"key": key, "value_type": type(value).__name__, "error": str(e)},
            )
            return False

        effective_ttl = self._resolve_ttl(ttl)
        try:
            stored = bool(self._write(self._make_key(key), payload, effective_ttl))
        except Exception as e:
            logger.error(
                f"Failed to set key '{key}' in {self.name} cache: {e}",
                extra={"key": key, "backend": self.name, "ttl": effective_ttl, "error": str(e)},
                exc_info=True,
            )
            return False

        if stored:
            self._sets += 1
        return stored

    def delete_data(self, key: str) -> bool:
        """
        Delete a key explicitly.

        Returns:
            True if the store accepted the delete (missing keys included)
        """
        if not self._ready("delete_data", key):
            return False

        try:
            removed = bool(self._remove(self._make_key(key)))
        except Exception as e:
            logger.error(
                f"Failed to delete key '{key}' from {self.name} cache: {e}",
                extra={"key": key, "backend": self.name, "error": str(e)},
                exc_info=True,
            )
            return False

        if removed:
            self._deletes += 1
        return removed

    def clean_cache(self, cache_type: str = "") -> bool:
        if self._closed:
            logger.warning(f"Cannot clean a {self.name} backend after quit()", extra={"backend": self.name})
            return False

        try:
            cleaned = bool(self._clear(cache_type))
        except Exception as e:
            logger.error(
                f"Failed to clean {self.name} cache: {e}",
                extra={"backend": self.name, "cache_type": cache_type, "error": str(e)},
                exc_info=True,
            )
            return False

        logger.info(
            f"Cleaned {self.name} cache",
            extra={"backend": self.name, "cache_type": cache_type or "default"},
        )
        return cleaned

    def invalidate_cache(self) -> bool:
        try:
            self._touch_anchor()
        except OSError as e:
            logger.warning(
                f"Could not touch cache anchor: {e}",
                extra={"backend": self.name, "error": str(e)},
            )

        if not self._custom_prefix:
            self.set_prefix()
        return True

    def quit(self) -> bool:
        if self._connected:
            try:
                self._close()
            except Exception as e:
                logger.error(
                    f"Error closing {self.name} cache backend: {e}",
                    extra={"backend": self.name, "error": str(e)},
                    exc_info=True,
                )
        self._connected = False
        self._closed = True
        logger.debug(f"{self.name} cache backend quit", extra={"backend": self.name})
        return True

    def cache_settings(self, config_vars: SettingsSurface) -> None:
        pass

    def get_compatible_version(self) -> str:
        return self.compatible_version

    def get_minimum_version(self) -> str:
        return self.min_version

    def get_version(self) -> str:
        # Historically reports the minimum supported version
        return self.min_version

    def housekeeping(self) -> None:
        try:
            self._sweep()
        except Exception as e:
            logger.warning(
                f"Housekeeping failed for {self.name} cache: {e}",
                extra={"backend": self.name, "error": str(e)},
                exc_info=True,
            )

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

        return {
            "backend": self.name,
            "prefix": self.prefix,
            "default_ttl": self.default_ttl,
            "connected": self._connected,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "sets": self._sets,
            "deletes": self._deletes,
        }
