"""
CacheAPI — File Cache Backend

Stores one JSON file per key under the configured cache directory.

Layout:
- ``<cache_dir>/data_<sha1 of prefixed key>.cache`` holding
  ``{"expires_at": <unix time or null>, "value": <payload>}``
- ``<cache_dir>/<anchor_name>``: sentinel whose mtime feeds the key prefix

Writes go to a temporary file in the same directory and are moved into place
with ``os.replace``, so concurrent readers see either the old or the new
entry, never a partial one.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ...config.schemas import CacheConfig
from ..base import BaseCacheBackend
from ..settings import FieldKind, SettingField, SettingsSurface, add_setting

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".cache"
DATA_CATEGORY = "data"

# Categories are filename fragments, never paths or glob patterns
_CATEGORY_RE = re.compile(r"^[A-Za-z0-9_-]*$")


class FileCacheBackend(BaseCacheBackend):
    """
    Filesystem cache backend.

    Categories map to filename prefixes: entries written through put_data
    live in the "data" category, and ``clean_cache(cache_type)`` removes every
    ``<cache_type>*.cache`` file (all cache files when cache_type is empty).
    Only cleaning everything or the "data" category rotates the key prefix.
    """

    name = "file"

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize file cache backend.

        Args:
            config: Cache configuration; cache_dir must be set
            clock: Time source in seconds, used for expiry
        """
        super().__init__(config)
        self._clock = clock

    @property
    def cache_dir(self) -> Path | None:
        return self.config.cache_dir

    def _path_for(self, full_key: str, category: str = DATA_CATEGORY) -> Path:
        digest = hashlib.sha1(full_key.encode("utf-8"), usedforsecurity=False).hexdigest()
        return self.cache_dir / f"{category}_{digest}{CACHE_SUFFIX}"  # type: ignore[operator]

    def _is_available(self) -> bool:
        cache_dir = self.cache_dir
        if cache_dir is None:
            return False
        if cache_dir.is_dir():
            return os.access(cache_dir, os.W_OK)
        # Creatable if the nearest existing parent is writable
        parent = cache_dir.parent
        while not parent.exists() and parent != parent.parent:
            parent = parent.parent
        return parent.is_dir() and os.access(parent, os.W_OK)

    def _open(self) -> bool:
        cache_dir = self.cache_dir
        if cache_dir is None:
            logger.error("File cache backend requires cache_dir to be configured")
            return False

        cache_dir.mkdir(parents=True, exist_ok=True)
        sentinel = cache_dir / self.config.anchor_name
        if not sentinel.exists():
            sentinel.touch()
        # The prefix may have been computed before the sentinel existed
        if not self._custom_prefix:
            self.set_prefix()

        logger.debug(f"File cache backend using {cache_dir}", extra={"cache_dir": str(cache_dir)})
        return True

    def _load(self, path: Path) -> dict[str, Any] | None:
        """Read an entry envelope; None if missing or unreadable."""
        try:
            with path.open("r", encoding="utf-8") as fh:
                envelope = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(
                f"Unreadable cache file {path.name}: {e}",
                extra={"path": str(path), "error": str(e)},
            )
            return None

        if not isinstance(envelope, dict) or not isinstance(envelope.get("value"), str):
            return None
        if not isinstance(envelope.get("expires_at"), (int, float, type(None))):
            return None
        return envelope

    def _expired(self, envelope: dict[str, Any]) -> bool:
        expires_at = envelope.get("expires_at")
        return expires_at is not None and self._clock() >= expires_at

    def _read(self, full_key: str) -> str | None:
        path = self._path_for(full_key)
        envelope = self._load(path)
        if envelope is None:
            return None

        if self._expired(envelope):
            path.unlink(missing_ok=True)
            return None

        return envelope["value"]

    def _write(self, full_key: str, payload: str, ttl: int) -> bool:
        path = self._path_for(full_key)
        envelope = {
            "expires_at": self._clock() + ttl if ttl > 0 else None,
            "value": payload,
        }

        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp_", suffix=CACHE_SUFFIX + ".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(envelope, fh, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        return True

    def _remove(self, full_key: str) -> bool:
        self._path_for(full_key).unlink(missing_ok=True)
        return True

    def _cache_files(self, cache_type: str = "") -> list[Path]:
        cache_dir = self.cache_dir
        if cache_dir is None or not cache_dir.is_dir():
            return []
        return sorted(cache_dir.glob(f"{cache_type}*{CACHE_SUFFIX}"))

    def _clear(self, cache_type: str) -> bool:
        if not _CATEGORY_RE.match(cache_type):
            logger.warning(
                f"Refusing to clean invalid cache category {cache_type!r}",
                extra={"cache_type": cache_type},
            )
            return False

        cache_dir = self.cache_dir
        if cache_dir is None or not cache_dir.is_dir():
            # No directory, nothing to clean
            return True

        removed = 0
        for path in self._cache_files(cache_type):
            path.unlink(missing_ok=True)
            removed += 1

        logger.debug(
            f"Removed {removed} cache files from {cache_dir}",
            extra={"cache_dir": str(cache_dir), "cache_type": cache_type},
        )
        # Other categories never hold put_data entries, so the prefix stays
        if cache_type in ("", DATA_CATEGORY):
            self.invalidate_cache()
        return True

    def _sweep(self) -> None:
        """Remove expired and unreadable entries in one directory pass."""
        removed = 0
        for path in self._cache_files():
            envelope = self._load(path)
            if envelope is None or self._expired(envelope):
                path.unlink(missing_ok=True)
                removed += 1

        if removed:
            logger.info(f"Housekeeping removed {removed} stale cache files", extra={"removed": removed})

    def cache_settings(self, config_vars: SettingsSurface) -> None:
        add_setting(
            config_vars,
            SettingField(
                name="cache_dir",
                kind=FieldKind.PATH,
                label="Cache directory",
                help="Must be writable by the application",
                default=str(self.cache_dir) if self.cache_dir else "",
                backend=self.name,
            ),
        )

    def get_stats(self) -> dict[str, Any]:
        stats = super().get_stats()
        stats["cache_dir"] = str(self.cache_dir) if self.cache_dir else None
        stats["files"] = len(self._cache_files())
        return stats
