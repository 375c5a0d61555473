"""
CacheAPI — Host Accessors

Module-level shortcuts over the active cache instance, for host code that
does not want to carry a backend reference around.
"""

import logging
from collections.abc import Callable
from typing import Any

from .factory import get_cache

logger = logging.getLogger(__name__)


def cache_get_data(key: str, ttl: int | None = None, name: str = "default") -> Any | None:
    """Read a key from the active cache; None on miss."""
    value = get_cache(name).get_data(key, ttl)
    logger.debug(
        "cache_get_data %s",
        "hit" if value is not None else "miss",
        extra={"key": key, "cache_name": name},
    )
    return value


def cache_put_data(key: str, value: Any, ttl: int | None = None, name: str = "default") -> bool:
    """Write a key to the active cache. A None value deletes the key."""
    stored = get_cache(name).put_data(key, value, ttl)
    logger.debug("cache_put_data", extra={"key": key, "ttl": ttl, "stored": stored, "cache_name": name})
    return stored


def clean_cache(cache_type: str = "", name: str = "default") -> bool:
    """Clean the active cache, optionally restricted to one category."""
    cleaned = get_cache(name).clean_cache(cache_type)
    logger.debug("clean_cache", extra={"cache_type": cache_type, "cleaned": cleaned, "cache_name": name})
    return cleaned


def cache_quick_get(
    key: str,
    factory: Callable[[], Any],
    ttl: int | None = None,
    name: str = "default",
) -> Any:
    """
    Return a cached value, computing and storing it on a miss.

    Args:
        key: Cache key
        factory: Zero-argument callable producing the value on a miss
        ttl: TTL for the stored value (None uses the default TTL)
        name: Cache instance name

    Returns:
        The cached or freshly computed value. A value that could not be
        stored is still returned.
    """
    cache = get_cache(name)
    value = cache.get_data(key)
    if value is not None:
        return value

    value = factory()
    if value is not None and not cache.put_data(key, value, ttl):
        logger.debug("cache_quick_get could not store computed value", extra={"key": key, "cache_name": name})
    return value
