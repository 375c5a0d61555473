"""
CacheAPI — Pluggable Cache Abstraction Layer

Uniform key/value cache contract with interchangeable backends
(memory, file, redis, disabled), discovery and host-facing accessors.
"""

__version__ = "1.0.0"

from .cache import (
    CacheInterface,
    cache_get_data,
    cache_put_data,
    cache_quick_get,
    clean_cache,
    close_all_caches,
    close_cache,
    create_cache,
    get_cache,
)
from .config import CacheAPIConfig, CacheConfig, get_config, load_config

__all__ = [
    "__version__",
    "CacheInterface",
    "create_cache",
    "get_cache",
    "close_cache",
    "close_all_caches",
    "cache_get_data",
    "cache_put_data",
    "cache_quick_get",
    "clean_cache",
    "CacheAPIConfig",
    "CacheConfig",
    "get_config",
    "load_config",
]
