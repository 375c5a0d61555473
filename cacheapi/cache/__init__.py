"""
CacheAPI — Cache Module

Provides the cache contract, the shared default backend, concrete backends
(memory, file, redis, disabled), discovery/selection and host accessors.
"""

from .base import BaseCacheBackend
from .factory import (
    close_all_caches,
    close_cache,
    collect_cache_settings,
    create_cache,
    discover_backends,
    get_cache,
    list_cache_instances,
    load_backend_class,
    reset_cache_factory,
)
from .helpers import cache_get_data, cache_put_data, cache_quick_get, clean_cache
from .interface import CacheInterface
from .settings import FieldKind, SettingField, SettingsSurface, add_setting
from .versions import compare_versions, is_compatible, parse_version

__all__ = [
    "CacheInterface",
    "BaseCacheBackend",
    "create_cache",
    "get_cache",
    "close_cache",
    "close_all_caches",
    "reset_cache_factory",
    "list_cache_instances",
    "discover_backends",
    "load_backend_class",
    "collect_cache_settings",
    "cache_get_data",
    "cache_put_data",
    "cache_quick_get",
    "clean_cache",
    "FieldKind",
    "SettingField",
    "SettingsSurface",
    "add_setting",
    "parse_version",
    "compare_versions",
    "is_compatible",
]
