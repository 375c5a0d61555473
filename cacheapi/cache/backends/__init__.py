"""
CacheAPI — Cache Backends

Exports the backends that have no third-party requirements beyond the core.

The Redis backend is lazy-loaded via factory.py so the redis package stays
optional.
"""

from .disabled import DisabledCacheBackend
from .file import FileCacheBackend
from .memory import MemoryCacheBackend

__all__ = [
    "DisabledCacheBackend",
    "FileCacheBackend",
    "MemoryCacheBackend",
]
