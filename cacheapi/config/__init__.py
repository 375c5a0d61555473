"""
CacheAPI — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    CacheAPIConfig,
    CacheBackendType,
    CacheConfig,
    Environment,
    LogLevel,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "CacheAPIConfig",
    # Enums
    "Environment",
    "CacheBackendType",
    "LogLevel",
    # Config sections
    "CacheConfig",
]
