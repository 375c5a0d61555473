"""
CacheAPI — Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
Backends receive a CacheConfig explicitly at construction; nothing in the
cache layer reads module-level globals.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import __version__


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class CacheBackendType(str, Enum):
    """Known cache backend variants."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"  # Requires the redis package
    DISABLED = "disabled"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheConfig(BaseModel):
    """Cache subsystem configuration."""

    enabled: bool = Field(default=True, description="Administrative enable flag for the cache subsystem")
    backend: CacheBackendType = Field(default=CacheBackendType.MEMORY, description="Cache backend to use")
    ttl_seconds: int = Field(default=120, ge=0, description="Default TTL in seconds (0 = no expiry)")
    namespace: str = Field(default="app", min_length=1, description="Namespace appended to computed key prefixes")
    identity: str = Field(
        default="http://localhost",
        description="Stable installation identity (base URL) used for the default key prefix",
    )
    cache_dir: Path | None = Field(
        default=None,
        validate_default=True,
        description="Cache directory; doubles as the invalidation anchor",
    )
    anchor_name: str = Field(
        default="index.html",
        min_length=1,
        description="Sentinel file inside cache_dir whose mtime feeds the key prefix",
    )
    max_size: int = Field(default=1000, ge=1, description="Max cache entries (memory backend)")
    fallback: bool = Field(
        default=True,
        description="Fall back to the file, then disabled, backend when the selected one is unusable",
    )

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, validate_default=True, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @field_validator("cache_dir")
    @classmethod
    def validate_cache_dir(cls, v: Path | None, info: Any) -> Path | None:
        """Ensure cache_dir is provided when backend is file."""
        backend = info.data.get("backend")
        if backend == CacheBackendType.FILE and v is None:
            raise ValueError("cache_dir is required when cache backend is 'file'")
        return v

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None, info: Any) -> str | None:
        """Ensure redis_url is provided when backend is redis."""
        backend = info.data.get("backend")
        if backend == CacheBackendType.REDIS and not v:
            raise ValueError("redis_url is required when cache backend is 'redis'")
        return v

    @property
    def anchor_path(self) -> Path | None:
        """Sentinel file used as the invalidation anchor, if a cache_dir is configured."""
        if self.cache_dir is None:
            return None
        return self.cache_dir / self.anchor_name


class CacheAPIConfig(BaseModel):
    """Root configuration."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    host_version: str = Field(
        default=__version__,
        description="Host application version, matched against backend compatibility ranges",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
