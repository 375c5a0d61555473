"""
CacheAPI — Cache Factory

Canonical factory for discovering, selecting and holding cache backends.

Key points:
- Discovery: every known backend is probed with ``is_supported(test=True)``
  and filtered by the host version against its compatibility range
- Selection: the configured backend is constructed and connected; when it is
  unsupported, incompatible or fails to connect, the factory falls back to
  the file backend (if a cache_dir is configured) and finally to the
  disabled backend, so the host always gets a usable instance
- Redis is imported lazily so the redis package stays optional at runtime

Examples:
    from cacheapi.cache.factory import create_cache, get_cache

    # Uses env-configured backend (memory by default)
    cache = create_cache()

    # Or explicitly supply a CacheConfig (e.g., for tests)
    from cacheapi.config import CacheBackendType, CacheConfig
    cfg = CacheConfig(backend=CacheBackendType.FILE, cache_dir="/var/cache/app")
    file_cache = create_cache(cfg, name="files")
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .. import __version__
from ..config import CacheBackendType, CacheConfig, get_config
from ..errors import ConfigurationError, DependencyError
from .backends.disabled import DisabledCacheBackend
from .backends.file import FileCacheBackend
from .backends.memory import MemoryCacheBackend
from .base import BaseCacheBackend
from .settings import FieldKind, SettingField, SettingsSurface, add_setting
from .versions import is_compatible

logger = logging.getLogger(__name__)

# Global cache instances registry
_cache_instances: dict[str, BaseCacheBackend] = {}


def _load_redis_backend() -> type[BaseCacheBackend]:
    """Import the redis backend on demand."""
    try:
        from .backends.redis import RedisCacheBackend
    except ImportError as e:
        logger.warning(
            "Redis backend requested but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise DependencyError(
            "redis",
            feature="the redis cache backend",
            install_hint="pip install 'redis>=5.0.0'",
            details={"error": str(e), "backend": "redis"},
        ) from e

    return RedisCacheBackend


_BACKEND_LOADERS: dict[CacheBackendType, Callable[[], type[BaseCacheBackend]]] = {
    CacheBackendType.MEMORY: lambda: MemoryCacheBackend,
    CacheBackendType.FILE: lambda: FileCacheBackend,
    CacheBackendType.REDIS: _load_redis_backend,
    CacheBackendType.DISABLED: lambda: DisabledCacheBackend,
}


def load_backend_class(backend: CacheBackendType | str) -> type[BaseCacheBackend]:
    """
    Resolve a backend name to its class.

    Raises:
        ConfigurationError: Unknown backend name
        DependencyError: The backend's package is not installed
    """
    try:
        backend_type = CacheBackendType(backend)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown cache backend: {backend}",
            details={
                "backend": str(backend),
                "supported": [b.value for b in CacheBackendType],
            },
        ) from e

    return _BACKEND_LOADERS[backend_type]()


def _resolve_config(config: CacheConfig | None, host_version: str | None) -> tuple[CacheConfig, str]:
    if config is None:
        root = get_config()
        return root.cache, host_version or root.host_version
    return config, host_version or __version__


def discover_backends(
    config: CacheConfig | None = None,
    host_version: str | None = None,
) -> dict[str, BaseCacheBackend]:
    """
    List the backends usable in this environment.

    Args:
        config: Cache configuration (uses global config if not provided)
        host_version: Host application version (defaults to the package version)

    Returns:
        Ordered mapping of backend name to an unconnected instance, for every
        backend whose package imports, whose static capability probe passes
        and whose compatibility range includes the host version
    """
    config, host_version = _resolve_config(config, host_version)
    eligible: dict[str, BaseCacheBackend] = {}

    for backend_type in CacheBackendType:
        try:
            backend_cls = load_backend_class(backend_type)
        except DependencyError as e:
            logger.info(f"Skipping {backend_type.value} cache backend: {e.message}")
            continue

        backend = backend_cls(config)
        if not backend.is_supported(test=True):
            logger.debug(f"Cache backend {backend_type.value} is not supported here")
            continue

        if not is_compatible(host_version, backend.get_minimum_version(), backend.get_compatible_version()):
            logger.info(
                f"Cache backend {backend_type.value} is not compatible with host version {host_version}",
                extra={
                    "backend": backend_type.value,
                    "host_version": host_version,
                    "minimum": backend.get_minimum_version(),
                    "compatible": backend.get_compatible_version(),
                },
            )
            continue

        eligible[backend_type.value] = backend

    return eligible


def _try_backend(
    backend_type: CacheBackendType,
    config: CacheConfig,
    host_version: str,
) -> BaseCacheBackend | None:
    """Construct and connect one backend; None if it cannot be used."""
    try:
        backend_cls = load_backend_class(backend_type)
    except DependencyError as e:
        logger.warning(f"Cache backend {backend_type.value} unavailable: {e.message}", extra=e.details)
        return None

    backend = backend_cls(config)
    if not backend.is_supported():
        logger.warning(f"Cache backend {backend_type.value} is not supported", extra={"backend": backend_type.value})
        return None

    if not is_compatible(host_version, backend.get_minimum_version(), backend.get_compatible_version()):
        logger.warning(
            f"Cache backend {backend_type.value} does not support host version {host_version}",
            extra={"backend": backend_type.value, "host_version": host_version},
        )
        return None

    if not backend.connect():
        logger.warning(f"Cache backend {backend_type.value} failed to connect", extra={"backend": backend_type.value})
        return None

    return backend


def _select_backend(config: CacheConfig, host_version: str) -> BaseCacheBackend:
    if not config.enabled:
        logger.info("Cache subsystem disabled by configuration")
        backend: BaseCacheBackend = DisabledCacheBackend(config)
        backend.connect()
        return backend

    candidates = [config.backend]
    if config.fallback and config.cache_dir is not None:
        candidates.append(CacheBackendType.FILE)
    candidates.append(CacheBackendType.DISABLED)

    seen: set[CacheBackendType] = set()
    for backend_type in candidates:
        if backend_type in seen:
            continue
        seen.add(backend_type)

        selected = _try_backend(backend_type, config, host_version)
        if selected is not None:
            if backend_type != config.backend:
                logger.warning(
                    f"Falling back to {backend_type.value} cache backend",
                    extra={"requested": config.backend.value, "selected": backend_type.value},
                )
            return selected

    # No candidate passed its checks, e.g. the host version is out of range
    logger.warning(
        "No cache backend supports this host, caching disabled",
        extra={"requested": config.backend.value, "host_version": host_version},
    )
    backend = DisabledCacheBackend(config)
    backend.connect()
    return backend


def create_cache(
    config: CacheConfig | None = None,
    name: str = "default",
    host_version: str | None = None,
) -> BaseCacheBackend:
    """
    Create (or return) a connected cache backend.

    Args:
        config: Cache configuration (uses global config if not provided)
        name: Cache instance name
        host_version: Host application version for compatibility filtering

    Returns:
        Connected cache backend; the disabled backend when nothing else works
    """
    if name in _cache_instances:
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    config, host_version = _resolve_config(config, host_version)

    logger.info(
        "Creating cache instance '%s' with backend: %s",
        name,
        config.backend.value,
        extra={"cache_name": name, "backend": config.backend.value},
    )

    cache = _select_backend(config, host_version)
    _cache_instances[name] = cache

    logger.info(
        "Cache instance '%s' ready (%s)",
        name,
        cache.name,
        extra={"cache_name": name, "backend": cache.name, "prefix": cache.get_prefix()},
    )
    return cache


def get_cache(name: str = "default") -> BaseCacheBackend:
    """
    Get an existing cache instance by name.

    If the instance doesn't exist, it is created from the global configuration.
    """
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return create_cache(name=name)

    return _cache_instances[name]


def close_cache(name: str = "default") -> bool:
    """
    Quit one cache instance and remove it from the registry.

    Returns:
        True if an instance by that name existed
    """
    cache = _cache_instances.pop(name, None)
    if cache is None:
        logger.debug("No cache instance named '%s' to close", name)
        return False

    cache.quit()
    logger.info("Closed cache instance: %s", name)
    return True


def close_all_caches() -> None:
    """
    Quit every cache instance and forget it.

    Call during host shutdown.
    """
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        cache.quit()
        logger.info("Closed cache instance: %s", name)

    _cache_instances.clear()


def reset_cache_factory() -> None:
    """
    Forget all instances without calling quit().

    Warning: Only use this in testing contexts.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """List all registered cache instance names."""
    return list(_cache_instances.keys())


def collect_cache_settings(
    config: CacheConfig | None = None,
    host_version: str | None = None,
) -> SettingsSurface:
    """
    Build the settings surface for the host's admin screen.

    Core fields come first, followed by the fields each discovered backend
    contributes.
    """
    config, host_version = _resolve_config(config, host_version)
    backends = discover_backends(config, host_version)

    config_vars: SettingsSurface = {}
    add_setting(
        config_vars,
        SettingField(name="enabled", kind=FieldKind.CHECK, label="Enable caching", default=config.enabled),
    )
    add_setting(
        config_vars,
        SettingField(
            name="backend",
            kind=FieldKind.SELECT,
            label="Cache backend",
            default=config.backend.value,
            options=list(backends),
        ),
    )
    add_setting(
        config_vars,
        SettingField(name="ttl_seconds", kind=FieldKind.INT, label="Default TTL (seconds)", default=config.ttl_seconds),
    )

    for backend in backends.values():
        backend.cache_settings(config_vars)

    return config_vars
