"""
CacheAPI — Cache Interface

Defines the abstract contract that all cache backends must implement.
Shared default behavior lives in ``base.BaseCacheBackend``.
"""

from abc import ABC, abstractmethod
from typing import Any

from .settings import SettingsSurface


class CacheInterface(ABC):
    """
    Abstract base class for cache backends.

    Implementations never raise across this contract: failures are reported
    as False (writes, connection) or None (reads).
    """

    @abstractmethod
    def is_supported(self, test: bool = False) -> bool:
        """
        Check whether this backend can run in the current environment.

        Args:
            test: Only probe static capability (libraries, directories),
                ignoring the administrative enable flag

        Returns:
            True if the backend is usable
        """
        pass

    @abstractmethod
    def connect(self) -> bool:
        """
        Establish whatever connection or state the backend needs.

        Returns:
            True on success; on False the instance must not be used for data
        """
        pass

    @abstractmethod
    def set_prefix(self, prefix: str = "") -> bool:
        """
        Override the key prefix, or recompute the default one.

        Args:
            prefix: Verbatim prefix; empty to compute the default

        Returns:
            Always True
        """
        pass

    @abstractmethod
    def get_prefix(self) -> str:
        """Return the current key prefix."""
        pass

    @abstractmethod
    def set_default_ttl(self, ttl: int = 120) -> bool:
        """
        Set the TTL used when a caller does not pass one.

        Args:
            ttl: TTL in seconds

        Returns:
            Always True
        """
        pass

    @abstractmethod
    def get_default_ttl(self) -> int:
        """Return the default TTL in seconds."""
        pass

    @abstractmethod
    def get_data(self, key: str, ttl: int | None = None) -> Any | None:
        """
        Retrieve an item from the cache.

        Args:
            key: Cache key; the prefix is applied to it
            ttl: Accepted for backward compatibility, not used for lookup

        Returns:
            The cached value, or None if missing, expired or undecodable
        """
        pass

    @abstractmethod
    def put_data(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Store a value, overwriting any existing one.

        Args:
            key: Cache key; the prefix is applied to it
            value: Data to store; None deletes the key
            ttl: Lifetime in seconds; None or 0 uses the default TTL

        Returns:
            True if the store accepted the write or delete
        """
        pass

    @abstractmethod
    def clean_cache(self, cache_type: str = "") -> bool:
        """
        Clear cached entries.

        Args:
            cache_type: Backend-defined category; empty for the default

        Returns:
            True if the clear completed, even when nothing matched
        """
        pass

    @abstractmethod
    def invalidate_cache(self) -> bool:
        """
        Make every cached entry unreachable.

        Returns:
            Always True (best effort)
        """
        pass

    @abstractmethod
    def quit(self) -> bool:
        """
        Release backend resources.

        Returns:
            True once resources are released or were never held
        """
        pass

    @abstractmethod
    def cache_settings(self, config_vars: SettingsSurface) -> None:
        """
        Contribute backend-specific fields to the host's settings surface.

        Args:
            config_vars: Ordered mapping of field name to descriptor; entries
                from other backends must be left in place
        """
        pass

    @abstractmethod
    def get_compatible_version(self) -> str:
        """Return the latest host version this backend is compatible with."""
        pass

    @abstractmethod
    def get_minimum_version(self) -> str:
        """Return the minimum host version this backend supports."""
        pass

    @abstractmethod
    def get_version(self) -> str:
        """Return the version reported for this backend."""
        pass

    @abstractmethod
    def housekeeping(self) -> None:
        """Run bounded periodic maintenance (expire sweeps, compaction)."""
        pass
