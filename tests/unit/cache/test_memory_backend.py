"""
CacheAPI — Memory Cache Backend Tests

Test suite for the in-memory cache backend: TTL expiry on a simulated clock,
bounded size, flush-on-invalidate and the interface methods.
"""

from pathlib import Path
from typing import Any

import pytest

from cacheapi.cache.backends.memory import MemoryCacheBackend
from cacheapi.config import CacheConfig
from tests.conftest import FakeClock


class TestMemoryCacheBackend:
    """Test suite for MemoryCacheBackend."""

    @pytest.fixture
    def cache(self, memory_config: CacheConfig, clock: FakeClock) -> MemoryCacheBackend:
        """Create a fresh, connected memory cache for each test."""
        cache = MemoryCacheBackend(memory_config, clock=clock)
        assert cache.connect() is True
        return cache

    def test_initialization(self, memory_config: CacheConfig) -> None:
        """Test cache initialization from config."""
        cache = MemoryCacheBackend(memory_config)
        assert cache.max_size == 100
        assert cache.get_default_ttl() == 120

        stats = cache.get_stats()
        assert stats["backend"] == "memory"
        assert stats["hits"] == 0
        assert stats["misses"] == 0
        assert stats["size"] == 0

    def test_defaults_without_config(self) -> None:
        cache = MemoryCacheBackend()
        assert cache.connect() is True
        assert cache.put_data("k", "v") is True
        assert cache.get_data("k") == "v"

    def test_set_and_get(self, cache: MemoryCacheBackend) -> None:
        """Test basic set and get operations."""
        assert cache.put_data("key1", "value1") is True
        assert cache.get_data("key1") == "value1"

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 0
        assert stats["sets"] == 1
        assert stats["size"] == 1

    def test_set_with_various_types(self, cache: MemoryCacheBackend, sample_cache_data: dict[str, Any]) -> None:
        """Test storing different data types."""
        for key, value in sample_cache_data.items():
            cache.put_data(key, value)

        for key, expected_value in sample_cache_data.items():
            assert cache.get_data(key) == expected_value

    def test_overwrite(self, cache: MemoryCacheBackend) -> None:
        cache.put_data("k", "old")
        cache.put_data("k", "new")
        assert cache.get_data("k") == "new"

    def test_put_none_deletes(self, cache: MemoryCacheBackend) -> None:
        cache.put_data("k", "v")
        assert cache.put_data("k", None) is True
        assert cache.get_data("k") is None
        assert cache.get_stats()["size"] == 0

    def test_ttl_expiry(self, cache: MemoryCacheBackend, clock: FakeClock) -> None:
        """Entries vanish once the simulated clock passes their TTL."""
        assert cache.put_data("x", "v", ttl=1) is True
        assert cache.get_data("x") == "v"

        clock.advance(1.5)
        assert cache.get_data("x") is None

    def test_default_ttl_applies(self, cache: MemoryCacheBackend, clock: FakeClock) -> None:
        cache.set_default_ttl(10)
        cache.put_data("k", "v")

        clock.advance(9)
        assert cache.get_data("k") == "v"
        clock.advance(2)
        assert cache.get_data("k") is None

    def test_zero_default_ttl_never_expires(self, cache: MemoryCacheBackend, clock: FakeClock) -> None:
        cache.set_default_ttl(0)
        cache.put_data("k", "v")

        clock.advance(10 * 365 * 86400)
        assert cache.get_data("k") == "v"

    def test_max_size_bounds_store(self, memory_config: CacheConfig, clock: FakeClock) -> None:
        cache = MemoryCacheBackend(memory_config.model_copy(update={"max_size": 3}), clock=clock)
        cache.connect()

        for i in range(5):
            cache.put_data(f"key{i}", i)

        assert cache.get_stats()["size"] == 3
        assert cache.get_data("key4") == 4

    def test_eviction_drops_oldest_entry(self, memory_config: CacheConfig, clock: FakeClock) -> None:
        cache = MemoryCacheBackend(memory_config.model_copy(update={"max_size": 2}), clock=clock)
        cache.connect()

        cache.put_data("a", 1)
        cache.put_data("b", 2)
        cache.put_data("c", 3)

        assert cache.get_data("a") is None
        assert cache.get_data("b") == 2
        assert cache.get_data("c") == 3

    def test_clean_cache_ignores_type(self, cache: MemoryCacheBackend) -> None:
        cache.put_data("a", 1)
        cache.put_data("b", 2)

        assert cache.clean_cache("data") is True
        assert cache.get_stats()["size"] == 0

    def test_invalidate_flushes_and_rotates_prefix(self, cache: MemoryCacheBackend) -> None:
        """Scenario: connect, put, get, invalidate, get."""
        assert cache.put_data("widgets", [1, 2, 3]) is True
        assert cache.get_data("widgets") == [1, 2, 3]
        prefix = cache.get_prefix()

        assert cache.invalidate_cache() is True
        assert cache.get_data("widgets") is None
        assert cache.get_stats()["size"] == 0
        assert cache.get_prefix() != prefix

    def test_invalidate_with_custom_prefix_still_flushes(self, cache: MemoryCacheBackend) -> None:
        cache.set_prefix("fixed_")
        cache.put_data("k", "v")

        cache.invalidate_cache()
        assert cache.get_prefix() == "fixed_"
        assert cache.get_data("k") is None

    def test_instances_sharing_config_share_prefix(self, memory_config: CacheConfig) -> None:
        first = MemoryCacheBackend(memory_config)
        second = MemoryCacheBackend(memory_config)
        assert first.get_prefix() == second.get_prefix()

    def test_housekeeping_expires_items(self, cache: MemoryCacheBackend, clock: FakeClock) -> None:
        cache.put_data("a", 1, ttl=1)
        cache.put_data("b", 2, ttl=100)

        clock.advance(2)
        cache.housekeeping()
        assert cache.get_stats()["size"] == 1

    def test_cache_settings(self, cache: MemoryCacheBackend) -> None:
        config_vars: dict[str, Any] = {}
        cache.cache_settings(config_vars)

        assert list(config_vars) == ["max_size"]
        assert config_vars["max_size"].default == 100
        assert config_vars["max_size"].backend == "memory"

    def test_quit(self, cache: MemoryCacheBackend) -> None:
        cache.put_data("k", "v")
        assert cache.quit() is True
        assert cache.get_data("k") is None
        assert cache.connect() is False

    def test_supported_everywhere(self, tmp_path: Path) -> None:
        cache = MemoryCacheBackend(CacheConfig(cache_dir=tmp_path / "missing"))
        assert cache.is_supported(test=True) is True
