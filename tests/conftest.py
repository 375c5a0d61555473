"""
CacheAPI — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import socket
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from cacheapi.cache.factory import close_all_caches
from cacheapi.config import CacheBackendType, CacheConfig, reset_config

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

# Variables read by cacheapi.config.loader
CONFIG_ENV_VARS = (
    "CACHE_ENABLED",
    "CACHE_BACKEND",
    "CACHE_TTL_SECONDS",
    "CACHE_NAMESPACE",
    "CACHE_IDENTITY",
    "CACHE_DIR",
    "CACHE_ANCHOR_NAME",
    "CACHE_MAX_SIZE",
    "CACHE_FALLBACK",
    "REDIS_URL",
    "REDIS_MAX_CONNECTIONS",
    "REDIS_SOCKET_TIMEOUT",
    "HOST_VERSION",
)


# Redis availability checker
def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except OSError:
        return False


# Skip marker for Redis tests
redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


class FakeClock:
    """Manually advanced time source, in seconds."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Simulated clock for deterministic expiry."""
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Existing, empty cache directory (the anchor for prefix computation)."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def memory_config(cache_dir: Path) -> CacheConfig:
    """Memory backend configuration anchored on a temporary directory."""
    return CacheConfig(
        backend=CacheBackendType.MEMORY,
        identity="http://example.test",
        namespace="test",
        cache_dir=cache_dir,
        max_size=100,
    )


@pytest.fixture
def file_config(cache_dir: Path) -> CacheConfig:
    """File backend configuration on a temporary directory."""
    return CacheConfig(
        backend=CacheBackendType.FILE,
        identity="http://example.test",
        namespace="test",
        cache_dir=cache_dir,
    )


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every cache-related environment variable for the test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
    """Set environment variables for memory cache backend."""
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_MAX_SIZE", "100")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "3600")
    monkeypatch.setenv("CACHE_NAMESPACE", "test")


@pytest.fixture
def mock_env_file(monkeypatch: pytest.MonkeyPatch, clean_env: None, cache_dir: Path) -> None:
    """Set environment variables for file cache backend."""
    monkeypatch.setenv("CACHE_BACKEND", "file")
    monkeypatch.setenv("CACHE_DIR", str(cache_dir))
    monkeypatch.setenv("CACHE_NAMESPACE", "test")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample JSON-compatible data for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }


@pytest.fixture(autouse=True)
def reset_cache_factory() -> Generator[None, None, None]:
    """Reset cache factory and configuration after each test to prevent state leakage."""
    yield
    close_all_caches()
    reset_config()
