"""
Polycache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import logging
import os
import socket
from collections.abc import Generator
from typing import Any

import pytest

from polycache import CacheRegistry
from polycache.cache import CacheInstance


def _is_port_open(host: str, port: int) -> bool:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex((host, port))
        sock.close()
        return result == 0
    except OSError:
        return False


def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    return _is_port_open("localhost", 6379)


def is_memcached_available() -> bool:
    """Check if memcached server is available for testing."""
    return _is_port_open("localhost", 11211)


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation), skipping when Redis is down."""
    if not is_redis_available():
        pytest.skip("Redis server not available")
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def test_memcached_server() -> str:
    """Get memcached server for testing, skipping when memcached is down."""
    if not is_memcached_available():
        pytest.skip("Memcached server not available")
    return os.environ.get("TEST_MEMCACHED_SERVER", "localhost:11211")


@pytest.fixture
def store_path(tmp_path: Any) -> str:
    """Create a temporary directory for file driver storage."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return str(cache_dir)


@pytest.fixture
def registry(store_path: str) -> Generator[CacheRegistry, None, None]:
    """A registry with two file-backed instances sharing one store directory."""
    reg = CacheRegistry.bootstrap(
        {
            "default": {"driver": "file", "store_path": store_path},
            "other": {"driver": "file", "store_path": store_path},
        }
    )
    yield reg
    reg.close()


@pytest.fixture
def instance(registry: CacheRegistry) -> CacheInstance:
    """The file-backed ``default`` instance."""
    return registry.resolve()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove POLYCACHE_* variables, including any a .env file adds during the test."""
    for key in list(os.environ):
        if key.startswith("POLYCACHE_"):
            monkeypatch.delenv(key)
    yield
    for key in list(os.environ):
        if key.startswith("POLYCACHE_"):
            os.environ.pop(key)


@pytest.fixture(autouse=True)
def reset_polycache_logger() -> Generator[None, None, None]:
    """Drop handlers installed by configure_logging() to prevent state leakage."""
    yield
    logger = logging.getLogger("polycache")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample data for cache testing."""
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
