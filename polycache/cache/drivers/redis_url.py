"""
Polycache - Redis URL Driver

Redis driver configured by connection URL (``redis://``, ``rediss://`` or
``unix://``), writing TTLs with SETEX and listing keys with KEYS.

Requires: redis>=5
"""

from __future__ import annotations

import logging
from typing import Any

from ..interface import CacheDriver, normalize_ttl
from .redis import to_redis_value

logger = logging.getLogger(__name__)

try:
    from redis import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisURLDriver(CacheDriver):
    """
    Redis driver built from a connection URL.

    Example:
        driver = RedisURLDriver("redis://localhost:6379/0")
        driver.set("0b4e02e6.token", "abc", expires=300)  # SETEX
    """

    def __init__(self, url: str, socket_timeout: float | None = None) -> None:
        if not url:
            raise ValueError("url is required")

        self.url = url
        self._client = Redis.from_url(url, decode_responses=True, socket_timeout=socket_timeout)

    def get(self, key: str) -> Any | None:
        value = self._client.get(key)
        if value is None or value is False:
            return None
        return value

    def set(self, key: str, value: Any, expires: int | None = None) -> None:
        """Store with SETEX when a TTL is given, plain SET otherwise. None deletes."""
        if value is None:
            self.clear(key)
            return

        value = to_redis_value(value)
        ttl = normalize_ttl(expires)
        if ttl is None:
            self._client.set(key, value)
        else:
            self._client.setex(key, ttl, value)

    def mget(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}

        values = self._client.mget(keys)
        return {k: (None if raw is None or raw is False else raw) for k, raw in zip(keys, values, strict=True)}

    def mset(self, dictionary: dict[str, Any], expires: int | None = None) -> None:
        """Write entries one by one with the same TTL; None entries delete."""
        for key, value in dictionary.items():
            self.set(key, value, expires)

    def clear(self, key: str) -> None:
        self._client.delete(key)

    def mclear(self, keys: list[str]) -> None:
        # DEL with no arguments is a Redis error
        if keys:
            self._client.delete(*keys)

    def keys(self, pattern: str) -> list[str]:
        return list(self._client.keys(pattern))

    def flush(self, pattern: str) -> None:
        self.mclear(self.keys(pattern))

    def close(self) -> None:
        self._client.close()
