"""
Polycache - Redis Driver

Redis driver over a direct connection (TCP host/port or unix socket):
- TTL applied natively with the SET ``EX`` option
- Key enumeration with SCAN ``MATCH``
- Batch writes through a non-transactional pipeline

Requires: redis>=5

Example:
    driver = RedisDriver(host="127.0.0.1", port=6379)
    driver.set("0b4e02e6.greeting", "hello", expires=60)
    driver.get("0b4e02e6.greeting")
"""

from __future__ import annotations

import logging
from typing import Any

from ..interface import CacheDriver, normalize_ttl

logger = logging.getLogger(__name__)

try:
    from redis import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

# Keys per DEL / SCAN round-trip
BATCH_SIZE = 1000


def to_redis_value(value: Any) -> Any:
    """
    Convert a scalar redis-py refuses into one it accepts.

    Booleans are written as their JSON literal so the instance decodes them
    back to True / False. Everything else is returned unchanged.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class RedisDriver(CacheDriver):
    """
    Redis driver connected by host/port or unix socket.

    Notes:
    - Values are stored as given, the cache instance has already encoded them;
      only booleans are rewritten (see to_redis_value).
    - Responses are decoded to str, so reads return what was written.
    - A None value deletes the key, both for ``set`` and per entry in ``mset``.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 6379,
        socket: str | None = None,
        database: int = 0,
        socket_timeout: float | None = None,
    ) -> None:
        """
        Initialize Redis driver.

        Args:
            host: Redis host (ignored when socket is set)
            port: Redis port (ignored when socket is set)
            socket: Unix socket path
            database: Logical database number
            socket_timeout: Socket timeout in seconds
        """
        # Create Redis client (lazy connection; connects on first command)
        if socket:
            self._client = Redis(
                unix_socket_path=socket,
                db=database,
                socket_timeout=socket_timeout,
                decode_responses=True,
            )
        else:
            self._client = Redis(
                host=host or "127.0.0.1",
                port=port or 6379,
                db=database,
                socket_timeout=socket_timeout,
                decode_responses=True,
            )

    # ------------ Core Interface ------------

    def get(self, key: str) -> Any | None:
        """Retrieve a value by key."""
        value = self._client.get(key)
        if value is None or value is False:
            return None
        return value

    def set(self, key: str, value: Any, expires: int | None = None) -> None:
        """Store a value with optional TTL."""
        if value is None:
            self.clear(key)
            return

        self._client.set(key, to_redis_value(value), ex=normalize_ttl(expires))

    def clear(self, key: str) -> None:
        """Delete a single key."""
        self._client.delete(key)

    def keys(self, pattern: str) -> list[str]:
        """List keys matching pattern with SCAN, avoiding a blocking KEYS."""
        return list(self._client.scan_iter(match=pattern, count=BATCH_SIZE))

    def flush(self, pattern: str) -> None:
        """Delete every key matching pattern."""
        keys = self.keys(pattern)
        self.mclear(keys)
        logger.debug(
            "Flushed %d key(s) from Redis",
            len(keys),
            extra={"pattern": pattern, "key_count": len(keys)},
        )

    def close(self) -> None:
        """Close the Redis client and release its connection pool."""
        self._client.close()

    # ------------ Batch operations (pipeline) ------------

    def mget(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple values in one round-trip using MGET.
        Every requested key is present in the result, None for misses.
        """
        if not keys:
            return {}

        values = self._client.mget(keys)
        # mget preserves order
        return {k: (None if raw is None or raw is False else raw) for k, raw in zip(keys, values, strict=True)}

    def mset(self, dictionary: dict[str, Any], expires: int | None = None) -> None:
        """
        Store multiple values using a pipeline. Applies the same TTL to all items.
        None entries are deleted rather than stored.
        """
        if not dictionary:
            return

        ex = normalize_ttl(expires)
        pipe = self._client.pipeline(transaction=False)

        for key, value in dictionary.items():
            if value is None:
                pipe.delete(key)
            else:
                pipe.set(key, to_redis_value(value), ex=ex)

        pipe.execute()

    def mclear(self, keys: list[str]) -> None:
        """Delete multiple keys, one DEL per chunk."""
        for i in range(0, len(keys), BATCH_SIZE):
            self._client.delete(*keys[i : i + BATCH_SIZE])
