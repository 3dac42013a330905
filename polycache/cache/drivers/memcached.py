"""
Polycache - Memcached Driver

Memcached driver over a list of servers, keys distributed by pymemcache's
HashClient. Values are pickled so scalars keep their Python type.

Memcached offers no safe way to enumerate keys:
- ``keys`` always returns an empty list
- ``flush`` ignores its pattern and flushes every server (flush_all), which
  also removes keys belonging to other instances sharing those servers

Requires: pymemcache>=4
"""

from __future__ import annotations

import logging
from typing import Any

from ..interface import CacheDriver, normalize_ttl

logger = logging.getLogger(__name__)

try:
    from pymemcache import serde
    from pymemcache.client.hash import HashClient
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "pymemcache is required for the memcached driver. Install with: pip install 'pymemcache>=4.0.0'"
    ) from e

DEFAULT_PORT = 11211


def parse_server(server: str) -> tuple[str, int]:
    """Split ``host[:port]`` into a (host, port) tuple."""
    host, sep, port = server.rpartition(":")
    if not sep:
        return server, DEFAULT_PORT
    return host, int(port)


class MemcachedDriver(CacheDriver):
    """
    Memcached driver.

    Example:
        driver = MemcachedDriver(["cache-1:11211", "cache-2:11211"])
        driver.set("0b4e02e6.greeting", "hello", expires=60)
    """

    def __init__(
        self,
        servers: list[str] | None = None,
        socket_timeout: float | None = None,
    ) -> None:
        """
        Initialize Memcached driver.

        Args:
            servers: ``host:port`` strings (default: 127.0.0.1:11211)
            socket_timeout: Connect and I/O timeout in seconds
        """
        self.servers = [parse_server(s) for s in (servers or [f"127.0.0.1:{DEFAULT_PORT}"])]
        self._client = HashClient(
            self.servers,
            serde=serde.pickle_serde,
            connect_timeout=socket_timeout,
            timeout=socket_timeout,
        )

    def get(self, key: str) -> Any | None:
        # Misses come back as the ``default`` argument
        return self._client.get(key, default=None)

    def set(self, key: str, value: Any, expires: int | None = None) -> None:
        """Store a value; memcached treats expire=0 as never."""
        if value is None:
            self.clear(key)
            return

        self._client.set(key, value, expire=normalize_ttl(expires) or 0)

    def mget(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}

        found = self._client.get_many(keys)
        return {key: found.get(key) for key in keys}

    def mset(self, dictionary: dict[str, Any], expires: int | None = None) -> None:
        """Store every entry as given, None included."""
        if not dictionary:
            return

        failed = self._client.set_many(dictionary, expire=normalize_ttl(expires) or 0)
        if failed:
            logger.warning(
                "Memcached did not store %d key(s)",
                len(failed),
                extra={"failed_keys": failed},
            )

    def clear(self, key: str) -> None:
        self._client.delete(key)

    def mclear(self, keys: list[str]) -> None:
        if keys:
            self._client.delete_many(keys)

    def keys(self, pattern: str) -> list[str]:
        """Memcached cannot enumerate keys."""
        return []

    def flush(self, pattern: str) -> None:
        """Flush every configured server; the pattern cannot be honoured."""
        logger.warning(
            "Flushing all memcached servers; namespaced flush is not supported",
            extra={"pattern": pattern, "servers": [f"{h}:{p}" for h, p in self.servers]},
        )
        self._client.flush_all()

    def close(self) -> None:
        self._client.close()
