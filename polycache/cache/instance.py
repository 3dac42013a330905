"""
Polycache - Cache Instance

A named logical cache bound to exactly one driver.

Every key the instance touches is prefixed with its namespace token, the
Adler-32 checksum of the instance name as 8 hex chars, so several instances
can share one physical store without seeing each other's keys:

    default  ->  0b4e02e6.<logical key>

Values are encoded on the way in and decoded on the way out (see codec.py).
"""

import logging
import zlib
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from . import codec
from .interface import CacheDriver

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE = "default"


def namespace_token(name: str) -> str:
    """Return the 8 hex char Adler-32 checksum of an instance name."""
    return f"{zlib.adler32(name.encode('utf-8')) & 0xFFFFFFFF:08x}"


class CacheInstance:
    """
    Public cache operations for one namespace.

    Example:
        instance = CacheInstance("sessions", FileDriver("/var/cache/app"))
        instance.set("user.42", {"name": "Alice"}, expires=60)
        instance.get("user.42", as_array=True)
    """

    def __init__(self, name: Optional[str], driver: CacheDriver):
        self.name = name or DEFAULT_INSTANCE
        self._token = namespace_token(self.name)
        self._driver = driver

    @property
    def token(self) -> str:
        """Namespace token prefixed to every key."""
        return self._token

    @property
    def driver(self) -> CacheDriver:
        return self._driver

    def __repr__(self) -> str:
        return f"CacheInstance(name={self.name!r}, driver={type(self._driver).__name__})"

    # ------------ Namespacing ------------

    def key(self, key: str) -> str:
        """Namespace a logical key."""
        return f"{self._token}.{key}"

    def unkey(self, key: str) -> str:
        """Strip this instance's namespace from a key."""
        return key.removeprefix(f"{self._token}.")

    def _pattern(self, namespace: Optional[str]) -> str:
        return self.key(f"{namespace}.*") if namespace else self.key("*")

    # ------------ Operations ------------

    def get(self, key: str, decode: bool = True, as_array: bool = False) -> Any:
        """
        Get a value from the cache.

        Args:
            key: Logical key
            decode: Decode JSON-encoded values
            as_array: Realize decoded objects as dicts rather than records

        Returns:
            The value, or None when the key is missing or expired
        """
        value = self._driver.get(self.key(key))
        if value is None or not decode:
            return value
        return codec.decode(value, as_array)

    def set(self, key: str, value: Any = None, expires: Optional[int] = None) -> None:
        """
        Store a value in the cache.

        Setting None deletes the key instead of storing a null marker.

        Args:
            key: Logical key
            value: Value to store
            expires: Optional time-to-live in seconds
        """
        if value is None:
            self._driver.clear(self.key(key))
            return

        self._driver.set(self.key(key), codec.encode(value), expires)

    def mget(self, keys: Iterable[str], decode: bool = True, as_array: bool = False) -> dict[str, Any]:
        """
        Get multiple values in one batched driver read.

        Returns:
            Logical keys mapped to values, None for misses
        """
        keys = list(keys)
        raw = self._driver.mget([self.key(k) for k in keys])

        values: dict[str, Any] = {}
        for key in keys:
            value = raw.get(self.key(key))
            if value is not None and decode:
                value = codec.decode(value, as_array)
            values[key] = value
        return values

    def mset(self, dictionary: Mapping[str, Any], expires: Optional[int] = None) -> None:
        """
        Store multiple values in one batched driver write.

        Unlike set(), None values are handed to the driver as-is; whether a
        None entry deletes the key is the driver's decision.
        """
        self._driver.mset({self.key(k): codec.encode(v) for k, v in dictionary.items()}, expires)

    def clear(self, key: str) -> None:
        """Clear a value from the cache."""
        self._driver.clear(self.key(key))

    def mclear(self, keys: Iterable[str]) -> None:
        """Clear multiple values from the cache."""
        self._driver.mclear([self.key(k) for k in keys])

    def keys(self, namespace: Optional[str] = None) -> list[str]:
        """
        List logical keys stored by this instance.

        Args:
            namespace: Optional sub-namespace, matching ``<namespace>.*``

        Returns:
            Logical keys; empty for drivers that cannot enumerate
        """
        return [self.unkey(k) for k in self._driver.keys(self._pattern(namespace))]

    def flush(self, namespace: Optional[str] = None) -> None:
        """
        Clear every key this instance stores, optionally within a sub-namespace.

        The memcached driver cannot enumerate keys and flushes the whole server.
        """
        pattern = self._pattern(namespace)
        logger.debug(
            "Flushing cache instance '%s'",
            self.name,
            extra={"cache_name": self.name, "pattern": pattern},
        )
        self._driver.flush(pattern)

    def close(self) -> None:
        """Disconnect the driver."""
        self._driver.close()
