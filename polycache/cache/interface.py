"""
Polycache - Driver Interface

Defines the capability contract every storage driver must implement.

Drivers receive keys that are already namespaced and values that are already
encoded; they never see logical keys or structured values. A driver reports a
missing key as None, whatever sentinel its client library uses natively.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


def normalize_ttl(expires: Optional[int]) -> Optional[int]:
    """
    Normalize a TTL in seconds:
    - None -> no expiry (return None)
    - 0 or negative -> no expiry (return None)
    - positive -> provided ttl
    """
    if expires is None:
        return None
    expires = int(expires)
    return expires if expires > 0 else None


class CacheDriver(ABC):
    """
    Abstract base class for storage drivers.

    The class carries no state of its own; each driver owns its client or
    store path and is owned by exactly one CacheInstance.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a raw value.

        Args:
            key: Namespaced key

        Returns:
            Stored value if found and not expired, None otherwise
        """

    @abstractmethod
    def set(self, key: str, value: Any, expires: Optional[int] = None) -> None:
        """
        Store a raw value.

        Args:
            key: Namespaced key
            value: Encoded value (string or scalar)
            expires: Time-to-live in seconds (None = never expires)
        """

    @abstractmethod
    def mget(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple raw values in one batch.

        Args:
            keys: Namespaced keys

        Returns:
            Dictionary mapping every requested key to its value or None
        """

    @abstractmethod
    def mset(self, dictionary: dict[str, Any], expires: Optional[int] = None) -> None:
        """
        Store multiple raw values in one batch.

        Args:
            dictionary: Namespaced keys mapped to encoded values
            expires: Time-to-live in seconds (applies to all items)
        """

    @abstractmethod
    def clear(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""

    @abstractmethod
    def mclear(self, keys: list[str]) -> None:
        """Delete multiple keys."""

    @abstractmethod
    def keys(self, pattern: str) -> list[str]:
        """
        List stored keys matching a glob-style pattern.

        Drivers that cannot enumerate keys return an empty list.

        Args:
            pattern: Pattern such as ``<token>.*``

        Returns:
            Matching namespaced keys
        """

    @abstractmethod
    def flush(self, pattern: str) -> None:
        """Delete every key matching a glob-style pattern."""

    @abstractmethod
    def close(self) -> None:
        """
        Close the driver and release resources.

        Should be called during graceful shutdown.
        """
