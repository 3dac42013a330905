"""
Polycache - File Driver

One file per cache key under ``store_path``, named after the namespaced key.
Keys therefore must not contain path separators; such keys raise ValueError.
Each file holds a JSON envelope with exactly two fields:

    {"value": <encoded value>, "expires": <epoch seconds> | null}

The filesystem has no expiry of its own, so TTL is emulated: ``get`` reads the
envelope, and when ``expires`` has passed it deletes the file and reports a
miss. Nothing sweeps expired files in the background.

Concurrency:
- Envelopes are written to a temporary file and renamed into place, so a
  reader never sees a half-written envelope.
- Expire-on-read is not atomic with respect to writers. When a ``set`` races
  an expiring ``get`` on the same key, either the old or the new value may be
  the one deleted; there is no defined winner.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

from ..interface import CacheDriver, normalize_ttl

logger = logging.getLogger(__name__)

# Temporary files start with this prefix, which never matches a namespace token.
_TMP_PREFIX = ".tmp-"


class FileDriver(CacheDriver):
    """
    File-backed driver with emulated TTL.

    Example:
        driver = FileDriver("/var/cache/app")
        driver.set("0b4e02e6.greeting", "hello", expires=60)
        driver.get("0b4e02e6.greeting")
    """

    def __init__(self, store_path: str | os.PathLike[str]) -> None:
        """
        Initialize the file driver.

        Args:
            store_path: Directory for cache files, created if missing
        """
        if not store_path:
            raise ValueError("store_path is required")

        self.store_path = Path(store_path)
        self.store_path.mkdir(parents=True, exist_ok=True)

    def filename(self, key: str) -> Path:
        """
        Path of the file storing ``key``.

        Raises:
            ValueError: If the key contains a path separator
        """
        if "/" in key or os.sep in key or (os.altsep and os.altsep in key):
            raise ValueError(f"File cache keys cannot contain path separators: {key!r}")
        return self.store_path / key

    # ------------ Core Interface ------------

    def get(self, key: str) -> Optional[Any]:
        """Read the envelope and return its value unless it has expired."""
        filename = self.filename(key)

        try:
            with filename.open("r", encoding="utf-8") as fh:
                envelope = json.load(fh)
        except FileNotFoundError:
            return None

        # "value" stays in its encoded form here; decoding is the instance's job.
        expires = envelope.get("expires")
        # Whole seconds on both sides, matching how ``set`` stores the deadline.
        if expires is not None and int(time.time()) > expires:
            logger.debug(
                "Evicting expired cache file",
                extra={"key": key, "expired_at": expires},
            )
            self.clear(key)
            return None

        return envelope.get("value")

    def set(self, key: str, value: Any, expires: Optional[int] = None) -> None:
        """Write the full envelope, with ``expires`` null when there is no TTL."""
        ttl = normalize_ttl(expires)
        envelope = {
            "value": value,
            "expires": int(time.time()) + ttl if ttl is not None else None,
        }
        payload = json.dumps(envelope, ensure_ascii=False, separators=(",", ":"))

        fd, tmp_path = tempfile.mkstemp(dir=self.store_path, prefix=_TMP_PREFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.filename(key))
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def mget(self, keys: list[str]) -> dict[str, Any]:
        """Read each key in turn."""
        return {key: self.get(key) for key in keys}

    def mset(self, dictionary: dict[str, Any], expires: Optional[int] = None) -> None:
        """Write each key in turn with the same TTL."""
        for key, value in dictionary.items():
            self.set(key, value, expires)

    def clear(self, key: str) -> None:
        """Delete the file for ``key`` if present."""
        self.filename(key).unlink(missing_ok=True)

    def mclear(self, keys: list[str]) -> None:
        for key in keys:
            self.clear(key)

    def keys(self, pattern: str) -> list[str]:
        """Glob the store directory; returns file names, i.e. namespaced keys."""
        return sorted(path.name for path in self.store_path.glob(pattern) if path.is_file())

    def flush(self, pattern: str) -> None:
        self.mclear(self.keys(pattern))

    def close(self) -> None:
        """Nothing to release; files are opened per operation."""
