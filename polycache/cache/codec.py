"""
Polycache - Value Codec

Encoding rules applied by CacheInstance before values reach a driver:
- sequences and mappings (including empty ones) are JSON-encoded
- scalars (str, int, float, bool) and None pass through unchanged

Decoding is best-effort: a raw value that does not parse as JSON, or that
parses to JSON null, is returned exactly as read.
"""

import json
from collections.abc import Mapping, Sequence
from types import SimpleNamespace
from typing import Any


def _is_structured(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Mapping, Sequence, SimpleNamespace))


def _json_default(value: Any) -> Any:
    """Serialize decoded records and other non-JSON containers."""
    if isinstance(value, SimpleNamespace):
        return vars(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Sequence):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON; treat them like any other plain string."""
    raise ValueError(f"Unsupported JSON constant: {name}")


def encode(value: Any) -> Any:
    """
    Encode a value for storage.

    Returns:
        A compact JSON string for sequences and mappings, the value itself otherwise
    """
    if not _is_structured(value):
        return value
    if isinstance(value, SimpleNamespace):
        value = vars(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_json_default)


def decode(value: Any, as_array: bool = False) -> Any:
    """
    Decode a raw stored value.

    Args:
        value: Raw value as returned by a driver
        as_array: Realize JSON objects as dicts instead of SimpleNamespace records

    Returns:
        The decoded structure, or the raw value when it is not JSON
    """
    if value is None or not isinstance(value, (str, bytes, bytearray)):
        return value

    try:
        decoded = json.loads(
            value,
            object_hook=None if as_array else lambda d: SimpleNamespace(**d),
            parse_constant=_reject_constant,
        )
    except (ValueError, UnicodeDecodeError, TypeError):
        return value

    if decoded is None:
        return value

    return decoded
