"""
Polycache - Cache Module

Named cache instances over interchangeable storage drivers.

Canonical exports:
- registry.py: Single source of truth for instance creation
- instance.py: Namespacing and value encoding for one named instance
- interface.py: Capability contract all drivers must implement
- drivers/: Driver implementations (file always; redis, redis_url and
  memcached loaded on demand)

Usage:
    from polycache.cache import CacheRegistry

    registry = CacheRegistry.bootstrap({"default": {"driver": "redis"}})
    registry.set("key", "value", expires=3600)
    value = registry.get("key")
"""

from .instance import DEFAULT_INSTANCE, CacheInstance, namespace_token
from .interface import CacheDriver, normalize_ttl
from .registry import CacheRegistry, create_registry

__all__ = [
    # Registry (canonical entry point)
    "CacheRegistry",
    "create_registry",
    # Instances
    "CacheInstance",
    "DEFAULT_INSTANCE",
    "namespace_token",
    # Interface
    "CacheDriver",
    "normalize_ttl",
]
