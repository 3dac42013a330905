"""
Polycache - Uniform Cache Façade

One API for reading and writing named, possibly structured values, with
storage delegated to interchangeable drivers (files, Redis, memcached).
"""

__version__ = "1.0.0"

from .cache import CacheDriver, CacheInstance, CacheRegistry, create_registry
from .config import CacheConfig, InstanceConfig, load_config
from .errors import (
    ConfigNotFoundError,
    ConfigurationError,
    DependencyError,
    InvalidDriverError,
    PolycacheError,
)

__all__ = [
    "CacheRegistry",
    "create_registry",
    "CacheInstance",
    "CacheDriver",
    "CacheConfig",
    "InstanceConfig",
    "load_config",
    "PolycacheError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "InvalidDriverError",
    "DependencyError",
]
