"""
Polycache - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import load_config
from .schemas import (
    CacheConfig,
    DriverType,
    InstanceConfig,
    LogLevel,
)

__all__ = [
    # Loader functions
    "load_config",
    # Main config
    "CacheConfig",
    # Enums
    "DriverType",
    "LogLevel",
    # Config sections
    "InstanceConfig",
]
