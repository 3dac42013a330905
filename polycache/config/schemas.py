"""
Polycache - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.

One InstanceConfig per named cache instance, collected in CacheConfig.
The driver kind is kept as a plain string: whether it names a registered
driver is decided by the registry at construction time, not here.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DriverType(str, Enum):
    """Built-in driver kinds."""

    FILE = "file"
    REDIS = "redis"
    REDIS_URL = "redis_url"
    MEMCACHED = "memcached"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class InstanceConfig(BaseModel):
    """Connection parameters for one named cache instance."""

    driver: str = Field(description="Driver kind (file, redis, redis_url, memcached or a registered custom kind)")

    # File driver
    store_path: str | None = Field(default=None, description="Directory holding one file per cache key")

    # Redis (direct connection)
    host: str = Field(default="127.0.0.1", description="Redis host")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    socket: str | None = Field(default=None, description="Unix socket path, takes precedence over host/port")
    database: int = Field(default=0, ge=0, description="Redis logical database")

    # Redis (URL-configured client)
    url: str | None = Field(default=None, description="Redis connection URL, e.g. redis://host:6379/0 or unix:///tmp/redis.sock")

    # Memcached
    servers: list[str] = Field(
        default_factory=lambda: ["127.0.0.1:11211"],
        description="Memcached servers as host:port strings",
    )

    # Network clients
    socket_timeout: float | None = Field(default=None, gt=0, description="Client socket timeout in seconds")

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="after")
    def validate_driver_parameters(self) -> "InstanceConfig":
        """Ensure each built-in driver gets the parameters it cannot default."""
        if self.driver == DriverType.FILE.value and not self.store_path:
            raise ValueError("store_path is required when driver is 'file'")
        if self.driver == DriverType.REDIS_URL.value and not self.url:
            raise ValueError("url is required when driver is 'redis_url'")
        return self


class CacheConfig(BaseModel):
    """Root configuration: logging settings plus one entry per instance name."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_json: bool = Field(default=True, description="Render log records as JSON lines")
    instances: dict[str, InstanceConfig] = Field(default_factory=dict)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    def instance(self, name: str) -> InstanceConfig | None:
        """Return the configuration for an instance name, or None."""
        return self.instances.get(name)

    @classmethod
    def from_mapping(cls, instances: Mapping[str, Mapping[str, Any]], **kwargs: Any) -> "CacheConfig":
        """
        Build a config from a plain ``name -> parameters`` mapping.

        Example:
            CacheConfig.from_mapping({"default": {"driver": "redis"}})
        """
        return cls(instances={name: dict(params) for name, params in instances.items()}, **kwargs)
