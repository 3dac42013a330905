"""
Polycache - Instance Registry

Maps instance names to lazily constructed, memoized CacheInstance objects.

Key points:
- The registry is an explicit object: create one at process start, pass it
  around, close() it at shutdown
- First resolve() of a name builds the instance from that name's config;
  later calls return the very same object, so connections are reused
- Concurrent first access is safe: only one instance is built per name
- Driver kinds map to factories; network drivers are imported lazily so their
  client libraries are only needed when configured

Examples:
    from polycache import CacheRegistry

    registry = CacheRegistry.bootstrap({
        "default": {"driver": "file", "store_path": "/tmp/cache"},
        "sessions": {"driver": "redis", "host": "127.0.0.1"},
    })
    registry.set("greeting", "hello")
    registry.resolve("sessions").set("user.42", {"name": "Alice"}, expires=60)
    registry.close()
"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..config import CacheConfig, DriverType, InstanceConfig, LogLevel, load_config
from ..errors import ConfigNotFoundError, DependencyError, InvalidDriverError
from ..observability import configure_logging
from .drivers.file import FileDriver  # Import file driver eagerly (always available)
from .instance import DEFAULT_INSTANCE, CacheInstance
from .interface import CacheDriver

logger = logging.getLogger(__name__)

DriverFactory = Callable[[InstanceConfig], CacheDriver]


def _import_driver(module: str, attr: str, package: str) -> type[CacheDriver]:
    """Import a network driver class, translating a missing client library."""
    try:
        driver_module = importlib.import_module(f"{__package__}.drivers.{module}")
    except ImportError as e:
        logger.error(
            "Driver '%s' selected but its client library is not installed",
            module,
            extra={"package": package, "error": str(e)},
        )
        raise DependencyError(
            package,
            feature=f"the {module} driver",
            install_hint=f"pip install '{package}'",
            details={"error": str(e)},
        ) from e
    return getattr(driver_module, attr)


def _create_file_driver(config: InstanceConfig) -> CacheDriver:
    """Internal helper to construct a file driver."""
    return FileDriver(store_path=config.store_path)


def _create_redis_driver(config: InstanceConfig) -> CacheDriver:
    """Internal helper to construct a redis driver with lazy import."""
    driver_cls = _import_driver("redis", "RedisDriver", "redis>=5.0.0")
    return driver_cls(
        host=config.host,
        port=config.port,
        socket=config.socket,
        database=config.database,
        socket_timeout=config.socket_timeout,
    )


def _create_redis_url_driver(config: InstanceConfig) -> CacheDriver:
    """Internal helper to construct a URL-configured redis driver with lazy import."""
    driver_cls = _import_driver("redis_url", "RedisURLDriver", "redis>=5.0.0")
    return driver_cls(url=config.url, socket_timeout=config.socket_timeout)


def _create_memcached_driver(config: InstanceConfig) -> CacheDriver:
    """Internal helper to construct a memcached driver with lazy import."""
    driver_cls = _import_driver("memcached", "MemcachedDriver", "pymemcache>=4.0.0")
    return driver_cls(servers=config.servers, socket_timeout=config.socket_timeout)


_DEFAULT_DRIVERS: dict[str, DriverFactory] = {
    DriverType.FILE.value: _create_file_driver,
    DriverType.REDIS.value: _create_redis_driver,
    DriverType.REDIS_URL.value: _create_redis_url_driver,
    DriverType.MEMCACHED.value: _create_memcached_driver,
}


class CacheRegistry:
    """
    Registry of named cache instances.

    Also exposes the cache operations directly; each takes an optional
    ``instance`` name and defaults to the ``default`` instance.
    """

    def __init__(self, config: CacheConfig | Mapping[str, Mapping[str, Any]] | None = None) -> None:
        """
        Args:
            config: A CacheConfig, or a plain ``name -> parameters`` mapping
        """
        if config is None:
            config = CacheConfig()
        elif not isinstance(config, CacheConfig):
            config = CacheConfig.from_mapping(config)

        self.config = config
        self._instances: dict[str, CacheInstance] = {}
        self._drivers: dict[str, DriverFactory] = dict(_DEFAULT_DRIVERS)
        self._lock = threading.Lock()

    @classmethod
    def bootstrap(cls, instances: Mapping[str, Mapping[str, Any]]) -> CacheRegistry:
        """Create a registry from a plain ``name -> parameters`` mapping."""
        return cls(CacheConfig.from_mapping(instances))

    # ------------ Drivers ------------

    def register_driver(self, kind: str, factory: DriverFactory) -> None:
        """
        Register (or replace) the factory for a driver kind.

        Args:
            kind: Value of ``driver`` in instance configs
            factory: Callable building a driver from an InstanceConfig
        """
        with self._lock:
            self._drivers[kind] = factory
        logger.debug("Driver registered: %s", kind, extra={"driver": kind})

    def drivers(self) -> list[str]:
        """List registered driver kinds."""
        return sorted(self._drivers)

    # ------------ Instances ------------

    def resolve(self, name: str | None = None) -> CacheInstance:
        """
        Return the instance for ``name``, constructing it on first use.

        Args:
            name: Instance name (default: "default")

        Returns:
            The memoized CacheInstance

        Raises:
            ConfigNotFoundError: If no configuration exists for the name
            InvalidDriverError: If the configured driver is not registered
            DependencyError: If the driver's client library is missing
        """
        name = name or DEFAULT_INSTANCE

        instance = self._instances.get(name)
        if instance is not None:
            logger.debug("Returning existing cache instance: %s", name)
            return instance

        with self._lock:
            # Double-check after acquiring lock
            instance = self._instances.get(name)
            if instance is None:
                instance = self._create(name)
                self._instances[name] = instance
            return instance

    def _create(self, name: str) -> CacheInstance:
        config = self.config.instance(name)
        if config is None:
            raise ConfigNotFoundError(name)

        factory = self._drivers.get(config.driver)
        if factory is None:
            raise InvalidDriverError(config.driver, details={"instance": name, "supported": self.drivers()})

        logger.info(
            "Creating cache instance '%s' with driver: %s",
            name,
            config.driver,
            extra={"cache_name": name, "driver": config.driver},
        )

        instance = CacheInstance(name, factory(config))

        logger.info(
            "Cache instance '%s' created successfully",
            name,
            extra={"cache_name": name, "driver": config.driver, "token": instance.token},
        )
        return instance

    def list_instances(self) -> list[str]:
        """List the names of constructed instances."""
        return list(self._instances)

    def close(self) -> None:
        """
        Disconnect every constructed instance and forget them.

        MUST be called during graceful shutdown. A failing close is logged
        and does not stop the remaining instances from closing.
        """
        with self._lock:
            instances = list(self._instances.items())
            self._instances.clear()

        if not instances:
            logger.debug("No cache instances to close")
            return

        logger.info("Closing %d cache instance(s)...", len(instances))

        for name, instance in instances:
            try:
                instance.close()
                logger.info("Closed cache instance: %s", name)
            except Exception as e:
                logger.error(
                    "Error closing cache instance '%s': %s",
                    name,
                    e,
                    extra={"cache_name": name, "error": str(e)},
                    exc_info=True,
                )

        logger.info("All cache instances closed")

    def __enter__(self) -> CacheRegistry:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------ Cache operations on a named instance ------------

    def get(self, key: str, decode: bool = True, as_array: bool = False, instance: str | None = None) -> Any:
        return self.resolve(instance).get(key, decode, as_array)

    def set(self, key: str, value: Any = None, expires: int | None = None, instance: str | None = None) -> None:
        self.resolve(instance).set(key, value, expires)

    def mget(
        self,
        keys: Iterable[str],
        decode: bool = True,
        as_array: bool = False,
        instance: str | None = None,
    ) -> dict[str, Any]:
        """
        Get multiple values from an instance.

        ``as_array`` defaults to False here, as on CacheInstance.mget, so JSON
        objects come back as records. Pass ``as_array=True`` for plain dicts.
        """
        return self.resolve(instance).mget(keys, decode, as_array)

    def mset(self, dictionary: Mapping[str, Any], expires: int | None = None, instance: str | None = None) -> None:
        self.resolve(instance).mset(dictionary, expires)

    def clear(self, key: str, instance: str | None = None) -> None:
        self.resolve(instance).clear(key)

    def mclear(self, keys: Iterable[str], instance: str | None = None) -> None:
        self.resolve(instance).mclear(keys)

    def keys(self, namespace: str | None = None, instance: str | None = None) -> list[str]:
        return self.resolve(instance).keys(namespace)

    def flush(self, namespace: str | None = None, instance: str | None = None) -> None:
        self.resolve(instance).flush(namespace)


def create_registry(
    env_file: str | None = None,
    instances: Mapping[str, Mapping[str, Any]] | None = None,
) -> CacheRegistry:
    """
    Process bootstrap: load configuration, configure logging, build the registry.

    Args:
        env_file: Optional .env file path
        instances: Extra ``name -> parameters`` entries merged over the environment

    Returns:
        A new CacheRegistry
    """
    config = load_config(env_file=env_file, instances=instances)
    configure_logging(LogLevel(config.log_level).value, json_format=config.log_json)
    return CacheRegistry(config)
