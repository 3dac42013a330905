"""
Polycache - Configuration Loader

Loads and validates configuration from environment variables and .env files.

The environment describes the ``default`` instance only; further named
instances are passed in as a mapping and merged over it. Each call returns a
fresh CacheConfig; there is no process-wide config singleton.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import CacheConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "POLYCACHE_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _default_instance_from_env() -> dict[str, Any] | None:
    """Build the ``default`` instance parameters, or None when no driver is set."""
    driver = _env("DRIVER")
    if not driver:
        return None

    params: dict[str, Any] = {"driver": driver}

    optional = {
        "store_path": _env("STORE_PATH"),
        "host": _env("REDIS_HOST"),
        "port": _env("REDIS_PORT"),
        "socket": _env("REDIS_SOCKET"),
        "database": _env("REDIS_DB"),
        "url": _env("REDIS_URL"),
        "socket_timeout": _env("SOCKET_TIMEOUT"),
    }
    params.update({k: v for k, v in optional.items() if v})

    servers = _env("MEMCACHED_SERVERS")
    if servers:
        params["servers"] = [s.strip() for s in servers.split(",") if s.strip()]

    return params


def load_config(
    env_file: str | None = None,
    instances: Mapping[str, Mapping[str, Any]] | None = None,
) -> CacheConfig:
    """
    Load configuration from environment variables and an optional .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        instances: Extra ``name -> parameters`` entries, merged over the
            environment-derived ``default`` instance

    Returns:
        Validated CacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    merged: dict[str, Any] = {}
    default = _default_instance_from_env()
    if default is not None:
        merged["default"] = default
    for name, params in (instances or {}).items():
        merged[name] = dict(params)

    config_dict = {
        "log_level": (_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        "log_json": (_env("LOG_JSON", "true") or "true").lower() == "true",
        "instances": merged,
    }

    try:
        config = CacheConfig(**config_dict)
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "instances": sorted(merged)},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and instance parameters.",
            details={"validation_errors": e.errors()},
        ) from e

    logger.info(
        "Configuration loaded successfully",
        extra={"instances": sorted(config.instances)},
    )
    return config
