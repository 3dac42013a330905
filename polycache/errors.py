"""
Polycache - Core Error Types

Defines the exception hierarchy raised by the cache façade.
All exceptions inherit from PolycacheError for consistent error handling.

Only construction-time failures are raised by the core itself:
- ConfigNotFoundError: no configuration entry for the requested instance name
- InvalidDriverError: the configuration names a driver that is not registered
- DependencyError: the driver's client library cannot be imported

Backend I/O errors (OSError, redis / pymemcache exceptions) are never wrapped;
they propagate to the caller as raised by the client library.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes carried by every PolycacheError.

    Used for structured logging and for callers that prefer matching
    on a stable code rather than on the exception class.
    """

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    INVALID_DRIVER = "INVALID_DRIVER"

    # Environment errors
    DEPENDENCY_MISSING = "DEPENDENCY_MISSING"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PolycacheError(Exception):
    """Base exception for all polycache errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logs and reports."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PolycacheError):
    """Raised when configuration is invalid or missing."""

    error_code = ErrorCode.CONFIG_INVALID


class ConfigNotFoundError(ConfigurationError):
    """Raised when no configuration entry exists for an instance name."""

    error_code = ErrorCode.CONFIG_NOT_FOUND

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        message = f"No config could be found for instance {name}."
        error_details = details or {}
        error_details.setdefault("instance", name)
        super().__init__(message, error_details)
        self.name = name


class InvalidDriverError(ConfigurationError):
    """Raised when an instance is configured with an unregistered driver."""

    error_code = ErrorCode.INVALID_DRIVER

    def __init__(self, driver: str, details: dict[str, Any] | None = None):
        message = f"{driver} is not a valid driver."
        error_details = details or {}
        error_details.setdefault("driver", driver)
        super().__init__(message, error_details)
        self.driver = driver


class DependencyError(PolycacheError):
    """Raised when a required dependency is missing or fails to load."""

    error_code = ErrorCode.DEPENDENCY_MISSING

    def __init__(
        self,
        package: str,
        feature: str | None = None,
        install_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if feature:
            message = f"Required dependency '{package}' is missing for {feature}"
        else:
            message = f"Required dependency '{package}' is missing"

        if install_hint:
            message += f". Install with: {install_hint}"

        error_details = details or {}
        error_details.update(
            {
                "package": package,
                "feature": feature,
                "install_hint": install_hint,
            }
        )

        super().__init__(message, error_details)
