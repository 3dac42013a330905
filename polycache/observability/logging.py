"""
Polycache - Logging

Structured JSON logging for the ``polycache`` logger tree.

Modules log through ``logging.getLogger(__name__)`` and attach context via
``extra={...}``; JSONFormatter renders those extra fields as top-level keys.
"""

import json
import logging
from datetime import UTC, datetime

ROOT_LOGGER = "polycache"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """
    Install a single stream handler on the ``polycache`` logger.

    Calling it again replaces the handler, so repeated bootstraps never
    duplicate output.

    Args:
        level: Log level name
        json_format: Use JSONFormatter instead of a plain text format

    Returns:
        The configured ``polycache`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
