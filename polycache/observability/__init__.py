"""
Polycache - Observability Module

Structured logging for the cache façade.

Usage:
    from polycache.observability import configure_logging

    configure_logging("DEBUG", json_format=True)
"""

from .logging import JSONFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
