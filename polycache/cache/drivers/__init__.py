"""
Polycache - Cache Drivers

Exports the drivers without third-party client dependencies.

Network drivers (redis, redis_url, memcached) are lazy-loaded by registry.py
to avoid importing client libraries that an application does not use.
"""

from .file import FileDriver

__all__ = [
    "FileDriver",
]
