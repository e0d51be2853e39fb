"""Storage drivers implementing :class:`~cache_spine.backends.base.CacheDriver`."""

from .base import BaseDriver, CacheDriver
from .file import FileDriver
from .memcached import MemcachedDriver
from .memory import InMemoryDriver
from .redis import RedisDriver

__all__ = [
    "CacheDriver",
    "BaseDriver",
    "InMemoryDriver",
    "FileDriver",
    "RedisDriver",
    "MemcachedDriver",
]
