"""
Factory functions that build drivers and caches from settings.

Driver modules are imported on first use so that picking the in-memory
backend never touches ``redis`` or ``pymemcache``.

Features:
    - ``create_driver()``: driver instance for a backend name
    - ``create_cache()``: driver + :class:`~cache_spine.cache.Cache`
    - ``create_cache_from_settings()``: same, from :class:`CacheSettings`,
      configuring logging first
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..logging import configure_logging
from ..serializers import Serializer
from .components import CacheBackend
from .options import CacheConfig

if TYPE_CHECKING:
    from ..backends.base import BaseDriver
    from ..cache import Cache
    from .settings import CacheSettings


def driver_class(backend: str | CacheBackend) -> type[BaseDriver]:
    """Return the driver class registered for *backend*."""
    match CacheBackend.parse(backend):
        case CacheBackend.MEMORY:
            from ..backends.memory import InMemoryDriver

            return InMemoryDriver
        case CacheBackend.FILE:
            from ..backends.file import FileDriver

            return FileDriver
        case CacheBackend.REDIS:
            from ..backends.redis import RedisDriver

            return RedisDriver
        case CacheBackend.MEMCACHED:
            from ..backends.memcached import MemcachedDriver

            return MemcachedDriver


def create_driver(backend: str | CacheBackend, options: Mapping[str, Any] | None = None) -> BaseDriver:
    """Create an unconnected driver for *backend*, merging *options* over its defaults."""
    return driver_class(backend)(options)


def create_cache(
    backend: str | CacheBackend,
    options: Mapping[str, Any] | None = None,
    *,
    prefix: str | None = None,
    serializer: str | Serializer = Serializer.NATIVE,
) -> Cache:
    """Create and connect a cache for *backend*.

    The serializer is validated before the driver is built, so an invalid
    tag never opens a connection.

    Example::

        cache = create_cache("redis", {"host": "cache.internal"}, prefix="orders:")
    """
    from ..cache import Cache

    # Fail on bad configuration before any driver exists
    CacheConfig(options=options or {}, prefix=prefix, serializer=serializer)
    driver = create_driver(backend, options)
    return Cache(driver, prefix=prefix, serializer=serializer)


def create_cache_from_settings(settings: CacheSettings | None = None) -> Cache:
    """Create a cache from *settings* (defaults to :func:`get_settings`).

    Logging is configured from ``settings.log_level`` and
    ``settings.log_format`` before the cache is built.
    """
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")
    return create_cache(
        settings.backend,
        settings.driver_options(),
        prefix=settings.prefix,
        serializer=settings.serializer,
    )


__all__ = [
    "driver_class",
    "create_driver",
    "create_cache",
    "create_cache_from_settings",
]
