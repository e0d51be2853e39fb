"""
Backend enumeration.

Each member names one storage engine with a bundled driver in
:mod:`cache_spine.backends`; :mod:`cache_spine.config.factory` maps members
to driver classes.
"""

from __future__ import annotations

from enum import Enum

from ..errors import InvalidConfigurationError


class CacheBackend(str, Enum):
    """Supported cache backends."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"
    MEMCACHED = "memcached"

    @classmethod
    def parse(cls, value: str | CacheBackend) -> CacheBackend:
        """Resolve a backend name, raising InvalidConfigurationError if unknown."""
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidConfigurationError(
                f"Unknown cache backend: {value!r}. "
                f"Expected one of: {', '.join(m.value for m in cls)}",
                cause=exc,
            ) from exc


__all__ = ["CacheBackend"]
