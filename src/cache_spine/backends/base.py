"""
Backend driver contract.

A driver performs raw operations against one storage engine. It knows
nothing about prefixes or serializers: keys arrive already rendered and
values arrive already encoded.

Architecture:
    ::

        CacheDriver (Protocol)
        ├── InMemoryDriver   single process, bounded LRU
        ├── FileDriver       one file per key under a root directory
        ├── RedisDriver      redis-py client
        └── MemcachedDriver  pymemcache client

        API: connect()
             get(key) → bytes | None
             set(key, data, ttl) → bool
             delete(key) → bool
             flush() → bool
             close()

Guardrails:
    ❌ DON'T: Open connections in ``__init__``
    ✅ DO: Connect in ``connect()`` so configuration errors surface first

    ❌ DON'T: Return None from ``get`` when the backend call failed
    ✅ DO: Raise BackendOperationError, None means "not found"

Tags:
    cache, driver, protocol, cache-spine
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Protocol, runtime_checkable

from ..config.options import merge_options
from ..errors import BackendOperationError


@runtime_checkable
class CacheDriver(Protocol):
    """Protocol every storage driver satisfies.

    TTLs are whole seconds; ``0`` means the entry never expires for all
    bundled drivers.
    """

    options: Mapping[str, Any]

    def connect(self) -> None:
        """Acquire the backend connection.

        Raises:
            CacheConnectionError: If the backend cannot be reached.
        """
        ...

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or ``None`` if the key does not exist or expired."""
        ...

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        """Store *data* under *key* for *ttl* seconds. Returns backend success."""
        ...

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns False when the key did not exist."""
        ...

    def flush(self) -> bool:
        """Remove every entry the backend holds, not only this cache's prefix."""
        ...

    def close(self) -> None:
        """Release the backend connection. Safe to call more than once."""
        ...


class BaseDriver:
    """Shared plumbing for the bundled drivers: option merging and error wrapping."""

    name: ClassVar[str] = "base"
    default_options: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, options: Mapping[str, Any] | None = None):
        self.options: Mapping[str, Any] = MappingProxyType(
            merge_options(self.default_options, options)
        )

    def _operation_error(self, operation: str, key: str | None, exc: BaseException) -> BackendOperationError:
        return BackendOperationError(
            f"{self.name} {operation} failed: {exc}", cause=exc
        ).with_context(backend=self.name, operation=operation, key=key)

    def __repr__(self) -> str:
        shown = {k: v for k, v in self.options.items() if k != "password"}
        return f"{self.__class__.__name__}({shown!r})"


__all__ = ["CacheDriver", "BaseDriver"]
