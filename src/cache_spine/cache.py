"""
Cache facade: one API over interchangeable storage drivers.

:class:`Cache` composes a :class:`~cache_spine.keys.KeyRenderer`, a
:class:`~cache_spine.serializers.Serializer` and a
:class:`~cache_spine.backends.base.CacheDriver`. Drivers only implement the
single-key primitives; the multi-key and counter operations are built here on
top of them, so they behave the same on every backend.

Manifesto:
    Callers should not care which engine holds their data. Swapping Redis for
    Memcached, or for an in-memory driver in tests, must not change what
    ``get``/``set``/``increment`` mean.

    - **Driver-agnostic:** Multi-key and counter operations live in the facade
    - **Scoped resource:** The driver connects at construction, closes on exit
    - **Loud decode errors:** Corrupted payloads raise, they never read as a miss

Architecture:
    ::

        caller ── Cache.get(key)
                    │
                    ├─ KeyRenderer.render(key)      "app:" + key
                    ├─ CacheDriver.get(physical)    bytes | None
                    └─ Serializer.decode(bytes)     value

        set() runs the same pipeline in reverse (encode → render → driver.set)

Examples:
    >>> from cache_spine import Cache, InMemoryDriver
    >>> with Cache(InMemoryDriver(), prefix="app:", serializer="json-array") as cache:
    ...     cache.set("user:1", {"name": "Alice"}, ttl=300)
    ...     cache.get("user:1")
    ...     cache.increment("visits")
    True
    {'name': 'Alice'}
    1

Guardrails:
    ❌ DON'T: Rely on increment/decrement being atomic
    ✅ DO: Use a backend-native counter outside this layer when races matter

    ❌ DON'T: Call flush() on a shared backend expecting only your prefix to go
    ✅ DO: Remember flush() empties the whole backend

Tags:
    cache, facade, redis, memcached, serialization, cache-spine
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import TracebackType
from typing import Any

from .backends.base import CacheDriver
from .config.options import CacheConfig
from .errors import (
    BackendOperationError,
    CacheClosedError,
    CacheConnectionError,
    CacheValidationError,
    DeserializationError,
    SerializationError,
)
from .keys import KeyRenderer
from .logging import get_logger
from .serializers import Serializer

logger = get_logger(__name__)

DEFAULT_TTL = 60


def _coerce_int(value: Any) -> int:
    """Read a stored counter value; absent or non-numeric values count as 0."""
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _check_ttl(ttl: int) -> int:
    if ttl < 0:
        raise CacheValidationError(f"ttl must be >= 0, got {ttl}")
    return int(ttl)


class Cache:
    """Key-value cache over a pluggable driver.

    Args:
        driver: Storage driver. Connected here, closed by :meth:`close`.
        prefix: Prepended to every logical key (``None`` → no prefix).
        serializer: Serializer tag (``Serializer`` member or its string value).

    Raises:
        InvalidConfigurationError: Unknown serializer; raised before connecting.
        CacheConnectionError: The driver could not connect. The driver is
            closed before the error propagates.
    """

    def __init__(
        self,
        driver: CacheDriver,
        *,
        prefix: str | None = None,
        serializer: str | Serializer = Serializer.NATIVE,
    ):
        self.config = CacheConfig(options=driver.options, prefix=prefix, serializer=serializer)
        self._driver = driver
        self._keys = KeyRenderer(prefix)
        self._serializer = self.config.serializer
        self._closed = True

        try:
            driver.connect()
        except CacheConnectionError:
            driver.close()
            raise
        except Exception as exc:
            driver.close()
            raise CacheConnectionError(f"Cannot connect cache driver: {exc}", cause=exc) from exc

        self._closed = False
        logger.info(
            "cache_opened",
            driver=type(driver).__name__,
            prefix=prefix,
            serializer=self._serializer.value,
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def driver(self) -> CacheDriver:
        return self._driver

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the driver. Further operations raise CacheClosedError."""
        if self._closed:
            return
        self._closed = True
        self._driver.close()
        logger.info("cache_closed", driver=type(self._driver).__name__)

    def __enter__(self) -> Cache:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _open_driver(self) -> CacheDriver:
        if self._closed:
            raise CacheClosedError("Cache is closed")
        return self._driver

    def render_key(self, key: str) -> str:
        """Return the physical key *key* is stored under."""
        return self._keys.render(key)

    # ------------------------------------------------------------------ #
    # Single-key primitives
    # ------------------------------------------------------------------ #

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when the key is absent.

        Raises:
            DeserializationError: The stored bytes do not decode.
            BackendOperationError: The backend call failed.
        """
        physical = self.render_key(key)
        data = self._open_driver().get(physical)
        if data is None:
            logger.debug("cache_miss", key=physical)
            return None
        logger.debug("cache_hit", key=physical)
        return self._serializer.decode(data)

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        """Store *value* for *ttl* seconds. Returns whether it was stored.

        A value the serializer cannot encode is logged and reported as
        ``False``, the same as a backend rejection.
        """
        ttl = _check_ttl(ttl)
        driver = self._open_driver()
        physical = self.render_key(key)
        try:
            return driver.set(physical, self._serializer.encode(value), ttl)
        except (SerializationError, BackendOperationError) as exc:
            logger.warning("cache_set_failed", key=physical, error=exc)
            return False

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns False if it did not exist or the backend failed."""
        physical = self.render_key(key)
        try:
            return self._open_driver().delete(physical)
        except BackendOperationError as exc:
            logger.warning("cache_delete_failed", key=physical, error=exc)
            return False

    def flush(self) -> bool:
        """Remove every entry in the backend, across all prefixes."""
        try:
            return self._open_driver().flush()
        except BackendOperationError as exc:
            logger.warning("cache_flush_failed", error=exc)
            return False

    # ------------------------------------------------------------------ #
    # Multi-key operations (sequential, independent per key)
    # ------------------------------------------------------------------ #

    def get_multi(self, keys: Iterable[str]) -> dict[str, Any | None]:
        """Return ``{key: value or None}`` in input order.

        Every key is read even when an earlier one fails. If any key failed,
        the first error is raised once the loop is done, carrying the partial
        results (failed keys map to ``None``) in
        ``error.context.metadata["results"]`` and the failed keys in
        ``error.context.metadata["failed_keys"]``.

        Raises:
            DeserializationError: A stored payload did not decode.
            BackendOperationError: A backend call failed.
        """
        results: dict[str, Any | None] = {}
        failed: list[str] = []
        first_error: DeserializationError | BackendOperationError | None = None
        for key in keys:
            try:
                results[key] = self.get(key)
            except (DeserializationError, BackendOperationError) as exc:
                results[key] = None
                failed.append(key)
                first_error = first_error or exc

        if first_error is not None:
            raise first_error.with_context(results=results, failed_keys=failed)
        return results

    def set_multi(self, data: Mapping[str, Any], ttl: int = DEFAULT_TTL) -> dict[str, bool]:
        """Store every item with the same TTL; returns ``{key: success}``."""
        _check_ttl(ttl)
        return {key: self.set(key, value, ttl) for key, value in data.items()}

    def delete_multi(self, keys: Iterable[str]) -> dict[str, bool]:
        """Delete every key; returns ``{key: deleted}``."""
        return {key: self.delete(key) for key in keys}

    # ------------------------------------------------------------------ #
    # Counters (read-modify-write, not atomic)
    # ------------------------------------------------------------------ #

    def increment(self, key: str, offset: int = 1, ttl: int = DEFAULT_TTL) -> int:
        """Add ``abs(offset)`` to the stored integer and return the new value.

        Absent or non-numeric values count as 0. Two round-trips (get, then
        set); concurrent callers on the same key can lose updates.
        """
        _check_ttl(ttl)
        value = _coerce_int(self.get(key)) + abs(int(offset))
        self.set(key, value, ttl)
        return value

    def decrement(self, key: str, offset: int = 1, ttl: int = DEFAULT_TTL) -> int:
        """Subtract ``abs(offset)`` from the stored integer and return the new value.

        Same semantics and caveats as :meth:`increment`.
        """
        _check_ttl(ttl)
        value = _coerce_int(self.get(key)) - abs(int(offset))
        self.set(key, value, ttl)
        return value

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"Cache({type(self._driver).__name__}, prefix={self.config.prefix!r}, "
            f"serializer={self._serializer.value!r}, {state})"
        )


__all__ = ["Cache", "DEFAULT_TTL"]
