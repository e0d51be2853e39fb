"""
In-memory driver (single process).

Bounded LRU store with lazy TTL expiry: an expired entry is dropped when it
is next read. Several caches with different prefixes can share one driver
instance; they then share one key space, and ``flush()`` clears it for all
of them.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Mapping
from typing import Any, ClassVar

from ..errors import InvalidConfigurationError
from ..logging import get_logger
from .base import BaseDriver

logger = get_logger(__name__)


class InMemoryDriver(BaseDriver):
    """Bounded in-memory driver with TTL support.

    Uses LRU eviction when ``max_size`` is reached. Thread-safe for
    single-process use.

    Example:
        driver = InMemoryDriver({"max_size": 500})
        driver.set("session:abc", b"...", ttl=3600)
    """

    name: ClassVar[str] = "memory"
    default_options: ClassVar[Mapping[str, Any]] = {"max_size": 10_000}

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self._store: OrderedDict[str, tuple[bytes, float | None]] = OrderedDict()
        self._max_size = int(self.options["max_size"])
        if self._max_size < 1:
            raise InvalidConfigurationError(
                f"max_size must be >= 1, got {self._max_size}"
            ).with_context(backend=self.name)
        self._lock = threading.RLock()

    def connect(self) -> None:
        logger.debug("memory_driver_ready", max_size=self._max_size)

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            data, expires_at = entry
            if expires_at is not None and time.time() > expires_at:
                del self._store[key]
                return None

            self._store.move_to_end(key)
            return data

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        expires_at = (time.time() + ttl) if ttl else None
        with self._lock:
            # Evict LRU if at capacity
            if key not in self._store and len(self._store) >= self._max_size:
                evicted, _ = self._store.popitem(last=False)
                logger.debug("memory_driver_evicted", key=evicted)

            self._store[key] = (data, expires_at)
            self._store.move_to_end(key)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            entry = self._store.pop(key, None)
        if entry is None:
            return False
        _, expires_at = entry
        return expires_at is None or time.time() <= expires_at

    def flush(self) -> bool:
        with self._lock:
            self._store.clear()
        return True

    def close(self) -> None:
        # Entries outlive a single cache; other caches may share this driver
        pass

    def size(self) -> int:
        """Return current number of stored keys (expired ones included until read)."""
        return len(self._store)


__all__ = ["InMemoryDriver"]
