"""
Local file-system driver.

Wraps one ``diskcache.Cache`` rooted at ``directory``. diskcache keeps an
SQLite index beside the value files, handles expiry and eviction, and is safe
to share between processes that point at the same directory.

Notes:
    - TTL ``0`` stores the entry without expiry.
    - ``size_limit`` is diskcache's byte budget; least recently stored
      entries are culled once it is exceeded.
    - ``flush()`` clears every entry under ``directory``.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

import diskcache

from ..errors import BackendOperationError, CacheConnectionError
from ..logging import get_logger
from .base import BaseDriver

logger = get_logger(__name__)

_STORAGE_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout)


class FileDriver(BaseDriver):
    """diskcache-backed driver.

    Options:
        directory: Cache root (``~/.cache_spine``)
        size_limit: Byte budget before culling (``2**30``)
    """

    name: ClassVar[str] = "file"
    default_options: ClassVar[Mapping[str, Any]] = {
        "directory": str(Path.home() / ".cache_spine"),
        "size_limit": 2**30,
    }

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self.directory = Path(self.options["directory"]).expanduser()
        self._cache: diskcache.Cache | None = None

    def connect(self) -> None:
        if self._cache is not None:
            return
        try:
            self._cache = diskcache.Cache(
                str(self.directory), size_limit=int(self.options["size_limit"])
            )
        except _STORAGE_ERRORS as exc:
            raise CacheConnectionError(
                f"Cannot open cache directory {self.directory}: {exc}", cause=exc
            ).with_context(backend=self.name, operation="connect") from exc
        logger.debug("file_driver_ready", directory=str(self.directory))

    @property
    def cache(self) -> diskcache.Cache:
        if self._cache is None:
            raise BackendOperationError("File driver is not connected").with_context(
                backend=self.name
            )
        return self._cache

    def get(self, key: str) -> bytes | None:
        try:
            return self.cache.get(key)
        except _STORAGE_ERRORS as exc:
            raise self._operation_error("get", key, exc) from exc

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        try:
            return bool(self.cache.set(key, data, expire=ttl or None))
        except _STORAGE_ERRORS as exc:
            raise self._operation_error("set", key, exc) from exc

    def delete(self, key: str) -> bool:
        try:
            return bool(self.cache.delete(key))
        except _STORAGE_ERRORS as exc:
            raise self._operation_error("delete", key, exc) from exc

    def flush(self) -> bool:
        try:
            removed = self.cache.clear()
        except _STORAGE_ERRORS as exc:
            raise self._operation_error("flush", None, exc) from exc
        logger.debug("file_driver_flushed", directory=str(self.directory), removed=removed)
        return True

    def close(self) -> None:
        if self._cache is None:
            return
        cache, self._cache = self._cache, None
        cache.close()


__all__ = ["FileDriver"]
