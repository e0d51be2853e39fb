"""
Memcached driver.

Wraps one ``pymemcache`` base client. Storage commands are sent with
``noreply=False`` so the driver reports what the server actually did.

Notes:
    - TTL ``0`` means no expiry. Memcached reads TTLs above 30 days
      (2 592 000 s) as absolute Unix timestamps.
    - Keys must be ASCII without whitespace and at most 250 bytes; other
      keys fail with BackendOperationError.
    - ``flush()`` issues ``flush_all`` for the whole server.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from pymemcache.client.base import Client
from pymemcache.exceptions import MemcacheError

from ..errors import BackendOperationError, CacheConnectionError
from ..logging import get_logger
from .base import BaseDriver

logger = get_logger(__name__)

_TRANSPORT_ERRORS = (MemcacheError, OSError)


class MemcachedDriver(BaseDriver):
    """Memcached-backed driver.

    Options:
        host: Server host (``127.0.0.1``)
        port: Server port (``11211``)
        timeout: Connect timeout in seconds, ``0`` for none (``0.0``)
    """

    name: ClassVar[str] = "memcached"
    default_options: ClassVar[Mapping[str, Any]] = {
        "host": "127.0.0.1",
        "port": 11211,
        "timeout": 0.0,
    }

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self._client: Client | None = None

    def connect(self) -> None:
        if self._client is not None:
            return

        client = Client(
            (self.options["host"], int(self.options["port"])),
            connect_timeout=self.options["timeout"] or None,
        )
        try:
            client.version()
        except _TRANSPORT_ERRORS as exc:
            client.close()
            raise CacheConnectionError(
                f"Cannot connect to Memcached at {self.options['host']}:{self.options['port']}: {exc}",
                cause=exc,
            ).with_context(backend=self.name, operation="connect") from exc

        self._client = client
        logger.info("memcached_connected", host=self.options["host"], port=self.options["port"])

    @property
    def client(self) -> Client:
        if self._client is None:
            raise BackendOperationError("Memcached driver is not connected").with_context(
                backend=self.name
            )
        return self._client

    def get(self, key: str) -> bytes | None:
        try:
            return self.client.get(key)
        except _TRANSPORT_ERRORS as exc:
            raise self._operation_error("get", key, exc) from exc

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        try:
            return bool(self.client.set(key, data, expire=ttl, noreply=False))
        except _TRANSPORT_ERRORS as exc:
            raise self._operation_error("set", key, exc) from exc

    def delete(self, key: str) -> bool:
        try:
            return bool(self.client.delete(key, noreply=False))
        except _TRANSPORT_ERRORS as exc:
            raise self._operation_error("delete", key, exc) from exc

    def flush(self) -> bool:
        try:
            return bool(self.client.flush_all(noreply=False))
        except _TRANSPORT_ERRORS as exc:
            raise self._operation_error("flush", None, exc) from exc

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.info("memcached_closed", host=self.options["host"], port=self.options["port"])


__all__ = ["MemcachedDriver"]
