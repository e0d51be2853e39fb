"""
Redis driver.

Wraps one ``redis.Redis`` client. The connection is opened (and verified
with ``PING``) in :meth:`RedisDriver.connect`, so an unreachable server fails
cache construction rather than the first read.

Notes:
    - TTL ``0`` stores the key without expiry (``SET`` without ``EX``).
    - ``flush()`` issues ``FLUSHALL``: every database on the server is
      emptied, whatever prefix the calling cache uses.
    - The client holds a connection pool, but the driver is meant for a
      single owner; share a cache across threads only if you accept
      redis-py's pool semantics.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

import redis

from ..errors import BackendOperationError, CacheConnectionError
from ..logging import get_logger
from .base import BaseDriver

logger = get_logger(__name__)


class RedisDriver(BaseDriver):
    """Redis-backed driver.

    Options:
        host: Server host (``127.0.0.1``)
        port: Server port (``6379``)
        timeout: Connect timeout in seconds, ``0`` for none (``0.0``)
        database: Logical database index (``0``)
        password: AUTH password (``None``)
    """

    name: ClassVar[str] = "redis"
    default_options: ClassVar[Mapping[str, Any]] = {
        "host": "127.0.0.1",
        "port": 6379,
        "timeout": 0.0,
        "database": 0,
        "password": None,
    }

    def __init__(self, options: Mapping[str, Any] | None = None):
        super().__init__(options)
        self._client: redis.Redis | None = None

    def connect(self) -> None:
        if self._client is not None:
            return

        timeout = self.options["timeout"] or None
        client = redis.Redis(
            host=self.options["host"],
            port=int(self.options["port"]),
            db=int(self.options["database"]),
            password=self.options["password"],
            socket_connect_timeout=timeout,
        )
        try:
            client.ping()
        except redis.RedisError as exc:
            client.close()
            raise CacheConnectionError(
                f"Cannot connect to Redis at {self.options['host']}:{self.options['port']}: {exc}",
                cause=exc,
            ).with_context(backend=self.name, operation="connect") from exc

        self._client = client
        logger.info("redis_connected", host=self.options["host"], port=self.options["port"])

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            raise BackendOperationError("Redis driver is not connected").with_context(
                backend=self.name
            )
        return self._client

    def get(self, key: str) -> bytes | None:
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            raise self._operation_error("get", key, exc) from exc

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        try:
            return bool(self.client.set(key, data, ex=ttl or None))
        except redis.RedisError as exc:
            raise self._operation_error("set", key, exc) from exc

    def delete(self, key: str) -> bool:
        try:
            return self.client.delete(key) > 0
        except redis.RedisError as exc:
            raise self._operation_error("delete", key, exc) from exc

    def flush(self) -> bool:
        try:
            return bool(self.client.flushall())
        except redis.RedisError as exc:
            raise self._operation_error("flush", None, exc) from exc

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.info("redis_closed", host=self.options["host"], port=self.options["port"])


__all__ = ["RedisDriver"]
