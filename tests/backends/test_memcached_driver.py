"""Tests for ``cache_spine.backends.memcached.MemcachedDriver``.

The pymemcache client is replaced with a MagicMock; no server is needed.
"""

from __future__ import annotations

import socket
from unittest.mock import MagicMock

import pytest
from pymemcache.exceptions import MemcacheIllegalInputError

from cache_spine.backends import CacheDriver, MemcachedDriver
from cache_spine.backends import memcached as memcached_module
from cache_spine.errors import BackendOperationError, CacheConnectionError


@pytest.fixture
def client_cls(monkeypatch):
    cls = MagicMock(return_value=MagicMock())
    monkeypatch.setattr(memcached_module, "Client", cls)
    return cls


@pytest.fixture
def driver_and_client(client_cls):
    driver = MemcachedDriver()
    driver.connect()
    return driver, client_cls.return_value


class TestMemcachedDriverConnect:
    def test_satisfies_protocol(self):
        assert isinstance(MemcachedDriver(), CacheDriver)

    def test_connect_defaults(self, client_cls):
        MemcachedDriver().connect()
        client_cls.assert_called_once_with(("127.0.0.1", 11211), connect_timeout=None)
        client_cls.return_value.version.assert_called_once()

    def test_connect_timeout(self, client_cls):
        MemcachedDriver({"host": "mc", "port": 11311, "timeout": 1.5}).connect()
        client_cls.assert_called_once_with(("mc", 11311), connect_timeout=1.5)

    def test_connect_failure(self, client_cls):
        client = client_cls.return_value
        client.version.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(CacheConnectionError) as exc_info:
            MemcachedDriver().connect()
        client.close.assert_called_once()
        assert exc_info.value.context.backend == "memcached"

    def test_operation_before_connect(self):
        with pytest.raises(BackendOperationError):
            MemcachedDriver().set("k", b"v", 0)


class TestMemcachedDriverOperations:
    def test_get(self, driver_and_client):
        driver, client = driver_and_client
        client.get.return_value = b"payload"
        assert driver.get("k") == b"payload"

    def test_set_waits_for_reply(self, driver_and_client):
        driver, client = driver_and_client
        client.set.return_value = True
        assert driver.set("k", b"v", 30) is True
        client.set.assert_called_once_with("k", b"v", expire=30, noreply=False)

    def test_set_not_stored(self, driver_and_client):
        driver, client = driver_and_client
        client.set.return_value = False
        assert driver.set("k", b"v", 30) is False

    def test_delete(self, driver_and_client):
        driver, client = driver_and_client
        client.delete.return_value = False
        assert driver.delete("k") is False
        client.delete.assert_called_once_with("k", noreply=False)

    def test_flush(self, driver_and_client):
        driver, client = driver_and_client
        client.flush_all.return_value = True
        assert driver.flush() is True
        client.flush_all.assert_called_once_with(noreply=False)

    def test_illegal_key_is_wrapped(self, driver_and_client):
        driver, client = driver_and_client
        client.get.side_effect = MemcacheIllegalInputError("Key contains whitespace")
        with pytest.raises(BackendOperationError) as exc_info:
            driver.get("bad key")
        assert exc_info.value.context.key == "bad key"

    def test_socket_error_is_wrapped(self, driver_and_client):
        driver, client = driver_and_client
        client.set.side_effect = socket.timeout("timed out")
        with pytest.raises(BackendOperationError):
            driver.set("k", b"v", 0)

    def test_close_is_idempotent(self, driver_and_client):
        driver, client = driver_and_client
        driver.close()
        driver.close()
        client.close.assert_called_once()
