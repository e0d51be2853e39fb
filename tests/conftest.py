"""
Shared pytest fixtures for cache-spine tests.

Provides:
- FakeDriver: dict-backed driver that records calls and can be told to fail
- Ready-made caches over InMemoryDriver and FakeDriver
- Automatic unit marker for tests without an explicit marker
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, ClassVar

import pytest

# Ensure cache_spine is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cache_spine import Cache, InMemoryDriver
from cache_spine.backends.base import BaseDriver


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


class FakeDriver(BaseDriver):
    """Dict-backed driver with call recording and failure injection.

    Attributes:
        calls: ``(operation, key)`` tuples in call order
        fail_keys: physical keys whose operations raise BackendOperationError
        reject_keys: physical keys whose ``set`` returns False
        fail_connect: exception ``connect()`` raises, if any
        on_get: called with the key after ``get`` has read the store
    """

    name: ClassVar[str] = "fake"
    default_options: ClassVar[Mapping[str, Any]] = {"host": "fake", "port": 0}

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        fail_connect: Exception | None = None,
    ):
        super().__init__(options)
        self.store: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.fail_keys: set[str | None] = set()
        self.reject_keys: set[str] = set()
        self.fail_connect = fail_connect
        self.connected = False
        self.close_count = 0
        self.on_get: Callable[[str], None] | None = None

    def _check(self, operation: str, key: str | None) -> None:
        self.calls.append((operation, key))
        if key in self.fail_keys:
            raise self._operation_error(operation, key, ConnectionResetError("reset by peer"))

    def connect(self) -> None:
        self.calls.append(("connect", None))
        if self.fail_connect is not None:
            raise self.fail_connect
        self.connected = True

    def get(self, key: str) -> bytes | None:
        self._check("get", key)
        data = self.store.get(key)
        if self.on_get is not None:
            self.on_get(key)
        return data

    def set(self, key: str, data: bytes, ttl: int) -> bool:
        self._check("set", key)
        if key in self.reject_keys:
            return False
        self.store[key] = data
        self.ttls[key] = ttl
        return True

    def delete(self, key: str) -> bool:
        self._check("delete", key)
        return self.store.pop(key, None) is not None

    def flush(self) -> bool:
        self._check("flush", None)
        self.store.clear()
        return True

    def close(self) -> None:
        self.calls.append(("close", None))
        self.connected = False
        self.close_count += 1


@pytest.fixture
def fake_driver_cls() -> type[FakeDriver]:
    """The FakeDriver class, for tests that need custom construction."""
    return FakeDriver


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def fake_cache(fake_driver: FakeDriver):
    with Cache(fake_driver, prefix="app:", serializer="json-array") as cache:
        yield cache


@pytest.fixture
def memory_driver() -> InMemoryDriver:
    return InMemoryDriver({"max_size": 100})


@pytest.fixture
def memory_cache(memory_driver: InMemoryDriver):
    with Cache(memory_driver, prefix="test:") as cache:
        yield cache
