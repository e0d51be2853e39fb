"""Tests for ``cache_spine.backends.memory.InMemoryDriver``."""

from __future__ import annotations

import threading
import time

import pytest

from cache_spine.backends import CacheDriver, InMemoryDriver
from cache_spine.errors import InvalidConfigurationError


class TestInMemoryDriver:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryDriver(), CacheDriver)

    def test_default_options(self):
        assert dict(InMemoryDriver().options) == {"max_size": 10_000}

    @pytest.mark.parametrize("max_size", [0, -1])
    def test_max_size_must_be_positive(self, max_size):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            InMemoryDriver({"max_size": max_size})
        assert exc_info.value.context.backend == "memory"

    def test_single_slot_store(self):
        d = InMemoryDriver({"max_size": 1})
        d.set("a", b"1", 0)
        d.set("b", b"2", 0)
        assert d.get("a") is None
        assert d.get("b") == b"2"

    def test_get_set(self):
        d = InMemoryDriver()
        assert d.set("k", b"v", 60) is True
        assert d.get("k") == b"v"

    def test_get_missing(self):
        assert InMemoryDriver().get("nope") is None

    def test_delete(self):
        d = InMemoryDriver()
        d.set("k", b"v", 60)
        assert d.delete("k") is True
        assert d.get("k") is None
        assert d.delete("k") is False

    def test_flush(self):
        d = InMemoryDriver()
        d.set("a", b"1", 60)
        d.set("b", b"2", 60)
        assert d.flush() is True
        assert d.size() == 0

    def test_ttl_expiry(self):
        d = InMemoryDriver()
        d.set("k", b"v", 1)
        assert d.get("k") == b"v"
        # Manually expire by manipulating the store
        d._store["k"] = (b"v", time.time() - 1)
        assert d.get("k") is None
        assert d.size() == 0

    def test_delete_expired_returns_false(self):
        d = InMemoryDriver()
        d.set("k", b"v", 1)
        d._store["k"] = (b"v", time.time() - 1)
        assert d.delete("k") is False

    def test_zero_ttl_never_expires(self):
        d = InMemoryDriver()
        d.set("k", b"v", 0)
        assert d._store["k"][1] is None

    def test_lru_eviction(self):
        d = InMemoryDriver({"max_size": 3})
        d.set("k1", b"1", 0)
        d.set("k2", b"2", 0)
        d.set("k3", b"3", 0)

        # k1 is LRU → should be evicted
        d.set("k4", b"4", 0)
        assert d.size() == 3
        assert d.get("k1") is None
        assert d.get("k4") == b"4"

    def test_lru_updates_on_get(self):
        d = InMemoryDriver({"max_size": 3})
        d.set("k1", b"1", 0)
        d.set("k2", b"2", 0)
        d.set("k3", b"3", 0)
        d.get("k1")

        # Now k2 is LRU → should be evicted
        d.set("k4", b"4", 0)
        assert d.get("k1") == b"1"
        assert d.get("k2") is None

    def test_overwrite_does_not_evict(self):
        d = InMemoryDriver({"max_size": 2})
        d.set("a", b"1", 0)
        d.set("b", b"2", 0)
        d.set("a", b"3", 0)
        assert d.get("a") == b"3"
        assert d.get("b") == b"2"

    def test_close_keeps_entries(self):
        d = InMemoryDriver()
        d.set("k", b"v", 0)
        d.close()
        assert d.get("k") == b"v"

    def test_concurrent_writers(self):
        d = InMemoryDriver({"max_size": 50})

        def writer(start: int) -> None:
            for i in range(start, start + 100):
                d.set(f"k{i}", b"x", 0)

        threads = [threading.Thread(target=writer, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert d.size() == 50
