# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Tests for the connect-params cache (nexus.connect.cache).

Covers put/get, TTL expiry at the exact boundary, overwrite semantics,
counters, and concurrent access from multiple threads.
"""

from __future__ import annotations

import threading

from nexus.connect.cache import ConnectParamsCache
from nexus.connect.models import ConnectParams

from tests.conftest import FakeClock

GUEST = ConnectParams(is_guest=True)
ADMIN = ConnectParams(is_guest=False, is_guest_to_admin_messaging_enabled=True)


class TestPutAndGet:
    """Basic cache put/get operations."""

    def test_put_then_get_returns_value(self, cache):
        """A stored entry should be retrievable by the same extension."""
        cache.put("100", GUEST)
        assert cache.get("100") == GUEST

    def test_miss_on_absent_key(self, cache):
        assert cache.get("999") is None

    def test_put_overwrites_previous_entry(self, cache):
        """A second put replaces the first rather than merging."""
        cache.put("100", GUEST)
        cache.put("100", ADMIN)
        assert cache.get("100") == ADMIN
        assert len(cache) == 1

    def test_keys_are_independent(self, cache):
        cache.put("100", GUEST)
        cache.put("200", ADMIN)
        assert cache.get("100") == GUEST
        assert cache.get("200") == ADMIN

    def test_clear(self, cache):
        cache.put("100", GUEST)
        cache.clear()
        assert cache.get("100") is None
        assert len(cache) == 0


class TestTTLExpiry:
    """Entries are valid only while younger than the TTL."""

    def test_entry_valid_just_before_ttl(self, cache, clock):
        cache.put("100", GUEST)
        clock.advance(59.999)
        assert cache.get("100") == GUEST

    def test_entry_expires_at_ttl(self, cache, clock):
        """An entry aged exactly the TTL is a miss."""
        cache.put("100", GUEST)
        clock.advance(60.0)
        assert cache.get("100") is None

    def test_expired_entry_not_eagerly_removed(self, cache, clock):
        cache.put("100", GUEST)
        clock.advance(120.0)
        assert cache.get("100") is None
        assert len(cache) == 1

    def test_put_refreshes_timestamp(self, cache, clock):
        cache.put("100", GUEST)
        clock.advance(50.0)
        cache.put("100", ADMIN)
        clock.advance(50.0)
        assert cache.get("100") == ADMIN

    def test_custom_ttl(self):
        clock = FakeClock()
        cache = ConnectParamsCache(ttl_seconds=5.0, clock=clock)
        cache.put("100", GUEST)
        clock.advance(5.0)
        assert cache.get("100") is None


class TestStats:
    def test_counters(self, cache, clock):
        cache.put("100", GUEST)
        cache.get("100")  # hit
        cache.get("200")  # miss
        clock.advance(61.0)
        cache.get("100")  # expired miss

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 2
        assert stats["expired"] == 1
        assert stats["size"] == 1
        assert stats["ttl_seconds"] == 60.0


class TestConcurrentAccess:
    """Concurrent get/put from many threads never corrupts the mapping."""

    def test_threaded_put_get_stress(self):
        cache = ConnectParamsCache(ttl_seconds=3600.0)
        extensions = [str(100 + i) for i in range(20)]
        values = {
            ext: ConnectParams(is_guest=i % 2 == 0, is_guest_to_guest_calling_enabled=i % 3 == 0)
            for i, ext in enumerate(extensions)
        }
        errors: list[str] = []
        start = threading.Barrier(8)

        def worker(offset: int) -> None:
            start.wait()
            for n in range(500):
                ext = extensions[(n + offset) % len(extensions)]
                cache.put(ext, values[ext])
                got = cache.get(ext)
                # Every writer stores the same value per key, so any read
                # must see exactly that value.
                if got != values[ext]:
                    errors.append(f"{ext}: {got!r}")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) == len(extensions)
        for ext in extensions:
            assert cache.get(ext) == values[ext]
        stats = cache.stats()
        assert stats["hits"] == 8 * 500 + len(extensions)
        assert stats["misses"] == 0
