"""Tests for the in-memory TTL/LRU cache repository."""

import pytest

from shields_up.protocols import CacheStore
from shields_up.repositories import InMemoryCacheRepository


def make_cache(clock, max_entries=3, ttl=60):
    return InMemoryCacheRepository(max_entries=max_entries, ttl=ttl, clock=clock, name="test")


def test_satisfies_protocol(clock):
    assert isinstance(make_cache(clock), CacheStore)


def test_get_missing_returns_none(clock):
    assert make_cache(clock).get("nope") is None


def test_set_then_get(clock):
    cache = make_cache(clock)
    cache.set("html:https://example.com/", "<html></html>")
    assert cache.get("html:https://example.com/") == "<html></html>"


def test_entry_expires_after_ttl(clock):
    cache = make_cache(clock, ttl=60)
    cache.set("k", "v")
    clock.advance(59)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k") is None
    assert cache.count() == 0


def test_overwrite_refreshes_expiry(clock):
    cache = make_cache(clock, ttl=60)
    cache.set("k", "old")
    clock.advance(50)
    cache.set("k", "new")
    clock.advance(50)
    assert cache.get("k") == "new"


def test_evicts_least_recently_used(clock):
    cache = make_cache(clock, max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_stats_track_hits_misses_and_evictions(clock):
    cache = make_cache(clock, max_entries=1)
    cache.set("a", 1)
    cache.get("a")
    cache.get("missing")
    cache.set("b", 2)
    stats = cache.get_stats()
    assert stats["name"] == "test"
    assert stats["entries"] == 1
    assert stats["max_entries"] == 1
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["evictions"] == 1


def test_delete_and_clear(clock):
    cache = make_cache(clock)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert cache.clear() == 1
    assert cache.count() == 0


@pytest.mark.parametrize("max_entries, ttl", [(0, 10), (10, 0)])
def test_rejects_non_positive_bounds(clock, max_entries, ttl):
    with pytest.raises(ValueError):
        InMemoryCacheRepository(max_entries=max_entries, ttl=ttl, clock=clock)
