"""
Unit tests for the bounded TTL cache.
Run from backend: python -m pytest tests/test_cache.py -v
"""
import pytest

from gronnest.cache import MISSING, TTLCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_get_missing_and_hit():
    cache = TTLCache(max_entries=5, ttl_seconds=60)
    assert cache.get("a") is MISSING
    cache.set("a", 1)
    assert cache.get("a") == 1
    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["entries"] == 1


def test_none_is_a_cached_value():
    """Not-found is cached as None, distinct from a miss."""
    cache = TTLCache()
    cache.set("404", None)
    assert cache.get("404") is None


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLCache(max_entries=5, ttl_seconds=30 * 60, clock=clock)
    cache.set("k", "v")
    clock.now += 30 * 60 - 1
    assert cache.get("k") == "v"
    clock.now += 1
    assert cache.get("k") is MISSING
    assert len(cache) == 0


def test_capacity_is_never_exceeded():
    cache = TTLCache(max_entries=100, ttl_seconds=60)
    for i in range(250):
        cache.set(f"barcode-{i}", i)
        assert len(cache) <= 100
    # Oldest entries went first
    assert cache.get("barcode-0") is MISSING
    assert cache.get("barcode-249") == 249


def test_set_refreshes_position():
    cache = TTLCache(max_entries=2, ttl_seconds=60)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 3)
    cache.set("c", 4)
    assert cache.get("a") == 3
    assert cache.get("b") is MISSING


def test_expired_entries_evicted_before_live_ones():
    clock = FakeClock()
    cache = TTLCache(max_entries=2, ttl_seconds=10, clock=clock)
    cache.set("old", 1)
    clock.now += 5
    cache.set("live", 2)
    clock.now += 6
    cache.set("new", 3)
    assert cache.get("live") == 2
    assert cache.get("new") == 3


def test_clear_resets_entries_and_counters():
    cache = TTLCache(name="kassalapp")
    cache.set("a", 1)
    cache.get("a")
    cache.clear()
    stats = cache.stats()
    assert stats == {
        "name": "kassalapp",
        "entries": 0,
        "max_entries": 100,
        "ttl_seconds": 1800,
        "hits": 0,
        "misses": 0,
    }


def test_rejects_zero_capacity():
    with pytest.raises(ValueError):
        TTLCache(max_entries=0)
