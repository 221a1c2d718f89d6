"""Tests for cache/store.py - CacheStore budget, TTL and eviction order."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from largefile.cache import CacheStore, estimate_size
from largefile.config.models import CacheConfig


class FakeClock:
    """Monotonic clock the test advances by hand (seconds)."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_store(
    clock: FakeClock, max_size_bytes: int = 1000, ttl_ms: int = 60_000, enabled: bool = True
) -> CacheStore[str]:
    config = CacheConfig(max_size_bytes=max_size_bytes, ttl_ms=ttl_ms, enabled=enabled)
    return CacheStore(config, name="test", clock=clock)


class TestGetSet:
    """Basic reads and writes."""

    def test_get_missing_returns_none(self, clock: FakeClock) -> None:
        store = make_store(clock)
        assert store.get("nope") is None
        assert store.stats().misses == 1

    def test_set_then_get(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "value", 10)
        assert store.get("k") == "value"
        assert store.stats().hits == 1

    def test_value_held_by_reference(self, clock: FakeClock) -> None:
        store: CacheStore[list[int]] = CacheStore(CacheConfig(), clock=clock)
        value = [1, 2, 3]
        store.set("k", value)
        assert store.get("k") is value

    def test_size_estimated_when_not_given(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "abc")
        assert store.current_size == estimate_size("abc") == 5

    def test_zero_size_override_is_honoured(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "abc", 0)
        assert store.current_size == 0
        assert store.get("k") == "abc"

    def test_overwrite_replaces_size(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "first", 300)
        store.set("k", "second", 200)
        assert len(store) == 1
        assert store.current_size == 200
        assert store.get("k") == "second"

    def test_overwrite_at_full_budget_does_not_evict_others(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=300)
        store.set("a", "a", 100)
        store.set("b", "b", 200)
        store.set("b", "b2", 200)
        assert "a" in store
        assert store.stats().evictions == 0

    def test_delete(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "v", 100)
        store.delete("k")
        assert "k" not in store
        assert store.current_size == 0

    def test_delete_missing_is_noop(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("k", "v", 100)
        store.delete("other")
        assert store.current_size == 100

    def test_clear_resets_size_keeps_counters(self, clock: FakeClock) -> None:
        store = make_store(clock)
        store.set("a", "v", 100)
        store.get("a")
        store.clear()
        stats = store.stats()
        assert stats.entries == 0
        assert stats.size_bytes == 0
        assert stats.hits == 1


class TestSizeAccounting:
    """currentSize always equals the sum of entry sizes."""

    def test_sum_after_mixed_operations(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=500)
        for i in range(8):
            clock.advance(1)
            store.set(f"k{i}", "v", 90 + i)
        store.delete("k6")
        store.set("k7", "v", 10)
        expected = sum(entry.size_bytes for entry in store._entries.values())
        assert store.stats().size_bytes == expected
        assert expected <= 500

    def test_concurrent_sets_keep_invariant(self) -> None:
        store: CacheStore[int] = CacheStore(CacheConfig(max_size_bytes=2000))

        def worker(n: int) -> None:
            for i in range(200):
                store.set(f"{n}:{i % 30}", i, 37)
                store.get(f"{n}:{(i * 7) % 30}")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert store.current_size == sum(e.size_bytes for e in store._entries.values())
        assert store.current_size <= 2000


class TestOversized:
    """Entries larger than the whole budget are never admitted."""

    def test_oversized_value_not_cached(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=1000)
        store.set("big", "x", 1100)
        assert store.current_size == 0
        assert store.get("big") is None

    def test_oversized_value_does_not_evict(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=1000)
        store.set("small", "x", 400)
        store.set("big", "x", 1100)
        assert store.get("small") == "x"
        assert store.current_size == 400

    def test_value_exactly_at_budget_is_cached(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=1000)
        store.set("a", "x", 300)
        store.set("exact", "y", 1000)
        assert "a" not in store
        assert store.get("exact") == "y"


class TestTtl:
    """Expiry is checked lazily on read."""

    def test_entry_within_ttl_is_returned(self, clock: FakeClock) -> None:
        store = make_store(clock, ttl_ms=1000)
        store.set("k", "v", 10)
        clock.advance(1.0)
        assert store.get("k") == "v"

    def test_expired_entry_removed_on_read(self, clock: FakeClock) -> None:
        store = make_store(clock, ttl_ms=1000)
        store.set("k", "v", 10)
        clock.advance(1.001)

        assert "k" in store  # still present until read
        assert store.get("k") is None
        assert "k" not in store
        assert store.current_size == 0
        assert store.get("k") is None
        assert store.stats().misses == 2

    def test_reset_by_later_set(self, clock: FakeClock) -> None:
        store = make_store(clock, ttl_ms=1000)
        store.set("k", "old", 10)
        clock.advance(0.9)
        store.set("k", "new", 10)
        clock.advance(0.9)
        assert store.get("k") == "new"

    def test_reads_do_not_extend_ttl(self, clock: FakeClock) -> None:
        store = make_store(clock, ttl_ms=1000)
        store.set("k", "v", 10)
        clock.advance(0.6)
        assert store.get("k") == "v"
        clock.advance(0.6)
        assert store.get("k") is None


class TestEviction:
    """Oldest insertion first, then lowest access count, then insertion order."""

    def test_equal_age_evicts_lower_access_count(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=300)
        store.set("A", "a", 100)
        store.set("B", "b", 100)
        for _ in range(4):
            store.get("A")
        clock.advance(1)
        store.set("C", "c", 100)

        store.set("D", "d", 100)

        assert "B" not in store
        assert {"A", "C", "D"} <= set(store._entries)
        assert store.stats().evictions == 1

    def test_oldest_evicted_regardless_of_reads(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=200)
        store.set("old", "v", 100)
        clock.advance(1)
        store.set("new", "v", 100)
        for _ in range(10):
            store.get("old")

        clock.advance(1)
        store.set("next", "v", 100)

        assert "old" not in store
        assert "new" in store

    def test_full_tie_evicts_first_inserted(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=200)
        store.set("first", "v", 100)
        store.set("second", "v", 100)
        store.set("third", "v", 100)
        assert "first" not in store
        assert "second" in store

    def test_evicts_as_many_as_needed(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=300)
        for key in ("a", "b", "c"):
            clock.advance(1)
            store.set(key, "v", 100)
        store.set("wide", "v", 250)
        assert set(store._entries) == {"wide"}
        assert store.stats().evictions == 3


class TestDisabled:
    """A disabled cache stores nothing and always misses."""

    def test_set_is_noop(self, clock: FakeClock) -> None:
        store = make_store(clock, enabled=False)
        store.set("k", "v", 10)
        assert len(store) == 0
        assert store.get("k") is None

    def test_stats_empty(self, clock: FakeClock) -> None:
        store = make_store(clock, enabled=False)
        store.set("k", "v", 10)
        stats = store.stats()
        assert stats.entries == 0
        assert stats.utilization_percent == 0.0


class TestStats:
    """stats() reporting."""

    def test_utilization(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=1000)
        store.set("k", "v", 250)
        stats = store.stats()
        assert stats.entries == 1
        assert stats.size_bytes == 250
        assert stats.max_size_bytes == 1000
        assert stats.utilization_percent == 25.0

    def test_empty_store_zero_utilization(self, clock: FakeClock) -> None:
        assert make_store(clock).stats().utilization_percent == 0.0

    def test_zero_budget_does_not_divide_by_zero(self, clock: FakeClock) -> None:
        store = make_store(clock, max_size_bytes=0)
        store.set("k", "v", 0)
        assert store.stats().utilization_percent == 0.0

    def test_to_dict_keys(self, clock: FakeClock) -> None:
        data = make_store(clock).stats().to_dict()
        assert set(data) == {
            "entries",
            "size_bytes",
            "max_size_bytes",
            "utilization_percent",
            "hits",
            "misses",
            "evictions",
        }
