"""Size-bounded, time-bounded in-memory cache for computed file results.

Design:
- Keyed by strings built by the request router (see largefile.mcp.router)
- Byte budget: the sum of entry sizes never exceeds max_size_bytes
- TTL is checked lazily on get; expired entries linger until next read
- Eviction runs only on set: oldest insertion time first, ties broken by
  lowest access count, then by insertion order
- Reads bump the access count but never the insertion time, so eviction
  order is insertion-based, not last-access-based
- Entries larger than the whole budget are silently not cached
- No operation raises; capacity and TTL problems degrade to a cache miss
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog

from largefile.cache.sizing import estimate_size
from largefile.config.models import CacheConfig

log = structlog.get_logger(__name__)

V = TypeVar("V")

Clock = Callable[[], float]


@dataclass
class CacheEntry(Generic[V]):
    """A single cached value with its bookkeeping."""

    value: V
    inserted_at: float
    size_bytes: int
    access_count: int = 1


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time view of a cache's occupancy and counters."""

    entries: int
    size_bytes: int
    max_size_bytes: int
    utilization_percent: float
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": self.entries,
            "size_bytes": self.size_bytes,
            "max_size_bytes": self.max_size_bytes,
            "utilization_percent": self.utilization_percent,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }


class CacheStore(Generic[V]):
    """Key/value store with a byte budget, per-entry TTL and approximate LRU.

    Thread-safe: get, set, delete and clear are each atomic with respect to
    one another. There is no per-key locking, so two concurrent misses on
    the same key both compute and the last set wins.
    """

    def __init__(
        self,
        config: CacheConfig,
        *,
        name: str = "cache",
        clock: Clock = time.monotonic,
    ) -> None:
        self._config = config
        self._name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._current_size = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._lock = threading.Lock()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def current_size(self) -> int:
        return self._current_size

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Presence check. Does not count as a read and does not expire."""
        return key in self._entries

    def get(self, key: str) -> V | None:
        """Return the cached value, or None if absent, expired or disabled."""
        if not self._config.enabled:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            age_ms = (self._clock() - entry.inserted_at) * 1000
            if age_ms > self._config.ttl_ms:
                self._remove(key)
                self._misses += 1
                log.debug("cache_expired", cache=self._name, key=key, age_ms=int(age_ms))
                return None

            entry.access_count += 1
            self._hits += 1
            return entry.value

    def set(self, key: str, value: V, size_bytes: int | None = None) -> None:
        """Store value under key, evicting older entries to make room.

        Args:
            key: Cache key.
            value: Value to store. Held by reference, not copied.
            size_bytes: Caller-supplied size; estimated from the value if None.
        """
        if not self._config.enabled:
            return

        size = estimate_size(value) if size_bytes is None else max(0, size_bytes)

        with self._lock:
            if size > self._config.max_size_bytes:
                log.debug(
                    "cache_reject_oversized",
                    cache=self._name,
                    key=key,
                    size_bytes=size,
                    max_size_bytes=self._config.max_size_bytes,
                )
                return

            if key in self._entries:
                self._remove(key)

            while self._current_size + size > self._config.max_size_bytes and self._entries:
                self._evict_one()

            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock(), size_bytes=size)
            self._current_size += size

    def delete(self, key: str) -> None:
        """Remove key if present."""
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        """Remove all entries. Hit/miss counters are kept."""
        with self._lock:
            self._entries.clear()
            self._current_size = 0

    def stats(self) -> CacheStats:
        with self._lock:
            max_size = self._config.max_size_bytes
            utilization = (
                100 * self._current_size / max_size if self._entries and max_size > 0 else 0.0
            )
            return CacheStats(
                entries=len(self._entries),
                size_bytes=self._current_size,
                max_size_bytes=max_size,
                utilization_percent=utilization,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    # Callers must hold self._lock for the helpers below.

    def _remove(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._current_size -= entry.size_bytes

    def _evict_one(self) -> None:
        victim: str | None = None
        oldest = float("inf")
        least_accessed = float("inf")
        for key, entry in self._entries.items():
            if entry.inserted_at < oldest or (
                entry.inserted_at == oldest and entry.access_count < least_accessed
            ):
                victim = key
                oldest = entry.inserted_at
                least_accessed = entry.access_count

        if victim is not None:
            size = self._entries[victim].size_bytes
            self._remove(victim)
            self._evictions += 1
            log.debug("cache_evict", cache=self._name, key=victim, size_bytes=size)
