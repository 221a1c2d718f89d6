"""In-memory result cache with byte-size accounting."""

from largefile.cache.sizing import DEFAULT_ESTIMATE_BYTES, estimate_size
from largefile.cache.store import CacheEntry, CacheStats, CacheStore

__all__ = ["CacheEntry", "CacheStats", "CacheStore", "DEFAULT_ESTIMATE_BYTES", "estimate_size"]
