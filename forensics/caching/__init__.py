"""
Forensic Replay Caching — Bounded Frame Cache
===============================================
Fast repeat access to reconstructed frames.

Doctrine: Cache is disposable — every entry is rebuildable from the
loaded dataset. Eviction is by INSERTION order (FIFO), not access order:
a frequently re-queried old timestamp is still evicted before a newer,
rarely used one. The cache is a capacity bound, not an LRU.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

V = TypeVar("V")


# ══════════════════════════════════════════════════════════════
# CACHE STATISTICS
# ══════════════════════════════════════════════════════════════

@dataclass
class CacheStats:
    """Cache performance statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    invalidations: int = 0
    total_entries: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "invalidations": self.invalidations,
            "total_entries": self.total_entries,
            "hit_rate": round(self.hit_rate, 4),
        }


# ══════════════════════════════════════════════════════════════
# FIFO CACHE (insertion-order capacity bound)
# ══════════════════════════════════════════════════════════════

class FifoCache(Generic[V]):
    """
    In-memory cache bounded by entry count, evicting oldest-inserted first.

    A key is written at most once: re-putting an existing key is ignored,
    so no key can ever map to two different values over its lifetime
    in the cache.
    """

    def __init__(self, max_size: int = 100) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}.")
        self._max_size = max_size
        self._entries: OrderedDict[str, V] = OrderedDict()
        self._stats = CacheStats()

    def get(self, key: str) -> Optional[V]:
        """Return the cached value, or None on miss. Does not reorder."""
        value = self._entries.get(key)
        if value is None:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        return value

    def put(self, key: str, value: V) -> None:
        """Store a value, evicting the oldest-inserted entry when full."""
        if key in self._entries:
            return

        if len(self._entries) >= self._max_size:
            self._evict_oldest()

        self._entries[key] = value
        self._stats.total_entries = len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        """Keys in insertion order (oldest first)."""
        return list(self._entries)

    def clear(self) -> None:
        """Clear all cache entries."""
        self._stats.invalidations += len(self._entries)
        self._entries.clear()
        self._stats.total_entries = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def size(self) -> int:
        return len(self._entries)

    def _evict_oldest(self) -> None:
        if self._entries:
            self._entries.popitem(last=False)
            self._stats.evictions += 1
            self._stats.total_entries = len(self._entries)


__all__ = ["CacheStats", "FifoCache"]
