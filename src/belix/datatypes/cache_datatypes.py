"""
Entry and statistics types for the TTL cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True)
class CacheEntry:
    """A cached value together with its expiry metadata.

    Attributes:
        value: The stored value. Returned by reference, never copied.
        created_at: Epoch milliseconds when the value was stored.
        ttl: Time-to-live in milliseconds.
        hit_count: Number of successful reads since the value was stored.
        last_accessed: Epoch milliseconds of the last successful read (or the store).
    """
    value: Any
    created_at: float
    ttl: float
    hit_count: int = 0
    last_accessed: float = 0.0

    def is_expired(self, now: float) -> bool:
        """Return True once the entry is strictly older than its TTL."""
        return now - self.created_at > self.ttl

    def record_hit(self, now: float) -> None:
        self.hit_count += 1
        self.last_accessed = now

    def describe(self, now: float) -> Dict[str, Any]:
        return {
            "created_at": self.created_at,
            "last_accessed": self.last_accessed,
            "hits": self.hit_count,
            "age": now - self.created_at,
            "ttl": self.ttl,
        }


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Point-in-time cache metrics.

    ``hit_rate`` is a fraction in ``[0, 1]`` and is 0.0 before the first read.
    ``estimated_memory_bytes`` is an approximation for monitoring only.
    """
    hits: int
    misses: int
    sets: int
    deletes: int
    hit_rate: float
    entries: int
    estimated_memory_bytes: int

    def as_dict(self) -> Dict[str, Any]:
        """Render the snapshot the way the monitoring endpoints report it."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "hitRate": f"{self.hit_rate * 100:.2f}%",
            "entriesStored": self.entries,
            "estimatedMemory": f"{self.estimated_memory_bytes / 1024:.2f} KB",
        }
