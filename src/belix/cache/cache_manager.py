"""
In-memory TTL cache with hit/miss metrics.

Provides a key→value store for frequently read data (leaderboards, daily
content, member profiles) so callers can skip the database on repeated reads:

- Per-entry TTL; an entry is valid while ``now - created_at <= ttl``.
- Stale entries are dropped on read and by a fixed-interval background sweep,
  so keys that are written but never read again do not accumulate.
- Hit/miss/set/delete counters and an approximate memory estimate for
  monitoring.

Values are returned by reference. A caller that mutates a returned object
mutates the cached copy too; cache immutable data or copy before mutating.
"""

from __future__ import annotations

import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from belix.configuration.throttle_settings import (
    DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
    DEFAULT_CACHE_TTL_MS,
    CacheSettings,
)
from belix.datatypes.cache_datatypes import CacheEntry, CacheStats
from belix.scheduler.sweep_scheduler import PeriodicSweeper
from belix.util.clock import Clock, now_ms
from belix.util.logger import get_logger

logger = get_logger("cache_manager")

_MISSING = object()

ComputeFn = Callable[[], Union[Any, Awaitable[Any]]]


class CacheManager:
    """
    TTL-based key/value cache.

    Args:
        default_ttl_ms: TTL applied by :meth:`set` when none is given.
        cleanup_interval_ms: Interval of the background sweep started by :meth:`start`.
        clock: Millisecond clock; defaults to the wall clock.
    """

    def __init__(
        self,
        default_ttl_ms: float = DEFAULT_CACHE_TTL_MS,
        cleanup_interval_ms: float = DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
        clock: Clock = now_ms,
    ) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._clock = clock
        self.default_ttl_ms = default_ttl_ms
        self.cleanup_interval_ms = cleanup_interval_ms
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.deletes = 0
        self._sweeper = PeriodicSweeper("cache", self.sweep, cleanup_interval_ms / 1000.0)

    @classmethod
    def from_settings(cls, settings: CacheSettings, clock: Clock = now_ms) -> "CacheManager":
        return cls(
            default_ttl_ms=settings.default_ttl_ms,
            cleanup_interval_ms=settings.cleanup_interval_ms,
            clock=clock,
        )

    # --------------------------
    # Lifecycle
    # --------------------------
    def start(self) -> None:
        """Start the background sweep. Requires a running event loop."""
        self._sweeper.start()

    async def close(self) -> None:
        """Stop the background sweep. Cached entries are left untouched."""
        await self._sweeper.shutdown()

    # --------------------------
    # Core operations
    # --------------------------
    def set(self, key: str, value: Any, ttl_ms: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry."""
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        now = self._clock()
        self._store[key] = CacheEntry(value=value, created_at=now, ttl=ttl, last_accessed=now)
        self.sets += 1
        logger.debug("[CACHE] Set key=%s ttl=%sms size=%d", key, ttl, len(self._store))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the cached value for ``key``, or ``default`` when absent or stale.

        A stale entry is deleted as part of the lookup. Both outcomes update the
        hit/miss counters.
        """
        entry = self._store.get(key)
        now = self._clock()

        if entry is None:
            self.misses += 1
            return default

        if entry.is_expired(now):
            del self._store[key]
            self.misses += 1
            logger.debug("[CACHE] Expired key=%s", key)
            return default

        entry.record_hit(now)
        self.hits += 1
        logger.debug("[CACHE] Hit key=%s hits=%d", key, entry.hit_count)
        return entry.value

    async def get_or_compute(self, key: str, compute_fn: ComputeFn, ttl_ms: Optional[float] = None) -> Any:
        """
        Return the cached value for ``key``, computing and caching it on a miss.

        ``compute_fn`` may be a plain callable or a coroutine function. If it
        raises, the exception propagates and nothing is cached, so a failed
        fetch never poisons the cache.

        Example:
            leaderboard = await cache.get_or_compute(
                "leaderboard:top10", repository.fetch_top10, ttl_ms=300_000
            )
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        try:
            value = compute_fn()
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:
            logger.error("[CACHE] Fetch for key=%s failed: %s", key, exc)
            raise

        self.set(key, value, ttl_ms)
        return value

    def delete(self, key: str) -> bool:
        """Remove ``key`` if present. Returns whether an entry existed."""
        if self._store.pop(key, None) is None:
            return False
        self.deletes += 1
        logger.debug("[CACHE] Invalidated key=%s", key)
        return True

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        count = len(self._store)
        self._store.clear()
        logger.info("[CACHE] Cleared %d entries", count)
        return count

    def sweep(self) -> int:
        """Evict every expired entry. Returns the number of evicted entries."""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        self.deletes += len(expired)
        if expired:
            logger.debug("[CACHE] Sweep removed %d entries, %d remaining", len(expired), len(self._store))
        return len(expired)

    # --------------------------
    # Monitoring
    # --------------------------
    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        entry = self._store.get(key)  # type: ignore[arg-type]
        return entry is not None and not entry.is_expired(self._clock())

    def describe(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the metadata of ``key`` without counting it as a read."""
        entry = self._store.get(key)
        if entry is None:
            return None
        return entry.describe(self._clock())

    def estimate_memory_usage(self) -> int:
        """
        Rough size in bytes of the stored values, excluding entry overhead.

        Each value is measured by its JSON length at two bytes per character.
        Any value that cannot be serialized makes the whole estimate 0.
        """
        try:
            return sum(len(json.dumps(entry.value)) * 2 for entry in self._store.values())
        except Exception as exc:
            logger.warning("[CACHE] Memory estimate unavailable: %s", exc)
            return 0

    def get_stats(self) -> CacheStats:
        accesses = self.hits + self.misses
        return CacheStats(
            hits=self.hits,
            misses=self.misses,
            sets=self.sets,
            deletes=self.deletes,
            hit_rate=self.hits / accesses if accesses else 0.0,
            entries=len(self._store),
            estimated_memory_bytes=self.estimate_memory_usage(),
        )
