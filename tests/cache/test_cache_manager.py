"""Tests for the TTL cache."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from belix.cache.cache_manager import CacheManager


@pytest.fixture()
def cache(clock) -> CacheManager:
    return CacheManager(default_ttl_ms=1000, cleanup_interval_ms=60_000, clock=clock)


class TestGetAndSet:
    """Expiry and overwrite behavior of get/set."""

    def test_get_after_set_returns_value(self, cache):
        cache.set("k", {"points": 10}, ttl_ms=5000)

        assert cache.get("k") == {"points": 10}

    def test_value_valid_through_exactly_ttl(self, cache, clock):
        cache.set("k", "v", ttl_ms=5000)

        clock.advance(5000)
        assert cache.get("k") == "v"

    def test_value_absent_after_ttl(self, cache, clock):
        cache.set("k", "v", ttl_ms=5000)

        clock.advance(5001)

        assert cache.get("k") is None
        assert "k" not in cache
        assert len(cache) == 0

    def test_get_returns_default_when_missing(self, cache):
        sentinel = object()
        assert cache.get("missing", sentinel) is sentinel

    def test_set_uses_default_ttl(self, cache, clock):
        cache.set("k", "v")

        assert cache.describe("k")["ttl"] == 1000
        clock.advance(1001)
        assert cache.get("k") is None

    def test_set_overwrites_and_resets_hits(self, cache, clock):
        cache.set("k", "old", ttl_ms=5000)
        cache.get("k")
        cache.get("k")
        assert cache.describe("k")["hits"] == 2

        clock.advance(4000)
        cache.set("k", "new", ttl_ms=5000)

        assert cache.describe("k")["hits"] == 0
        clock.advance(4000)
        assert cache.get("k") == "new"
        assert cache.get_stats().sets == 2

    def test_hit_updates_last_accessed(self, cache, clock):
        cache.set("k", "v", ttl_ms=5000)
        clock.advance(250)

        cache.get("k")

        info = cache.describe("k")
        assert info["last_accessed"] == clock.now
        assert info["age"] == 250

    def test_cached_none_counts_as_hit(self, cache):
        cache.set("k", None, ttl_ms=5000)

        assert cache.get("k", "default") is None
        assert cache.get_stats().hits == 1


class TestMetrics:
    """Hit/miss counters and stats snapshot."""

    def test_hit_and_miss_counting(self, cache):
        cache.set("present", 1, ttl_ms=5000)

        cache.get("absent")
        cache.get("present")

        stats = cache.get_stats()
        assert stats.misses == 1
        assert stats.hits == 1
        assert stats.hit_rate == pytest.approx(0.5)
        assert stats.as_dict()["hitRate"] == "50.00%"

    def test_hit_rate_zero_without_accesses(self, cache):
        stats = cache.get_stats()

        assert stats.hit_rate == 0.0
        assert stats.entries == 0

    def test_expired_read_counts_as_miss(self, cache, clock):
        cache.set("k", "v", ttl_ms=10)
        clock.advance(11)

        cache.get("k")

        assert cache.get_stats().misses == 1
        assert cache.get_stats().hits == 0

    def test_memory_estimate(self, cache):
        cache.set("k", "abcd", ttl_ms=5000)

        # json.dumps("abcd") is 6 characters, two bytes each
        assert cache.get_stats().estimated_memory_bytes == 12

    def test_memory_estimate_falls_back_to_zero(self, cache):
        cache.set("ok", "abcd", ttl_ms=5000)
        cache.set("bad", object(), ttl_ms=5000)

        stats = cache.get_stats()

        assert stats.estimated_memory_bytes == 0
        assert stats.entries == 2


class TestGetOrCompute:
    """get_or_compute caching behavior."""

    @pytest.mark.asyncio
    async def test_computes_once_within_ttl(self, cache):
        fetch = AsyncMock(return_value=[1, 2, 3])

        first = await cache.get_or_compute("leaderboard", fetch, ttl_ms=5000)
        second = await cache.get_or_compute("leaderboard", fetch, ttl_ms=5000)

        assert first == second == [1, 2, 3]
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_accepts_sync_callable(self, cache):
        fetch = MagicMock(return_value="question of the day")

        value = await cache.get_or_compute("question", fetch)

        assert value == "question of the day"
        assert cache.get("question") == "question of the day"
        fetch.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_recomputes_after_expiry(self, cache, clock):
        fetch = AsyncMock(side_effect=["first", "second"])

        assert await cache.get_or_compute("k", fetch, ttl_ms=100) == "first"
        clock.advance(101)
        assert await cache.get_or_compute("k", fetch, ttl_ms=100) == "second"
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_propagates_and_caches_nothing(self, cache):
        fetch = AsyncMock(side_effect=RuntimeError("database down"))

        with pytest.raises(RuntimeError, match="database down"):
            await cache.get_or_compute("k", fetch)

        assert "k" not in cache
        assert cache.get_stats().sets == 0

    @pytest.mark.asyncio
    async def test_caches_none_result(self, cache):
        fetch = AsyncMock(return_value=None)

        await cache.get_or_compute("k", fetch)
        await cache.get_or_compute("k", fetch)

        fetch.assert_awaited_once()


class TestDeleteAndClear:
    """Explicit invalidation."""

    def test_delete_absent_key(self, cache):
        assert cache.delete("nope") is False
        assert cache.get_stats().deletes == 0

    def test_delete_twice(self, cache):
        cache.set("k", "v")

        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get_stats().deletes == 1

    def test_clear_removes_everything(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.clear() == 2
        assert len(cache) == 0
        assert cache.get("a") is None


class TestSweep:
    """Background sweep eviction."""

    def test_sweep_removes_only_expired(self, cache, clock):
        cache.set("old", "stale", ttl_ms=100)
        clock.advance(50)
        cache.set("fresh", "value", ttl_ms=1000)
        clock.advance(100)

        removed = cache.sweep()

        assert removed == 1
        assert len(cache) == 1
        assert cache.get_stats().entries == 1
        assert cache.get("fresh") == "value"
        assert cache.describe("old") is None

    def test_sweep_counts_deletes(self, cache, clock):
        cache.set("a", 1, ttl_ms=10)
        cache.set("b", 2, ttl_ms=10)
        clock.advance(11)

        cache.sweep()

        assert cache.get_stats().deletes == 2

    @pytest.mark.asyncio
    async def test_background_sweep_runs_on_interval(self, clock):
        cache = CacheManager(default_ttl_ms=10, cleanup_interval_ms=10, clock=clock)
        cache.set("k", "v")
        clock.advance(11)

        cache.start()
        try:
            for _ in range(50):
                await asyncio.sleep(0.01)
                if len(cache) == 0:
                    break
        finally:
            await cache.close()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_close_without_start(self, cache):
        await cache.close()
