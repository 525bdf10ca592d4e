from unittest.mock import AsyncMock

import pytest

from belix.cache.cache_handlers import CacheNamespace, build_namespaces
from belix.cache.cache_manager import CacheManager
from belix.configuration.throttle_settings import CacheSettings


@pytest.fixture()
def cache(clock) -> CacheManager:
    return CacheManager(clock=clock)


@pytest.mark.asyncio
async def test_namespace_get_uses_fixed_key_and_ttl(cache, clock) -> None:
    leaderboard = CacheNamespace(cache, "leaderboard", "leaderboard:top10", ttl_ms=300_000)
    fetch = AsyncMock(return_value=["alice", "bob"])

    assert await leaderboard.get(fetch) == ["alice", "bob"]
    assert await leaderboard.get(fetch) == ["alice", "bob"]

    fetch.assert_awaited_once()
    assert cache.describe("leaderboard:top10")["ttl"] == 300_000

    clock.advance(300_001)
    await leaderboard.get(fetch)
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_namespace_invalidate_forces_refetch(cache) -> None:
    question = CacheNamespace(cache, "daily_question", "question:daily", ttl_ms=86_400_000)
    fetch = AsyncMock(side_effect=["q1", "q2"])

    assert await question.get(fetch) == "q1"
    assert question.invalidate() is True
    assert question.invalidate() is False
    assert await question.get(fetch) == "q2"


@pytest.mark.asyncio
async def test_namespace_suffix_keys_are_independent(cache) -> None:
    profiles = CacheNamespace(cache, "member_profile", "member:profile", ttl_ms=600_000)

    await profiles.get(AsyncMock(return_value={"id": 1}), suffix=1)
    await profiles.get(AsyncMock(return_value={"id": 2}), suffix=2)

    assert profiles.key_for(1) == "member:profile:1"
    assert cache.get("member:profile:1") == {"id": 1}
    assert cache.get("member:profile:2") == {"id": 2}

    profiles.invalidate(suffix=1)
    assert "member:profile:1" not in cache
    assert "member:profile:2" in cache


def test_build_namespaces_defaults(cache) -> None:
    namespaces = build_namespaces(cache, CacheSettings())

    assert set(namespaces) == {"leaderboard", "daily_question", "terminology", "member_profile"}
    assert namespaces["leaderboard"].key == "leaderboard:top10"
    assert namespaces["leaderboard"].ttl_ms == 300_000
    assert namespaces["terminology"].ttl_ms == 86_400_000
    assert all(ns.cache is cache for ns in namespaces.values())


def test_build_namespaces_from_config(cache) -> None:
    settings = CacheSettings(
        {
            "default_ttl_ms": 1234,
            "namespaces": {
                "leaderboard": {"ttl_ms": 60_000},
                "analytics": {"key": "analytics:daily-activity"},
                "broken": "not a mapping",
            },
        }
    )

    namespaces = build_namespaces(cache, settings)

    assert namespaces["leaderboard"].key == "leaderboard:top10"
    assert namespaces["leaderboard"].ttl_ms == 60_000
    assert namespaces["analytics"].key == "analytics:daily-activity"
    assert namespaces["analytics"].ttl_ms == 1234
    assert "broken" not in namespaces
