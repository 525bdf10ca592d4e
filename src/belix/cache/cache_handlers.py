"""Named cache keys with a fixed default TTL.

A namespace is configuration, not state: it binds a key (and TTL) onto a shared
:class:`CacheManager` so feature code can write ``await leaderboard.get(fetch)``
and ``leaderboard.invalidate()`` without repeating key strings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from belix.cache.cache_manager import CacheManager, ComputeFn
from belix.configuration.throttle_settings import CacheSettings
from belix.util.logger import get_logger

logger = get_logger("cache_handlers")


class CacheNamespace:
    """A fixed cache key with its own default TTL.

    Args:
        cache: The cache the key lives in.
        name: Namespace name used in logs (e.g. ``"leaderboard"``).
        key: Base cache key (e.g. ``"leaderboard:top10"``).
        ttl_ms: TTL applied when this namespace stores a value.
    """

    def __init__(self, cache: CacheManager, name: str, key: str, ttl_ms: float) -> None:
        self.cache = cache
        self.name = name
        self.key = key
        self.ttl_ms = ttl_ms

    def key_for(self, suffix: Optional[Any] = None) -> str:
        """Return the base key, or ``<key>:<suffix>`` for per-item entries."""
        return self.key if suffix is None else f"{self.key}:{suffix}"

    async def get(self, fetch_fn: ComputeFn, suffix: Optional[Any] = None) -> Any:
        return await self.cache.get_or_compute(self.key_for(suffix), fetch_fn, self.ttl_ms)

    def invalidate(self, suffix: Optional[Any] = None) -> bool:
        removed = self.cache.delete(self.key_for(suffix))
        logger.info("[CACHE] %s cache invalidated", self.name)
        return removed

    def __repr__(self) -> str:
        return f"CacheNamespace(name={self.name!r}, key={self.key!r}, ttl_ms={self.ttl_ms!r})"


def build_namespaces(cache: CacheManager, settings: CacheSettings) -> Dict[str, CacheNamespace]:
    """Create one :class:`CacheNamespace` per configured namespace."""
    return {
        name: CacheNamespace(cache, name, spec["key"], spec["ttl_ms"])
        for name, spec in settings.namespaces.items()
    }
