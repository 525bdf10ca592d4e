"""Wiring for the cache and rate-limit components.

``ThrottleService`` builds every component from one configuration, starts and
stops their background sweeps together, and produces the read-only snapshots the
monitoring endpoints expose. Each service instance is fully isolated, so tests
can create as many as they need.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from belix.cache.cache_handlers import CacheNamespace, build_namespaces
from belix.cache.cache_manager import CacheManager
from belix.configuration.app_configuration import AppConfig, app_config
from belix.ratelimit.anti_spam import AntiSpamManager
from belix.ratelimit.cooldown_manager import CommandCooldownManager
from belix.ratelimit.farming_prevention import LeaderboardFarmingPrevention
from belix.util.clock import Clock, now_ms
from belix.util.logger import get_logger

logger = get_logger("throttle_service")


class ThrottleService:
    """Owns one cache, one cooldown manager, one spam detector and one farming guard.

    Args:
        config: Application configuration; the shared ``app_config`` by default.
        clock: Millisecond clock handed to every component.
    """

    def __init__(self, config: Optional[AppConfig] = None, clock: Clock = now_ms) -> None:
        config = config or app_config
        cache_settings = config.cache_settings
        rate_limit_settings = config.rate_limit_settings

        self.cache = CacheManager.from_settings(cache_settings, clock=clock)
        self.namespaces: Dict[str, CacheNamespace] = build_namespaces(self.cache, cache_settings)
        self.cooldowns = CommandCooldownManager.from_settings(rate_limit_settings, clock=clock)
        self.anti_spam = AntiSpamManager.from_settings(rate_limit_settings, clock=clock)
        self.farming = LeaderboardFarmingPrevention.from_settings(rate_limit_settings, clock=clock)
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def namespace(self, name: str) -> CacheNamespace:
        """Return the configured cache namespace called ``name``.

        Raises:
            KeyError: If no namespace with that name is configured.
        """
        return self.namespaces[name]

    def start(self) -> None:
        """Start every background sweep. Must run inside the bot's event loop."""
        if self._started:
            logger.warning("[THROTTLE] Service already started")
            return
        self.cache.start()
        self.cooldowns.start()
        self.anti_spam.start()
        self.farming.start()
        self._started = True
        logger.info("[THROTTLE] Cache and rate-limit sweeps started")

    async def shutdown(self) -> None:
        """Stop every background sweep and drop cached values."""
        await asyncio.gather(
            self.cache.close(),
            self.cooldowns.close(),
            self.anti_spam.close(),
            self.farming.close(),
        )
        self.cache.clear()
        self._started = False
        logger.info("[THROTTLE] Shutdown complete")

    def invalidate(self, key: str) -> bool:
        """Delete one cache key on behalf of an admin request."""
        removed = self.cache.delete(key)
        logger.info("[THROTTLE] Cache invalidated key=%s removed=%s", key, removed)
        return removed

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "general": self.cache.get_stats().as_dict(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of cache and cooldown metrics for the ``/metrics`` endpoint."""
        return {
            "cache": self.cache.get_stats().as_dict(),
            "rate_limiting": {
                "command_cooldowns": self.cooldowns.get_stats().as_dict(),
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
