"""Leaderboard farming prevention.

Enforces a minimum interval between two point-earning actions of the same user.
This is a single-slot debounce per user, not a window: only the last allowed
action matters.
"""

from __future__ import annotations

import math
from typing import Dict, Hashable

from belix.configuration.throttle_settings import (
    DEFAULT_FARMING_MIN_INTERVAL_MS,
    DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
    RateLimitSettings,
)
from belix.datatypes.rate_limit_datatypes import FarmingCheckResult
from belix.scheduler.sweep_scheduler import PeriodicSweeper
from belix.util.clock import Clock, now_ms
from belix.util.logger import get_logger

logger = get_logger("farming_prevention")

FARMING_REASON = "Points cooldown active"


class LeaderboardFarmingPrevention:
    """Rejects point updates arriving less than ``min_interval_ms`` after the last one."""

    def __init__(
        self,
        min_interval_ms: float = DEFAULT_FARMING_MIN_INTERVAL_MS,
        cleanup_interval_ms: float = DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
        clock: Clock = now_ms,
    ) -> None:
        self.last_points_update: Dict[Hashable, float] = {}
        self.min_interval_ms = min_interval_ms
        self._clock = clock
        self._sweeper = PeriodicSweeper("farming", self.sweep, cleanup_interval_ms / 1000.0)

    @classmethod
    def from_settings(cls, settings: RateLimitSettings, clock: Clock = now_ms) -> "LeaderboardFarmingPrevention":
        return cls(
            min_interval_ms=settings.farming_min_interval_ms,
            cleanup_interval_ms=settings.farming_cleanup_interval_ms,
            clock=clock,
        )

    def start(self) -> None:
        self._sweeper.start()

    async def close(self) -> None:
        await self._sweeper.shutdown()

    def can_proceed(self, user_id: Hashable) -> FarmingCheckResult:
        """Return whether ``user_id`` may earn points now, recording the action if so."""
        now = self._clock()
        last_update = self.last_points_update.get(user_id)

        if last_update is not None:
            elapsed = now - last_update
            if elapsed < self.min_interval_ms:
                retry_after = math.ceil((self.min_interval_ms - elapsed) / 1000)
                logger.debug("[FARMING] Blocked user=%s retry_after=%ss", user_id, retry_after)
                return FarmingCheckResult(allowed=False, retry_after_seconds=retry_after, reason=FARMING_REASON)

        self.last_points_update[user_id] = now
        return FarmingCheckResult(allowed=True)

    def sweep(self) -> int:
        """Forget users whose last action is older than the minimum interval."""
        cutoff = self._clock() - self.min_interval_ms
        stale = [user_id for user_id, last in self.last_points_update.items() if last <= cutoff]
        for user_id in stale:
            del self.last_points_update[user_id]
        return len(stale)
