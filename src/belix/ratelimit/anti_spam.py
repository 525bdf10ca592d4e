"""Sliding-window message spam detection.

Each user has a deque of timestamps of admitted messages. A check first drops
timestamps older than the window, then flags the message if the remaining count
already reached the threshold. Flagged messages are not recorded, so a spammer
cannot keep the window alive with the very messages being rejected.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Hashable

from belix.configuration.throttle_settings import (
    DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
    DEFAULT_SPAM_MESSAGE_THRESHOLD,
    DEFAULT_SPAM_MUTE_DURATION_MS,
    DEFAULT_SPAM_TIME_WINDOW_MS,
    RateLimitSettings,
)
from belix.datatypes.rate_limit_datatypes import SpamCheckResult
from belix.scheduler.sweep_scheduler import PeriodicSweeper
from belix.util.clock import Clock, now_ms
from belix.util.logger import get_logger

logger = get_logger("anti_spam")

SPAM_REASON = "Too many messages"


class AntiSpamManager:
    """Detects users sending more than ``message_threshold`` messages per window."""

    def __init__(
        self,
        message_threshold: int = DEFAULT_SPAM_MESSAGE_THRESHOLD,
        time_window_ms: float = DEFAULT_SPAM_TIME_WINDOW_MS,
        auto_mute_ms: float = DEFAULT_SPAM_MUTE_DURATION_MS,
        cleanup_interval_ms: float = DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
        clock: Clock = now_ms,
    ) -> None:
        self.message_history: Dict[Hashable, Deque[float]] = {}
        self.message_threshold = message_threshold
        self.time_window_ms = time_window_ms
        self.auto_mute_ms = auto_mute_ms
        self._clock = clock
        self._sweeper = PeriodicSweeper("anti_spam", self.sweep, cleanup_interval_ms / 1000.0)

    @classmethod
    def from_settings(cls, settings: RateLimitSettings, clock: Clock = now_ms) -> "AntiSpamManager":
        return cls(
            message_threshold=settings.spam_message_threshold,
            time_window_ms=settings.spam_time_window_ms,
            auto_mute_ms=settings.spam_mute_duration_ms,
            cleanup_interval_ms=settings.spam_cleanup_interval_ms,
            clock=clock,
        )

    def start(self) -> None:
        self._sweeper.start()

    async def close(self) -> None:
        await self._sweeper.shutdown()

    def check_spam(self, user_id: Hashable) -> SpamCheckResult:
        """Record a message from ``user_id`` unless it exceeds the rate.

        Returns:
            SpamCheckResult: ``is_spamming=True`` with a suggested mute duration
            when the window is already full; the message is then not recorded.
        """
        now = self._clock()
        history = self.message_history.setdefault(user_id, deque())

        cutoff = now - self.time_window_ms
        while history and history[0] < cutoff:
            history.popleft()

        if len(history) >= self.message_threshold:
            logger.warning(
                "[ANTI-SPAM] Spam detected user=%s messages_in_window=%d window=%sms",
                user_id, len(history), self.time_window_ms,
            )
            return SpamCheckResult(is_spamming=True, reason=SPAM_REASON, mute_duration_ms=self.auto_mute_ms)

        history.append(now)
        return SpamCheckResult(is_spamming=False)

    def clear_history(self, user_id: Hashable) -> bool:
        """Forget every recorded message of ``user_id`` (e.g. when a mute is lifted)."""
        return self.message_history.pop(user_id, None) is not None

    def messages_in_window(self, user_id: Hashable) -> int:
        """Return how many admitted messages of ``user_id`` are inside the window."""
        cutoff = self._clock() - self.time_window_ms
        return sum(1 for ts in self.message_history.get(user_id, ()) if ts >= cutoff)

    def sweep(self) -> int:
        """Drop users whose recorded messages have all left the window."""
        cutoff = self._clock() - self.time_window_ms
        idle = [user_id for user_id, history in self.message_history.items() if not history or history[-1] < cutoff]
        for user_id in idle:
            del self.message_history[user_id]
        return len(idle)
