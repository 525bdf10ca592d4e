"""
Per-user, per-command cooldowns with escalating penalties.

Cooldowns live in a two-level map ``user_id -> command_name -> CooldownRecord``.
Every denied attempt during a window bumps the record's violation count; the next
allowed invocation starts a window lengthened by ``violations * escalation_step_ms``
and resets the count. Escalation therefore applies to exactly one following window.
"""

from __future__ import annotations

import math
from typing import Dict, Hashable, Mapping, Optional

from belix.configuration.throttle_settings import (
    DEFAULT_COMMAND_COOLDOWN_MS,
    DEFAULT_COOLDOWN_CLEANUP_INTERVAL_MS,
    DEFAULT_ESCALATION_STEP_MS,
    RateLimitSettings,
)
from belix.datatypes.rate_limit_datatypes import CooldownRecord, CooldownResult, CooldownStats
from belix.scheduler.sweep_scheduler import PeriodicSweeper
from belix.util.clock import Clock, now_ms
from belix.util.logger import get_logger

logger = get_logger("cooldown_manager")


class CommandCooldownManager:
    """
    Tracks command cooldowns for every user.

    Args:
        default_cooldown_ms: Cooldown used when neither the caller nor
            ``command_cooldowns`` provides one.
        command_cooldowns: Per-command cooldowns in milliseconds.
        escalation_step_ms: Extra cooldown per denied attempt in the previous window.
        cleanup_interval_ms: Interval of the background sweep.
        clock: Millisecond clock; defaults to the wall clock.
    """

    def __init__(
        self,
        default_cooldown_ms: float = DEFAULT_COMMAND_COOLDOWN_MS,
        command_cooldowns: Optional[Mapping[str, float]] = None,
        escalation_step_ms: float = DEFAULT_ESCALATION_STEP_MS,
        cleanup_interval_ms: float = DEFAULT_COOLDOWN_CLEANUP_INTERVAL_MS,
        clock: Clock = now_ms,
    ) -> None:
        self.cooldowns: Dict[Hashable, Dict[str, CooldownRecord]] = {}
        self.default_cooldown_ms = default_cooldown_ms
        self.command_cooldowns: Dict[str, float] = dict(command_cooldowns or {})
        self.escalation_step_ms = escalation_step_ms
        self.cleanup_interval_ms = cleanup_interval_ms
        self._clock = clock
        self._sweeper = PeriodicSweeper("cooldowns", self.sweep, cleanup_interval_ms / 1000.0)

    @classmethod
    def from_settings(cls, settings: RateLimitSettings, clock: Clock = now_ms) -> "CommandCooldownManager":
        commands = {
            name: settings.cooldown_for(name)
            for name in settings.command_cooldowns
            if name != "default"
        }
        return cls(
            default_cooldown_ms=settings.default_command_cooldown_ms,
            command_cooldowns=commands,
            escalation_step_ms=settings.escalation_step_ms,
            cleanup_interval_ms=settings.cooldown_cleanup_interval_ms,
            clock=clock,
        )

    def start(self) -> None:
        self._sweeper.start()

    async def close(self) -> None:
        await self._sweeper.shutdown()

    def cooldown_for(self, command_name: str) -> float:
        """Return the configured base cooldown of ``command_name``."""
        return self.command_cooldowns.get(command_name, self.default_cooldown_ms)

    def check(
        self,
        user_id: Hashable,
        command_name: str,
        base_cooldown_ms: Optional[float] = None,
    ) -> CooldownResult:
        """
        Decide whether ``user_id`` may run ``command_name`` now.

        Args:
            user_id: Discord user ID.
            command_name: Slash command name.
            base_cooldown_ms: Cooldown before escalation; defaults to the
                configured cooldown of the command.

        Returns:
            CooldownResult: ``allowed=False`` with ``retry_after_seconds`` and the
            current ``violation_count`` while the cooldown is active, otherwise
            ``allowed=True`` with the length of the window just started.
        """
        base = self.cooldown_for(command_name) if base_cooldown_ms is None else base_cooldown_ms
        now = self._clock()
        user_cooldowns = self.cooldowns.setdefault(user_id, {})
        record = user_cooldowns.get(command_name)

        if record is not None and now < record.expires_at:
            record.violation_count += 1
            retry_after = math.ceil((record.expires_at - now) / 1000)
            logger.warning(
                "[COOLDOWN] user=%s command=%s retry_after=%ss violations=%d",
                user_id, command_name, retry_after, record.violation_count,
            )
            return CooldownResult(
                allowed=False,
                retry_after_seconds=retry_after,
                violation_count=record.violation_count,
            )

        prior_violations = record.violation_count if record is not None else 0
        cooldown_ms = base + prior_violations * self.escalation_step_ms
        user_cooldowns[command_name] = CooldownRecord(expires_at=now + cooldown_ms)
        if prior_violations:
            logger.debug(
                "[COOLDOWN] Escalated %s for user=%s to %sms after %d violations",
                command_name, user_id, cooldown_ms, prior_violations,
            )
        return CooldownResult(allowed=True, cooldown_ms=cooldown_ms)

    def reset(self, user_id: Hashable, command_name: str) -> bool:
        """Drop the cooldown of ``command_name`` for ``user_id`` (admin override)."""
        user_cooldowns = self.cooldowns.get(user_id)
        if user_cooldowns is None or user_cooldowns.pop(command_name, None) is None:
            return False
        if not user_cooldowns:
            del self.cooldowns[user_id]
        logger.info("[COOLDOWN] Reset %s for user=%s", command_name, user_id)
        return True

    def get_record(self, user_id: Hashable, command_name: str) -> Optional[CooldownRecord]:
        return self.cooldowns.get(user_id, {}).get(command_name)

    def sweep(self) -> int:
        """
        Remove expired cooldowns, then users left without any.

        Returns:
            int: Number of users removed.
        """
        now = self._clock()
        expired_users = []
        for user_id, commands in self.cooldowns.items():
            expired = [name for name, record in commands.items() if now >= record.expires_at]
            for name in expired:
                del commands[name]
            if not commands:
                expired_users.append(user_id)

        for user_id in expired_users:
            del self.cooldowns[user_id]

        if expired_users:
            logger.debug(
                "[COOLDOWN] Sweep removed %d users, %d still tracked",
                len(expired_users), len(self.cooldowns),
            )
        return len(expired_users)

    def get_stats(self) -> CooldownStats:
        return CooldownStats(
            total_users=len(self.cooldowns),
            total_active_users=sum(1 for commands in self.cooldowns.values() if commands),
        )
