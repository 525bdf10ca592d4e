"""
Result and record types for the rate-limit components.

Denials are ordinary return values: callers branch on ``allowed`` /
``is_spamming`` on every invocation, so none of these outcomes is an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(slots=True)
class CooldownRecord:
    """Cooldown state for one (user, command) pair.

    Attributes:
        expires_at: Epoch milliseconds at which the command becomes available again.
        violation_count: Denied attempts made during the current window.
    """
    expires_at: float
    violation_count: int = 0


@dataclass(frozen=True, slots=True)
class CooldownResult:
    """Outcome of :meth:`CommandCooldownManager.check`.

    Attributes:
        allowed: Whether the command may run.
        retry_after_seconds: Whole seconds until the window ends (denials only).
        violation_count: Denied attempts so far in this window (denials only).
        cooldown_ms: Length of the window that was just started (allowed only).
    """
    allowed: bool
    retry_after_seconds: Optional[int] = None
    violation_count: Optional[int] = None
    cooldown_ms: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"allowed": self.allowed}
        if self.retry_after_seconds is not None:
            payload["retry_after"] = self.retry_after_seconds
        if self.violation_count is not None:
            payload["violations"] = self.violation_count
        return payload


@dataclass(frozen=True, slots=True)
class SpamCheckResult:
    """Outcome of :meth:`AntiSpamManager.check_spam`."""
    is_spamming: bool
    reason: Optional[str] = None
    mute_duration_ms: Optional[float] = None


@dataclass(frozen=True, slots=True)
class FarmingCheckResult:
    """Outcome of :meth:`LeaderboardFarmingPrevention.can_proceed`."""
    allowed: bool
    retry_after_seconds: Optional[int] = None
    reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CooldownStats:
    """Monitoring snapshot of the cooldown manager."""
    total_users: int
    total_active_users: int

    def as_dict(self) -> Dict[str, int]:
        return {"totalUsers": self.total_users, "totalActiveUsers": self.total_active_users}
