"""
Rate limiting for BeliX.

- **cooldown_manager.py**: ``CommandCooldownManager``, per-user per-command
  cooldowns whose next window grows with the number of attempts made during
  the current one.
- **anti_spam.py**: ``AntiSpamManager``, a per-user sliding window over admitted
  message timestamps.
- **farming_prevention.py**: ``LeaderboardFarmingPrevention``, a minimum interval
  between two point-earning actions of the same user.

All three return tagged results (see ``belix.datatypes.rate_limit_datatypes``)
rather than raising, and each owns a background sweep started with ``start()``
and stopped with ``close()``.
"""

from belix.ratelimit.anti_spam import AntiSpamManager
from belix.ratelimit.cooldown_manager import CommandCooldownManager
from belix.ratelimit.farming_prevention import LeaderboardFarmingPrevention

__all__ = ["AntiSpamManager", "CommandCooldownManager", "LeaderboardFarmingPrevention"]
