from __future__ import annotations

from typing import Any, Dict

from belix.util.logger import get_logger

logger = get_logger("throttle_settings")

# Defaults in milliseconds
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_CACHE_CLEANUP_INTERVAL_MS = 10 * 60 * 1000
DEFAULT_COMMAND_COOLDOWN_MS = 5000
DEFAULT_ESCALATION_STEP_MS = 1000
DEFAULT_COOLDOWN_CLEANUP_INTERVAL_MS = 60 * 1000
DEFAULT_SPAM_MESSAGE_THRESHOLD = 5
DEFAULT_SPAM_TIME_WINDOW_MS = 5000
DEFAULT_SPAM_MUTE_DURATION_MS = 30 * 1000
DEFAULT_FARMING_MIN_INTERVAL_MS = 30 * 1000
DEFAULT_GUARD_CLEANUP_INTERVAL_MS = 60 * 1000

DEFAULT_NAMESPACES: Dict[str, Dict[str, Any]] = {
    "leaderboard": {"key": "leaderboard:top10", "ttl_ms": 5 * 60 * 1000},
    "daily_question": {"key": "question:daily", "ttl_ms": 24 * 60 * 60 * 1000},
    "terminology": {"key": "terminology:daily", "ttl_ms": 24 * 60 * 60 * 1000},
    "member_profile": {"key": "member:profile", "ttl_ms": 10 * 60 * 1000},
}


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key, {})
    return value if isinstance(value, dict) else {}


def coerce_duration(value: Any, default: float, name: str, allow_zero: bool = False) -> float:
    """Return ``value`` as a positive number, or ``default`` if it is not one.

    Zero is accepted only with ``allow_zero``, for settings where it means
    "disabled" (no escalation, no cooldown). Booleans are rejected even though
    they are ints, since ``true`` in YAML is never a meaningful duration.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning("[CONFIG] %s=%r is not a number, using %s", name, value, default)
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("[CONFIG] %s=%r is not a number, using %s", name, value, default)
        return default
    if number < 0 or (number == 0 and not allow_zero):
        logger.warning("[CONFIG] %s=%r must be positive, using %s", name, value, default)
        return default
    return number


class CacheSettings:
    """Typed accessors for the ``caching`` section of the app configuration."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    @property
    def default_ttl_ms(self) -> float:
        return coerce_duration(self.data.get("default_ttl_ms"), DEFAULT_CACHE_TTL_MS, "caching.default_ttl_ms")

    @property
    def cleanup_interval_ms(self) -> float:
        return coerce_duration(
            self.data.get("cleanup_interval_ms"),
            DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
            "caching.cleanup_interval_ms",
        )

    @property
    def namespaces(self) -> Dict[str, Dict[str, Any]]:
        """Return the named cache keys merged over the built-in defaults.

        Each value is a mapping with ``key`` (str) and ``ttl_ms`` (number).
        Entries in the file override or extend the defaults; malformed
        entries are skipped with a warning.
        """
        merged: Dict[str, Dict[str, Any]] = {name: dict(spec) for name, spec in DEFAULT_NAMESPACES.items()}
        configured = _section(self.data, "namespaces")
        for name, spec in configured.items():
            if not isinstance(spec, dict):
                logger.warning("[CONFIG] Ignoring malformed cache namespace %r", name)
                continue
            base = merged.get(name, {"key": str(name), "ttl_ms": self.default_ttl_ms})
            key = spec.get("key", base["key"])
            ttl_ms = coerce_duration(spec.get("ttl_ms"), base["ttl_ms"], f"caching.namespaces.{name}.ttl_ms")
            merged[str(name)] = {"key": str(key), "ttl_ms": ttl_ms}
        return merged


class RateLimitSettings:
    """Typed accessors for the ``rate_limiting`` section of the app configuration."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    # --------------------------
    # Command cooldowns
    # --------------------------
    @property
    def command_cooldowns(self) -> Dict[str, Any]:
        return _section(self.data, "commands")

    @property
    def default_command_cooldown_ms(self) -> float:
        return coerce_duration(
            self.command_cooldowns.get("default"),
            DEFAULT_COMMAND_COOLDOWN_MS,
            "rate_limiting.commands.default",
            allow_zero=True,
        )

    def cooldown_for(self, command_name: str) -> float:
        """Return the configured cooldown for ``command_name`` or the default."""
        default = self.default_command_cooldown_ms
        return coerce_duration(
            self.command_cooldowns.get(command_name),
            default,
            f"rate_limiting.commands.{command_name}",
            allow_zero=True,
        )

    @property
    def escalation_step_ms(self) -> float:
        return coerce_duration(
            self.data.get("escalation_step_ms"),
            DEFAULT_ESCALATION_STEP_MS,
            "rate_limiting.escalation_step_ms",
            allow_zero=True,
        )

    @property
    def cooldown_cleanup_interval_ms(self) -> float:
        return coerce_duration(
            self.data.get("cooldown_cleanup_interval_ms"),
            DEFAULT_COOLDOWN_CLEANUP_INTERVAL_MS,
            "rate_limiting.cooldown_cleanup_interval_ms",
        )

    # --------------------------
    # Anti-spam
    # --------------------------
    @property
    def spam_message_threshold(self) -> int:
        value = coerce_duration(
            _section(self.data, "anti_spam").get("message_threshold"),
            DEFAULT_SPAM_MESSAGE_THRESHOLD,
            "rate_limiting.anti_spam.message_threshold",
        )
        return int(value)

    @property
    def spam_time_window_ms(self) -> float:
        return coerce_duration(
            _section(self.data, "anti_spam").get("time_window_ms"),
            DEFAULT_SPAM_TIME_WINDOW_MS,
            "rate_limiting.anti_spam.time_window_ms",
        )

    @property
    def spam_mute_duration_ms(self) -> float:
        return coerce_duration(
            _section(self.data, "anti_spam").get("auto_mute_duration_ms"),
            DEFAULT_SPAM_MUTE_DURATION_MS,
            "rate_limiting.anti_spam.auto_mute_duration_ms",
        )

    @property
    def spam_cleanup_interval_ms(self) -> float:
        return coerce_duration(
            _section(self.data, "anti_spam").get("cleanup_interval_ms"),
            DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
            "rate_limiting.anti_spam.cleanup_interval_ms",
        )

    # --------------------------
    # Farming prevention
    # --------------------------
    @property
    def farming_min_interval_ms(self) -> float:
        return coerce_duration(
            _section(self.data, "farming_prevention").get("min_interval_ms"),
            DEFAULT_FARMING_MIN_INTERVAL_MS,
            "rate_limiting.farming_prevention.min_interval_ms",
        )

    @property
    def farming_cleanup_interval_ms(self) -> float:
        return coerce_duration(
            _section(self.data, "farming_prevention").get("cleanup_interval_ms"),
            DEFAULT_GUARD_CLEANUP_INTERVAL_MS,
            "rate_limiting.farming_prevention.cleanup_interval_ms",
        )
