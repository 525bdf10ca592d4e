"""Discord-facing entry points into the rate-limit layer.

These helpers sit between event handlers and the throttle components: they run
the check, tell the user when something was blocked, and hand back a decision.
A failure to reply never changes the decision.
"""

from __future__ import annotations

import discord

from belix.datatypes.rate_limit_datatypes import FarmingCheckResult, SpamCheckResult
from belix.services.throttle_service import ThrottleService
from belix.util.logger import get_logger

logger = get_logger("guards")

SPAM_WARNING = "⏸️ You're sending messages too fast. Please slow down."
SPAM_WARNING_DELETE_AFTER = 10


def cooldown_message(retry_after_seconds: int) -> str:
    return f"⏱️ This command is on cooldown. Try again in **{retry_after_seconds}s**"


async def check_command_rate_limit(
    service: ThrottleService,
    ctx: discord.ApplicationContext,
    command_name: str,
    cooldown_ms: float | None = None,
) -> bool:
    """
    Run the command cooldown check for the invoking user.

    On denial an ephemeral notice with the retry delay is sent, through the
    followup webhook when the interaction was already deferred or answered.

    Parameters
    ----------
    service:
        Throttle service holding the cooldown manager.
    ctx:
        Application context of the slash command.
    command_name:
        Name the cooldown is tracked under.
    cooldown_ms:
        Base cooldown; the configured cooldown of ``command_name`` when omitted.

    Returns
    -------
    bool
        True if the command may run, False if it must stop without side effects.
    """
    result = service.cooldowns.check(ctx.author.id, command_name, cooldown_ms)
    if result.allowed:
        return True

    message = cooldown_message(result.retry_after_seconds or 0)
    try:
        if ctx.response.is_done():
            await ctx.followup.send(message, ephemeral=True)
        else:
            await ctx.respond(message, ephemeral=True)
    except discord.HTTPException as exc:
        logger.error("[GUARDS] Failed to send cooldown notice to user=%s: %s", ctx.author.id, exc)
    except Exception as exc:
        logger.error("[GUARDS] Unexpected error sending cooldown notice: %s", exc, exc_info=True)
    return False


async def check_message_spam(service: ThrottleService, message: discord.Message) -> SpamCheckResult:
    """Run the spam check for a received message and warn the author if flagged.

    Messages from bots are never counted.
    """
    if message.author.bot:
        return SpamCheckResult(is_spamming=False)

    result = service.anti_spam.check_spam(message.author.id)
    if not result.is_spamming:
        return result

    logger.warning(
        "[GUARDS] Spam from user=%s (%s) in channel=%s",
        message.author.id, message.author.name, message.channel.id,
    )
    try:
        await message.reply(SPAM_WARNING, mention_author=False, delete_after=SPAM_WARNING_DELETE_AFTER)
    except discord.HTTPException as exc:
        logger.error("[GUARDS] Failed to send spam warning: %s", exc)
    except Exception as exc:
        logger.error("[GUARDS] Unexpected error sending spam warning: %s", exc, exc_info=True)
    return result


def check_leaderboard_farming(service: ThrottleService, user_id: int) -> FarmingCheckResult:
    """Gate a points mutation; callers must not credit points when ``allowed`` is False."""
    return service.farming.can_proceed(user_id)
