"""
Covenant Bot - Escalation Policy
================================

Maps a member's warning count to an enforcement action and applies it.

DESIGN:
    decide_action() is pure and checks the highest threshold first, so
    crossing several thresholds at once yields only the most severe
    action. apply() runs that single action against the member and
    never raises for Discord failures: escalation is a side effect of a
    warning, not a precondition for recording it.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional, Tuple

import discord

from src.core.logger import logger
from src.core.config import Config
from src.core.database import Store
from src.utils.time_format import format_duration, now_ms


# =============================================================================
# Types
# =============================================================================

class EscalationAction(str, Enum):
    """Enforcement action due at a warning count."""

    NONE = "none"
    MUTE = "mute"
    KICK = "kick"
    BAN = "ban"


@dataclass(frozen=True)
class Thresholds:
    """Warning counts at which each action becomes due."""

    mute: int = 3
    kick: int = 5
    ban: int = 7

    @classmethod
    def from_config(cls, config: Config) -> "Thresholds":
        return cls(
            mute=config.warn_mute_threshold,
            kick=config.warn_kick_threshold,
            ban=config.warn_ban_threshold,
        )


# =============================================================================
# Decision
# =============================================================================

def decide_action(count: int, thresholds: Thresholds) -> EscalationAction:
    """Action due at exactly this count, highest severity first."""
    if count >= thresholds.ban:
        return EscalationAction.BAN
    if count >= thresholds.kick:
        return EscalationAction.KICK
    if count >= thresholds.mute:
        return EscalationAction.MUTE
    return EscalationAction.NONE


# =============================================================================
# Policy
# =============================================================================

class EscalationPolicy:
    """
    Applies the action due for a warning count.

    Attributes:
        store: Store used to record automatic mutes.
        thresholds: Warning thresholds.
        auto_mute_minutes: Timeout length for automatic mutes.
    """

    def __init__(
        self,
        store: Store,
        thresholds: Optional[Thresholds] = None,
        auto_mute_minutes: int = 1440,
    ) -> None:
        self.store = store
        self.thresholds = thresholds or Thresholds()
        self.auto_mute_minutes = auto_mute_minutes

    def decide(self, count: int) -> EscalationAction:
        return decide_action(count, self.thresholds)

    async def apply(
        self,
        member: Optional[discord.Member],
        count: int,
        moderator_id: int,
    ) -> Tuple[EscalationAction, bool]:
        """
        Run the action due at count against member.

        Args:
            member: Member to act on, None if they left the guild.
            count: Warning count after the new warning.
            moderator_id: Moderator whose warning triggered this.

        Returns:
            Tuple of (action decided, whether it was applied).
        """
        action = self.decide(count)
        if action is EscalationAction.NONE:
            return action, False

        if member is None:
            logger.warning("Escalation Skipped", [
                ("Action", action.value),
                ("Count", str(count)),
                ("Reason", "Member not in guild"),
            ])
            return action, False

        reason = f"Auto-{action.value}: reached {count} warnings"

        try:
            if action is EscalationAction.BAN:
                await member.ban(reason=reason)
            elif action is EscalationAction.KICK:
                await member.kick(reason=reason)
            else:
                await member.timeout(timedelta(minutes=self.auto_mute_minutes), reason=reason)
                self.store.add_mute(
                    user_id=member.id,
                    guild_id=member.guild.id,
                    moderator_id=moderator_id,
                    reason=reason,
                    duration_minutes=self.auto_mute_minutes,
                    now_ms=now_ms(),
                )
        except discord.Forbidden:
            logger.warning("Escalation Forbidden", [
                ("Action", action.value),
                ("User", f"{member} ({member.id})"),
                ("Count", str(count)),
            ])
            return action, False
        except discord.HTTPException as e:
            logger.error("Escalation Failed", [
                ("Action", action.value),
                ("User", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            return action, False

        details = [
            ("Action", action.value.upper()),
            ("User", f"{member} ({member.id})"),
            ("Count", str(count)),
        ]
        if action is EscalationAction.MUTE:
            details.append(("Duration", format_duration(self.auto_mute_minutes)))
        logger.tree("Auto-Escalation Applied", details, emoji="🚨")

        return action, True


__all__ = ["EscalationAction", "Thresholds", "decide_action", "EscalationPolicy"]
