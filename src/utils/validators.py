"""
Covenant Bot - Input Validators
===============================

Validation for moderator-supplied command input.

Features:
- Mute duration range checking
- Reason normalization with default placeholder and length cap
- Bot role hierarchy checks before moderating a member
"""

from typing import Optional

import discord

from src.core.logger import logger
from src.core.constants import DEFAULT_REASON, MAX_MUTE_MINUTES, MIN_MUTE_MINUTES
from src.core.errors import DurationOutOfRangeError


class Validators:
    """Input validation utilities"""

    REASON_MAX = 1024  # Discord embed field limit

    @staticmethod
    def validate_mute_duration(minutes: int) -> int:
        """
        Check a manual mute duration.

        Raises:
            DurationOutOfRangeError: outside 1..40320 minutes.
        """
        if not isinstance(minutes, int) or not MIN_MUTE_MINUTES <= minutes <= MAX_MUTE_MINUTES:
            raise DurationOutOfRangeError()
        return minutes

    @staticmethod
    def validate_reason(reason: Optional[str]) -> str:
        """Strip a reason, fall back to the placeholder, cap its length."""
        if not reason or not reason.strip():
            return DEFAULT_REASON

        reason = reason.strip()
        if len(reason) > Validators.REASON_MAX:
            logger.warning("Reason Truncated", [
                ("Length", str(len(reason))),
                ("Limit", str(Validators.REASON_MAX)),
            ])
            reason = reason[: Validators.REASON_MAX - 3] + "..."
        return reason

    @staticmethod
    def can_moderate(guild: discord.Guild, member: discord.Member, permission: str) -> bool:
        """
        Whether the bot may act on member with the given permission.

        Args:
            guild: Guild the action happens in.
            member: Target member.
            permission: Permission flag name, e.g. "moderate_members".
        """
        me = guild.me
        if me is None or member.id == guild.owner_id or member.id == me.id:
            return False
        if not getattr(me.guild_permissions, permission, False):
            return False
        if permission == "moderate_members" and member.guild_permissions.administrator:
            return False
        return me.top_role > member.top_role


__all__ = ["Validators"]
