"""
Covenant Bot - Warn Embed Helpers
=================================

Embed builders for warn command replies.
"""

from typing import Optional

import discord

from src.core.config import EmbedColors
from src.core.constants import WARN_HISTORY_LIMIT
from src.core.database import WarningRecord
from src.services.escalation import EscalationAction
from src.services.warning_ledger import WarnOutcome
from src.utils.footer import set_footer
from src.utils.time_format import format_timestamp


ESCALATION_LABELS = {
    EscalationAction.MUTE: "🔇 Auto-muted",
    EscalationAction.KICK: "👢 Auto-kicked",
    EscalationAction.BAN: "🔨 Auto-banned",
}


def build_warn_embed(
    user: discord.abc.User,
    moderator: discord.abc.User,
    reason: str,
    outcome: WarnOutcome,
) -> discord.Embed:
    """Public confirmation for /warn."""
    embed = discord.Embed(title="⚠️ Member Warned", color=EmbedColors.WARNING)
    embed.add_field(name="Member", value=user.mention, inline=True)
    embed.add_field(name="Moderator", value=moderator.mention, inline=True)
    embed.add_field(name="Reason", value=reason, inline=False)
    embed.add_field(name="Warning Count", value=str(outcome.count), inline=True)
    embed.add_field(name="Warning ID", value=f"`{outcome.warning['id']}`", inline=True)

    label = ESCALATION_LABELS.get(outcome.action)
    if label:
        status = label if outcome.action_applied else f"{label} (failed, check bot permissions)"
        embed.add_field(name="Escalation", value=status, inline=False)

    if not outcome.notification:
        embed.add_field(name="DM", value="Couldn't notify the member", inline=False)

    embed.timestamp = discord.utils.utcnow()
    set_footer(embed)
    return embed


def build_history_embed(
    user: discord.abc.User,
    record: WarningRecord,
    guild: Optional[discord.Guild],
) -> discord.Embed:
    """Most recent warnings for /check_warn, oldest of them first."""
    embed = discord.Embed(
        title=f"📋 Warnings for {user}",
        description=f"Total warnings: **{record['count']}**",
        color=EmbedColors.HISTORY,
    )
    embed.set_thumbnail(url=user.display_avatar.url)

    for warning in record["warnings"][-WARN_HISTORY_LIMIT:]:
        moderator = guild.get_member(int(warning["moderator"])) if guild else None
        moderator_name = moderator.display_name if moderator else "Unknown"
        embed.add_field(
            name=f"Warning #{warning['id']}",
            value=(
                f"**Reason:** {warning['reason']}\n"
                f"**Moderator:** {moderator_name}\n"
                f"**Time:** {format_timestamp(warning['timestamp'])}"
            ),
            inline=False,
        )

    total = len(record["warnings"])
    if total > WARN_HISTORY_LIMIT:
        set_footer(embed, f"Showing the latest {WARN_HISTORY_LIMIT} of {total} warnings")
    else:
        set_footer(embed)
    return embed


__all__ = ["build_warn_embed", "build_history_embed", "ESCALATION_LABELS"]
