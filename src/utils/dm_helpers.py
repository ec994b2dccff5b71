"""
Covenant Bot - DM Helper Utilities
==================================

Centralized utilities for sending DMs to members with proper error handling.

Usage:
    from src.utils.dm_helpers import safe_send_dm, build_notice_embed

    result = await safe_send_dm(member, embed=my_embed, context="Warn DM")
    if not result:
        logger.debug("Warn DM Suppressed", [("Reason", result.reason)])

DESIGN:
    A DM is always best-effort. Closed DMs and HTTP failures are
    reported as a Suppressed result and never abort the action that
    triggered the notification.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import discord

from src.core.logger import logger
from src.utils.footer import set_footer


# =============================================================================
# Delivery Result
# =============================================================================

@dataclass(frozen=True)
class DeliveryResult:
    """
    Outcome of a best-effort DM.

    Truthy when delivered. A suppressed result carries the reason.
    """

    delivered: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "DeliveryResult":
        return cls(delivered=True)

    @classmethod
    def suppressed(cls, reason: str) -> "DeliveryResult":
        return cls(delivered=False, reason=reason)

    def __bool__(self) -> bool:
        return self.delivered


# =============================================================================
# Sending
# =============================================================================

async def safe_send_dm(
    user: Union[discord.User, discord.Member],
    embed: Optional[discord.Embed] = None,
    content: Optional[str] = None,
    context: Optional[str] = None,
) -> DeliveryResult:
    """
    Send a DM, reporting failure instead of raising.

    Args:
        user: The member or user to DM.
        embed: Optional embed to send.
        content: Optional text content to send.
        context: Label for logging (e.g., "Mute DM").

    Returns:
        DeliveryResult.ok() if sent, otherwise a suppressed result.
    """
    try:
        await user.send(content=content, embed=embed)
        return DeliveryResult.ok()
    except discord.Forbidden:
        # DMs closed; expected
        logger.debug("DM Blocked", [
            ("Context", context or "N/A"),
            ("User", str(user)),
        ])
        return DeliveryResult.suppressed("dms_closed")
    except discord.HTTPException as e:
        logger.warning("DM Send Failed", [
            ("Context", context or "N/A"),
            ("User", str(user)),
            ("Status", str(getattr(e, "status", "?"))),
            ("Error", str(e)[:100]),
        ])
        return DeliveryResult.suppressed("http_error")


# =============================================================================
# Embed Builders
# =============================================================================

def build_notice_embed(
    title: str,
    color: int,
    guild: Optional[discord.Guild] = None,
    moderator: Optional[Union[discord.User, discord.Member]] = None,
    reason: Optional[str] = None,
    fields: Optional[List[Tuple]] = None,
    description: Optional[str] = None,
) -> discord.Embed:
    """
    Build a standard notice embed for DMs and channel replies.

    Args:
        title: Embed title (e.g., "⚠️ You've been warned").
        color: Embed color (use EmbedColors constants).
        guild: Guild where the action happened, shown as "Server".
        moderator: Moderator who acted.
        reason: Reason for the action.
        fields: Extra fields as (name, value) or (name, value, inline).
        description: Optional description text.

    Returns:
        A discord.Embed ready to send.
    """
    embed = discord.Embed(title=title, color=color, description=description)

    if guild is not None:
        embed.add_field(name="Server", value=guild.name, inline=True)

    if moderator is not None:
        embed.add_field(name="Moderator", value=str(moderator), inline=True)

    for field in fields or []:
        if len(field) == 3:
            name, value, inline = field
        else:
            name, value = field
            inline = True
        embed.add_field(name=name, value=value, inline=inline)

    if reason is not None:
        embed.add_field(name="Reason", value=reason or "No reason provided", inline=False)

    embed.timestamp = discord.utils.utcnow()
    set_footer(embed)
    return embed


async def send_notice_dm(
    user: Union[discord.User, discord.Member],
    title: str,
    color: int,
    context: Optional[str] = None,
    **embed_kwargs,
) -> DeliveryResult:
    """Build a notice embed and DM it in one call."""
    embed = build_notice_embed(title=title, color=color, **embed_kwargs)
    return await safe_send_dm(user, embed=embed, context=context)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "DeliveryResult",
    "safe_send_dm",
    "build_notice_embed",
    "send_notice_dm",
]
