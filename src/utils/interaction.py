"""
Covenant Bot - Interaction Utilities
===================================

Shared helpers for Discord interaction handling.

Provides safe_respond() so callers don't repeat the is_done() check
between an initial response and a followup.
"""

from typing import Any, Optional, Union

import discord

from src.core.logger import logger
from src.core.errors import CovenantError


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    view: Optional[discord.ui.View] = None,
    ephemeral: bool = True,
) -> Optional[Union[discord.InteractionMessage, discord.WebhookMessage]]:
    """
    Respond to an interaction whether or not it was already answered.

    Returns:
        The sent message if one is available, None otherwise.
    """
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view

    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(**kwargs)
            return None
        return await interaction.followup.send(**kwargs)
    except discord.HTTPException as e:
        logger.warning("Interaction Response Failed", [
            ("User", str(interaction.user)),
            ("Error", str(e)[:100]),
        ])
        return None


async def respond_error(interaction: discord.Interaction, error: CovenantError) -> None:
    """Report an expected failure to the invoking user, ephemerally."""
    logger.debug("Command Rejected", [
        ("User", str(interaction.user)),
        ("Error", type(error).__name__),
    ])
    await safe_respond(interaction, error.user_message, ephemeral=True)


__all__ = ["safe_respond", "respond_error"]
