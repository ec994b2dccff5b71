"""
Covenant Bot - Embed Footer Utility
===================================

Centralized footer for all embeds.
"""

from typing import Optional

import discord


# =============================================================================
# Constants
# =============================================================================

FOOTER_TEXT = "Covenant Bot"
"""Footer text displayed on user-facing embeds."""


# =============================================================================
# Footer Functions
# =============================================================================

def set_footer(embed: discord.Embed, text: Optional[str] = None) -> discord.Embed:
    """
    Set the standard footer on an embed.

    Args:
        embed: Embed to modify.
        text: Extra text shown before the standard footer.

    Returns:
        The same embed, for chaining.
    """
    footer = f"{text} • {FOOTER_TEXT}" if text else FOOTER_TEXT
    embed.set_footer(text=footer)
    return embed


__all__ = ["FOOTER_TEXT", "set_footer"]
