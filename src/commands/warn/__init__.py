"""
Covenant Bot - Warn Command Package
===================================

Warning ledger commands with automatic escalation.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import WarnCog

if TYPE_CHECKING:
    from src.bot import CovenantBot


async def setup(bot: "CovenantBot") -> None:
    """Load the Warn cog."""
    await bot.add_cog(WarnCog(bot))
    logger.tree("Warn Cog Loaded", [
        ("Commands", "/warn, /check_warn, /delete_warn, /clear_all_warn"),
        ("Features", "DM notify, auto-escalation"),
    ], emoji="📋")


__all__ = ["WarnCog", "setup"]
