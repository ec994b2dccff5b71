"""
Covenant Bot - Mute Command Package
===================================

Timed mutes built on Discord timeouts.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import MuteCog

if TYPE_CHECKING:
    from src.bot import CovenantBot


async def setup(bot: "CovenantBot") -> None:
    """Load the Mute cog."""
    await bot.add_cog(MuteCog(bot))
    logger.tree("Mute Cog Loaded", [
        ("Commands", "/mute, /unmute"),
        ("Features", "timeouts, auto-unmute, DM notify"),
    ], emoji="🔇")


__all__ = ["MuteCog", "setup"]
