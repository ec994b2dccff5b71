"""
Covenant Bot - Ban Command Package
==================================

Kick and ban commands.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import BanCog

if TYPE_CHECKING:
    from src.bot import CovenantBot


async def setup(bot: "CovenantBot") -> None:
    """Load the Ban cog."""
    await bot.add_cog(BanCog(bot))
    logger.tree("Ban Cog Loaded", [
        ("Commands", "/kick, /ban"),
        ("Features", "DM before action"),
    ], emoji="🔨")


__all__ = ["BanCog", "setup"]
