"""
Covenant Bot - Marriage Command Package
=======================================

Consent-based proposals, marriages and divorces.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import MarriageCog
from .views import setup_marriage_views

if TYPE_CHECKING:
    from src.bot import CovenantBot


async def setup(bot: "CovenantBot") -> None:
    """Load the Marriage cog."""
    await bot.add_cog(MarriageCog(bot))
    logger.tree("Marriage Cog Loaded", [
        ("Commands", "/propose, /marriage, /divorce"),
        ("Divorce Policy", "unilateral" if bot.relationships.unilateral_divorce else "mutual consent"),
    ], emoji="💍")


__all__ = ["MarriageCog", "setup", "setup_marriage_views"]
