"""
Covenant Bot - Registration Command Package
===========================================

Free-text registration ingestion into a Google spreadsheet.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import RegistrationCog

if TYPE_CHECKING:
    from src.bot import CovenantBot


async def setup(bot: "CovenantBot") -> None:
    """Load the Registration cog."""
    await bot.add_cog(RegistrationCog(bot))
    logger.tree("Registration Cog Loaded", [
        ("Commands", "/registration_stats"),
        ("Listener", "enabled" if bot.registration else "disabled (sheet not configured)"),
    ], emoji="📝")


__all__ = ["RegistrationCog", "setup"]
