"""
Covenant Bot - Warn Cog
=======================

Warning commands. Admin only.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_admin_permission, get_config
from src.core.errors import CovenantError
from src.utils.interaction import respond_error

from .helpers import build_history_embed, build_warn_embed

if TYPE_CHECKING:
    from src.bot import CovenantBot


@app_commands.guild_only()
class WarnCog(commands.Cog):
    """Warning ledger commands."""

    def __init__(self, bot: "CovenantBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.ledger = bot.warning_ledger

    # =========================================================================
    # Permission Check
    # =========================================================================

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_admin_permission(interaction, self.config.admin_role_id)

    # =========================================================================
    # Commands
    # =========================================================================

    @app_commands.command(name="warn", description="Warn a member")
    @app_commands.describe(user="Member to warn", reason="Reason for the warning")
    async def warn(self, interaction: discord.Interaction, user: discord.User, reason: str) -> None:
        await interaction.response.defer()
        try:
            outcome = await self.ledger.add_warning(
                user=user,
                moderator=interaction.user,
                reason=reason,
                guild=interaction.guild,
            )
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        embed = build_warn_embed(user, interaction.user, outcome.warning["reason"], outcome)
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="check_warn", description="View a member's warning history")
    @app_commands.describe(user="Member to look up")
    async def check_warn(self, interaction: discord.Interaction, user: discord.User) -> None:
        record = self.ledger.get_or_create(user.id)

        if record["count"] == 0:
            await interaction.response.send_message(
                f"📋 {user} has no warnings.",
                ephemeral=True,
            )
            return

        embed = build_history_embed(user, record, interaction.guild)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="delete_warn", description="Revoke one of a member's warnings")
    @app_commands.describe(user="Member whose warning to revoke", warn_id="Warning ID from /check_warn")
    async def delete_warn(self, interaction: discord.Interaction, user: discord.User, warn_id: int) -> None:
        await interaction.response.defer(ephemeral=True)
        try:
            await self.ledger.delete_warning(user, warn_id, interaction.user, interaction.guild)
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        remaining = self.ledger.get_or_create(user.id)["count"]
        await interaction.followup.send(
            f"✅ Revoked warning `#{warn_id}` for {user} ({remaining} remaining). They have been notified.",
            ephemeral=True,
        )

    @app_commands.command(name="clear_all_warn", description="Clear all of a member's warnings")
    @app_commands.describe(user="Member whose warnings to clear")
    async def clear_all_warn(self, interaction: discord.Interaction, user: discord.User) -> None:
        await interaction.response.defer(ephemeral=True)
        cleared = await self.ledger.clear_all(user, interaction.user, interaction.guild)

        if cleared == 0:
            await interaction.followup.send(
                f"📋 {user} has no warnings to clear.",
                ephemeral=True,
            )
            return

        await interaction.followup.send(
            f"✅ Cleared all {cleared} warning(s) for {user}. They have been notified.",
            ephemeral=True,
        )


__all__ = ["WarnCog"]
