"""
Covenant Bot - Ban Cog
======================

Kick and ban commands. Admin only.

DESIGN:
    The member is DMed before the action, since a kicked or banned
    member can no longer be reached through a shared server.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission, get_config
from src.utils.dm_helpers import send_notice_dm
from src.utils.footer import set_footer
from src.utils.validators import Validators

if TYPE_CHECKING:
    from src.bot import CovenantBot


def _action_embed(title: str, color: int, user: discord.abc.User, moderator: discord.abc.User, reason: str) -> discord.Embed:
    embed = discord.Embed(title=title, color=color)
    embed.add_field(name="Member", value=str(user), inline=True)
    embed.add_field(name="Moderator", value=moderator.mention, inline=True)
    embed.add_field(name="Reason", value=reason, inline=False)
    embed.timestamp = discord.utils.utcnow()
    set_footer(embed)
    return embed


@app_commands.guild_only()
class BanCog(commands.Cog):
    """Kick and ban commands."""

    def __init__(self, bot: "CovenantBot") -> None:
        self.bot = bot
        self.config = get_config()

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_admin_permission(interaction, self.config.admin_role_id)

    # =========================================================================
    # /kick
    # =========================================================================

    @app_commands.command(name="kick", description="Kick a member from the server")
    @app_commands.describe(user="Member to kick", reason="Reason for the kick")
    async def kick(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        guild = interaction.guild
        reason = Validators.validate_reason(reason)
        member = guild.get_member(user.id)

        if member is None:
            await interaction.response.send_message("❌ That member isn't in this server!", ephemeral=True)
            return

        if not Validators.can_moderate(guild, member, "kick_members"):
            await interaction.response.send_message("❌ I can't kick this member!", ephemeral=True)
            return

        await interaction.response.defer()

        await send_notice_dm(
            member,
            title="👢 You've been kicked",
            color=EmbedColors.KICK,
            context="Kick DM",
            guild=guild,
            moderator=interaction.user,
            reason=reason,
            description=f"You were kicked from **{guild.name}**. You may rejoin, but please follow the rules.",
        )

        try:
            await member.kick(reason=f"{interaction.user}: {reason}")
        except discord.HTTPException as e:
            logger.error("Kick Failed", [
                ("User", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            await interaction.followup.send(
                "❌ Failed to kick the member! Check the bot's permissions.",
                ephemeral=True,
            )
            return

        logger.tree("Member Kicked", [
            ("User", f"{member} ({member.id})"),
            ("Moderator", str(interaction.user)),
            ("Reason", reason[:50]),
        ], emoji="👢")

        await interaction.followup.send(
            embed=_action_embed("👢 Member Kicked", EmbedColors.KICK, member, interaction.user, reason)
        )

    # =========================================================================
    # /ban
    # =========================================================================

    @app_commands.command(name="ban", description="Ban a user from the server")
    @app_commands.describe(user="User to ban", reason="Reason for the ban")
    async def ban(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        guild = interaction.guild
        reason = Validators.validate_reason(reason)
        member = guild.get_member(user.id)

        # Users outside the guild can still be banned by id
        if member is not None and not Validators.can_moderate(guild, member, "ban_members"):
            await interaction.response.send_message("❌ I can't ban this member!", ephemeral=True)
            return

        await interaction.response.defer()

        await send_notice_dm(
            user,
            title="🔨 You've been banned",
            color=EmbedColors.BAN,
            context="Ban DM",
            guild=guild,
            moderator=interaction.user,
            reason=reason,
            description=f"You were banned from **{guild.name}**. Contact the server staff to appeal.",
        )

        try:
            await guild.ban(user, reason=f"{interaction.user}: {reason}")
        except discord.HTTPException as e:
            logger.error("Ban Failed", [
                ("User", f"{user} ({user.id})"),
                ("Error", str(e)[:100]),
            ])
            await interaction.followup.send(
                "❌ Failed to ban the user! Check the bot's permissions.",
                ephemeral=True,
            )
            return

        logger.tree("User Banned", [
            ("User", f"{user} ({user.id})"),
            ("Moderator", str(interaction.user)),
            ("Reason", reason[:50]),
        ], emoji="🔨")

        await interaction.followup.send(
            embed=_action_embed("🔨 User Banned", EmbedColors.BAN, user, interaction.user, reason)
        )


__all__ = ["BanCog"]
