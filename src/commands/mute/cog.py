"""
Covenant Bot - Mute Cog
=======================

Manual mute and unmute commands. Admin only.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission, get_config
from src.core.constants import MAX_MUTE_MINUTES, MIN_MUTE_MINUTES
from src.core.errors import CovenantError
from src.utils.dm_helpers import send_notice_dm
from src.utils.footer import set_footer
from src.utils.interaction import respond_error
from src.utils.time_format import format_duration, format_ms_timestamp, now_ms
from src.utils.validators import Validators

if TYPE_CHECKING:
    from src.bot import CovenantBot


@app_commands.guild_only()
class MuteCog(commands.Cog):
    """
    Moderation commands for muting and unmuting members.

    DESIGN:
        Mutes are Discord timeouts. The mute record is written before
        the timeout is applied so the scheduler can always find it, and
        removed again if Discord refuses the timeout.
    """

    def __init__(self, bot: "CovenantBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.store = bot.store

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_admin_permission(interaction, self.config.admin_role_id)

    # =========================================================================
    # /mute
    # =========================================================================

    @app_commands.command(name="mute", description="Mute a member for a number of minutes")
    @app_commands.describe(
        user="Member to mute",
        mute_duration=f"Duration in minutes ({MIN_MUTE_MINUTES}-{MAX_MUTE_MINUTES})",
        reason="Reason for the mute",
    )
    async def mute(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        mute_duration: app_commands.Range[int, MIN_MUTE_MINUTES, MAX_MUTE_MINUTES],
        reason: Optional[str] = None,
    ) -> None:
        guild = interaction.guild
        try:
            minutes = Validators.validate_mute_duration(mute_duration)
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        reason = Validators.validate_reason(reason)
        member = guild.get_member(user.id)

        if member is None:
            await interaction.response.send_message("❌ That member isn't in this server!", ephemeral=True)
            return

        if not Validators.can_moderate(guild, member, "moderate_members"):
            await interaction.response.send_message("❌ I can't mute this member!", ephemeral=True)
            return

        await interaction.response.defer()

        current = now_ms()
        record = self.store.add_mute(
            user_id=member.id,
            guild_id=guild.id,
            moderator_id=interaction.user.id,
            reason=reason,
            duration_minutes=minutes,
            now_ms=current,
        )

        try:
            await member.timeout(timedelta(minutes=minutes), reason=f"{interaction.user}: {reason}")
        except discord.HTTPException as e:
            self.store.remove_mute(member.id)
            logger.error("Mute Failed", [
                ("User", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            await interaction.followup.send(
                "❌ Failed to mute the member! Check the bot's permissions.",
                ephemeral=True,
            )
            return

        await send_notice_dm(
            member,
            title="🔇 You've been muted",
            color=EmbedColors.MUTE,
            context="Mute DM",
            guild=guild,
            moderator=interaction.user,
            reason=reason,
            description=f"You were muted in **{guild.name}**.",
            fields=[
                ("Duration", format_duration(minutes)),
                ("Ends", format_ms_timestamp(record["unmuteTime"])),
            ],
        )

        logger.tree("Member Muted", [
            ("User", f"{member} ({member.id})"),
            ("Moderator", str(interaction.user)),
            ("Duration", format_duration(minutes)),
            ("Reason", reason[:50]),
        ], emoji="🔇")

        embed = discord.Embed(title="🔇 Member Muted", color=EmbedColors.MUTE)
        embed.add_field(name="Member", value=member.mention, inline=True)
        embed.add_field(name="Moderator", value=interaction.user.mention, inline=True)
        embed.add_field(name="Duration", value=format_duration(minutes), inline=True)
        embed.add_field(name="Reason", value=reason, inline=False)
        embed.timestamp = discord.utils.utcnow()
        set_footer(embed)
        await interaction.followup.send(embed=embed)

    # =========================================================================
    # /unmute
    # =========================================================================

    @app_commands.command(name="unmute", description="Lift a member's mute")
    @app_commands.describe(user="Member to unmute")
    async def unmute(self, interaction: discord.Interaction, user: discord.User) -> None:
        guild = interaction.guild
        member = guild.get_member(user.id)

        if member is None:
            await interaction.response.send_message("❌ That member isn't in this server!", ephemeral=True)
            return

        if not member.is_timed_out():
            await interaction.response.send_message("❌ This member isn't muted!", ephemeral=True)
            return

        await interaction.response.defer()

        try:
            await member.timeout(None, reason=f"Unmuted by {interaction.user}")
        except discord.HTTPException as e:
            logger.error("Unmute Failed", [
                ("User", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            await interaction.followup.send(
                "❌ Failed to unmute the member! Check the bot's permissions.",
                ephemeral=True,
            )
            return

        self.store.remove_mute(member.id)

        await send_notice_dm(
            member,
            title="🔊 Your mute was lifted",
            color=EmbedColors.RELEASE,
            context="Unmute DM",
            guild=guild,
            moderator=interaction.user,
            description=f"A moderator lifted your mute in **{guild.name}**.",
        )

        logger.tree("Member Unmuted", [
            ("User", f"{member} ({member.id})"),
            ("Moderator", str(interaction.user)),
        ], emoji="🔊")

        embed = discord.Embed(title="🔊 Member Unmuted", color=EmbedColors.RELEASE)
        embed.add_field(name="Member", value=member.mention, inline=True)
        embed.add_field(name="Moderator", value=interaction.user.mention, inline=True)
        embed.timestamp = discord.utils.utcnow()
        set_footer(embed)
        await interaction.followup.send(embed=embed)


__all__ = ["MuteCog"]
