"""
Covenant Bot - Registration Cog
===============================

Watches the registration channel and exposes /registration_stats.

DESIGN:
    Rejected messages (malformed or duplicate) get a short-lived reply
    and are deleted so the channel only holds valid registrations.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, get_config
from src.core.errors import CollaboratorFailure, CovenantError
from src.services.registration import Registration, RegistrationService
from src.utils.footer import set_footer
from src.utils.interaction import respond_error

if TYPE_CHECKING:
    from src.bot import CovenantBot


NOTICE_LIFETIME = 15  # seconds a rejection notice stays visible


class RegistrationCog(commands.Cog):
    """Registration ingestion into the spreadsheet."""

    def __init__(self, bot: "CovenantBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.service: Optional[RegistrationService] = bot.registration

    # =========================================================================
    # Listener
    # =========================================================================

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if self.service is None or message.author.bot or message.guild is None:
            return
        if message.channel.id != self.config.registration_channel_id:
            return

        display_name = getattr(message.author, "display_name", message.author.name)

        try:
            registration = await self.service.submit(display_name, message.author.id, message.content)
        except CollaboratorFailure as e:
            await self._notice(message, e.user_message, delete_original=False)
            return
        except CovenantError as e:
            await self._notice(message, e.user_message, delete_original=True)
            return

        try:
            await message.reply(f"✅ Registration received, {message.author.mention}!", mention_author=False)
        except discord.HTTPException as e:
            logger.warning("Registration Ack Failed", [("Error", str(e)[:100])])

        await self._post_report(message.author, display_name, registration)

    async def _notice(self, message: discord.Message, text: str, delete_original: bool) -> None:
        try:
            await message.channel.send(
                f"{message.author.mention} {text}",
                delete_after=NOTICE_LIFETIME,
            )
        except discord.HTTPException as e:
            logger.warning("Registration Notice Failed", [("Error", str(e)[:100])])

        if not delete_original:
            return
        try:
            await message.delete()
        except discord.HTTPException as e:
            logger.warning("Registration Cleanup Failed", [
                ("Message ID", str(message.id)),
                ("Error", str(e)[:100]),
            ])

    async def _post_report(self, author: discord.abc.User, display_name: str, registration: Registration) -> None:
        if not self.config.report_channel_id:
            return
        channel = self.bot.get_channel(self.config.report_channel_id)
        if channel is None:
            logger.warning("Report Channel Missing", [("Channel ID", str(self.config.report_channel_id))])
            return

        embed = discord.Embed(title="📝 New Registration", color=EmbedColors.REGISTRATION)
        embed.add_field(name="Member", value=f"{author.mention} ({display_name})", inline=False)
        embed.add_field(name="Profession", value=registration.profession, inline=True)
        embed.add_field(name="Level", value=str(registration.level), inline=True)
        embed.add_field(name="Power", value=f"{registration.power:,}", inline=True)
        embed.add_field(name="Available", value=registration.available, inline=False)
        embed.timestamp = discord.utils.utcnow()
        set_footer(embed)

        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning("Registration Report Failed", [("Error", str(e)[:100])])

    # =========================================================================
    # /registration_stats
    # =========================================================================

    @app_commands.command(name="registration_stats", description="Show registration totals")
    async def registration_stats(self, interaction: discord.Interaction) -> None:
        if self.service is None:
            await interaction.response.send_message("❌ Registration isn't enabled on this server.", ephemeral=True)
            return

        await interaction.response.defer(ephemeral=True)
        try:
            stats = await self.service.stats()
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        embed = discord.Embed(
            title="📊 Registration Stats",
            description=f"Total registrations: **{stats.total}**",
            color=EmbedColors.REGISTRATION,
        )
        for profession, count in list(stats.by_profession.items())[:25]:
            embed.add_field(name=profession, value=str(count), inline=True)
        set_footer(embed)

        await interaction.followup.send(embed=embed, ephemeral=True)


__all__ = ["RegistrationCog"]
