"""
Covenant Bot - Marriage Cog
===========================

Public relationship commands: /propose, /marriage and /divorce.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, get_config
from src.core.errors import CovenantError, ValidationError
from src.services.relationship import DivorceCompleted
from src.utils.dm_helpers import send_notice_dm
from src.utils.interaction import respond_error

from .embeds import (
    divorce_certificate_embed,
    divorce_request_embed,
    marriage_status_embed,
    proposal_embed,
    single_embed,
)
from .views import DivorceRequestView, ProposalView

if TYPE_CHECKING:
    from src.bot import CovenantBot


@app_commands.guild_only()
class MarriageCog(commands.Cog):
    """Proposal, marriage status and divorce commands."""

    def __init__(self, bot: "CovenantBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.workflow = bot.relationships

    async def _display_name(self, guild: discord.Guild, user_id: int) -> str:
        member = guild.get_member(user_id)
        if member is not None:
            return member.display_name
        try:
            return (await self.bot.fetch_user(user_id)).display_name
        except discord.HTTPException:
            return f"<@{user_id}>"

    # =========================================================================
    # /propose
    # =========================================================================

    @app_commands.command(name="propose", description="Propose marriage to a member")
    @app_commands.describe(user="Member to propose to")
    async def propose(self, interaction: discord.Interaction, user: discord.User) -> None:
        guild = interaction.guild
        try:
            if user.bot:
                raise ValidationError("❌ Bots can't get married!")
            proposal_id, _ = self.workflow.propose(interaction.user.id, user.id, guild.id)
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        await interaction.response.send_message(
            content=user.mention,
            embed=proposal_embed(interaction.user, user, self.workflow.request_ttl),
            view=ProposalView(proposal_id),
        )

        await send_notice_dm(
            user,
            title="💍 Someone proposed to you!",
            color=EmbedColors.PROPOSAL,
            context="Proposal DM",
            guild=guild,
            description=f"{interaction.user.display_name} proposed to you in **{guild.name}**! Respond with the buttons in the server.",
        )

        logger.tree("Proposal Sent", [
            ("Proposal ID", proposal_id),
            ("Proposer", f"{interaction.user} ({interaction.user.id})"),
            ("Target", f"{user} ({user.id})"),
        ], emoji="💍")

    # =========================================================================
    # /marriage
    # =========================================================================

    @app_commands.command(name="marriage", description="Check marriage status")
    @app_commands.describe(user="Member to check (defaults to you)")
    async def marriage(self, interaction: discord.Interaction, user: Optional[discord.User] = None) -> None:
        subject = user or interaction.user
        is_self = subject.id == interaction.user.id
        link = self.workflow.marriage_of(subject.id)

        if link is None:
            await interaction.response.send_message(embed=single_embed(subject, is_self), ephemeral=True)
            return

        spouse_id = int(link["spouse"])
        spouse = interaction.guild.get_member(spouse_id)
        spouse_name = spouse.display_name if spouse else await self._display_name(interaction.guild, spouse_id)

        await interaction.response.send_message(
            embed=marriage_status_embed(
                subject,
                spouse_name,
                link.get("marriageDate"),
                is_self,
                spouse_avatar=spouse.display_avatar.url if spouse else None,
            ),
            ephemeral=True,
        )

    # =========================================================================
    # /divorce
    # =========================================================================

    @app_commands.command(name="divorce", description="File for divorce")
    async def divorce(self, interaction: discord.Interaction) -> None:
        guild = interaction.guild
        try:
            result = self.workflow.divorce(interaction.user.id, guild.id)
        except CovenantError as e:
            await respond_error(interaction, e)
            return

        spouse_mention = f"<@{result.spouse_id}>"

        if isinstance(result, DivorceCompleted):
            await interaction.response.send_message(
                embed=divorce_certificate_embed(interaction.user.mention, spouse_mention, result.married_at)
            )
            spouse = guild.get_member(result.spouse_id)
            if spouse is not None:
                await send_notice_dm(
                    spouse,
                    title="💔 Divorce notice",
                    color=EmbedColors.DIVORCE,
                    context="Divorce DM",
                    guild=guild,
                    description=f"{interaction.user.display_name} divorced you in **{guild.name}**. You are both single again.",
                )
            logger.tree("Divorce Completed", [
                ("Applicant", f"{interaction.user} ({interaction.user.id})"),
                ("Spouse", str(result.spouse_id)),
                ("Policy", "unilateral"),
            ], emoji="📋")
            return

        await interaction.response.send_message(
            content=spouse_mention,
            embed=divorce_request_embed(interaction.user, spouse_mention, self.workflow.request_ttl),
            view=DivorceRequestView(result.request_id),
        )

        spouse = guild.get_member(result.spouse_id)
        if spouse is not None:
            await send_notice_dm(
                spouse,
                title="📜 Divorce request",
                color=EmbedColors.DIVORCE,
                context="Divorce Request DM",
                guild=guild,
                description=f"{interaction.user.display_name} asked for a divorce in **{guild.name}**. Respond with the buttons in the server.",
            )

        logger.tree("Divorce Requested", [
            ("Request ID", result.request_id),
            ("Applicant", f"{interaction.user} ({interaction.user.id})"),
            ("Spouse", str(result.spouse_id)),
        ], emoji="📜")


__all__ = ["MarriageCog"]
