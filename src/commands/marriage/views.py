"""
Covenant Bot - Marriage Buttons
===============================

Persistent accept/reject buttons for proposals and divorce requests.

DESIGN:
    Buttons are DynamicItems whose custom id carries the request id,
    so they keep working after a restart. A click on a request that
    is already gone answers ephemerally and strips the buttons.
"""

from typing import TYPE_CHECKING

import discord

from src.core.logger import logger
from src.core.config import EmbedColors
from src.core.constants import (
    DIVORCE_ACCEPT_PREFIX,
    DIVORCE_REJECT_PREFIX,
    PROPOSAL_ACCEPT_PREFIX,
    PROPOSAL_REJECT_PREFIX,
    REQUEST_ID_PATTERN,
)
from src.core.errors import CovenantError, ForbiddenError
from src.utils.dm_helpers import send_notice_dm
from src.utils.interaction import respond_error

from .embeds import (
    divorce_certificate_embed,
    divorce_rejected_embed,
    proposal_rejected_embed,
    wedding_embed,
)

if TYPE_CHECKING:
    from src.bot import CovenantBot


# =============================================================================
# Helpers
# =============================================================================

async def _reject_click(interaction: discord.Interaction, error: CovenantError) -> None:
    """Answer a failed click; strip the buttons when the request is finished."""
    await respond_error(interaction, error)
    if isinstance(error, ForbiddenError) or interaction.message is None:
        return
    try:
        await interaction.message.edit(view=None)
    except discord.HTTPException as e:
        logger.debug("Button Strip Failed", [("Error", str(e)[:100])])


def _mention(user_id: int) -> str:
    return f"<@{user_id}>"


# =============================================================================
# Proposal Buttons
# =============================================================================

class ProposalAcceptButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=PROPOSAL_ACCEPT_PREFIX + r"(?P<request_id>" + REQUEST_ID_PATTERN + r")",
):
    """Persistent button for accepting a proposal."""

    def __init__(self, proposal_id: str):
        super().__init__(
            discord.ui.Button(
                label="Accept",
                emoji="💍",
                style=discord.ButtonStyle.success,
                custom_id=f"{PROPOSAL_ACCEPT_PREFIX}{proposal_id}",
            )
        )
        self.proposal_id = proposal_id

    @classmethod
    async def from_custom_id(cls, interaction: discord.Interaction, item: discord.ui.Button, match) -> "ProposalAcceptButton":
        return cls(match.group("request_id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        bot: "CovenantBot" = interaction.client
        try:
            result = bot.relationships.accept_proposal(self.proposal_id, interaction.user.id)
        except CovenantError as e:
            await _reject_click(interaction, e)
            return

        logger.tree("Proposal Accepted", [
            ("Proposal ID", self.proposal_id),
            ("Proposer", str(result.proposer_id)),
            ("Target", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="🎉")

        await interaction.response.edit_message(
            embed=wedding_embed(_mention(result.proposer_id), interaction.user.mention, result.married_at),
            view=None,
        )


class ProposalRejectButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=PROPOSAL_REJECT_PREFIX + r"(?P<request_id>" + REQUEST_ID_PATTERN + r")",
):
    """Persistent button for declining a proposal."""

    def __init__(self, proposal_id: str):
        super().__init__(
            discord.ui.Button(
                label="Decline",
                emoji="💔",
                style=discord.ButtonStyle.danger,
                custom_id=f"{PROPOSAL_REJECT_PREFIX}{proposal_id}",
            )
        )
        self.proposal_id = proposal_id

    @classmethod
    async def from_custom_id(cls, interaction: discord.Interaction, item: discord.ui.Button, match) -> "ProposalRejectButton":
        return cls(match.group("request_id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        bot: "CovenantBot" = interaction.client
        try:
            record = bot.relationships.reject_proposal(self.proposal_id, interaction.user.id)
        except CovenantError as e:
            await _reject_click(interaction, e)
            return

        await interaction.response.edit_message(
            embed=proposal_rejected_embed(_mention(int(record["proposer"])), interaction.user.mention),
            view=None,
        )


# =============================================================================
# Divorce Buttons
# =============================================================================

class DivorceAcceptButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=DIVORCE_ACCEPT_PREFIX + r"(?P<request_id>" + REQUEST_ID_PATTERN + r")",
):
    """Persistent button for agreeing to a divorce."""

    def __init__(self, request_id: str):
        super().__init__(
            discord.ui.Button(
                label="Agree",
                emoji="📋",
                style=discord.ButtonStyle.secondary,
                custom_id=f"{DIVORCE_ACCEPT_PREFIX}{request_id}",
            )
        )
        self.request_id = request_id

    @classmethod
    async def from_custom_id(cls, interaction: discord.Interaction, item: discord.ui.Button, match) -> "DivorceAcceptButton":
        return cls(match.group("request_id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        bot: "CovenantBot" = interaction.client
        try:
            result = bot.relationships.accept_divorce(self.request_id, interaction.user.id)
        except CovenantError as e:
            await _reject_click(interaction, e)
            return

        if not result.dissolved:
            await interaction.response.edit_message(
                content="ℹ️ This marriage had already ended.",
                embed=None,
                view=None,
            )
            return

        logger.tree("Divorce Accepted", [
            ("Request ID", self.request_id),
            ("Applicant", str(result.applicant_id)),
            ("Spouse", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="📋")

        await interaction.response.edit_message(
            embed=divorce_certificate_embed(_mention(result.applicant_id), interaction.user.mention, result.married_at),
            view=None,
        )

        applicant = interaction.guild.get_member(result.applicant_id) if interaction.guild else None
        if applicant is not None:
            await send_notice_dm(
                applicant,
                title="📋 Divorce finalized",
                color=EmbedColors.DIVORCE,
                context="Divorce Accepted DM",
                guild=interaction.guild,
                description=f"{interaction.user.display_name} agreed to the divorce. You are both single again.",
            )


class DivorceRejectButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=DIVORCE_REJECT_PREFIX + r"(?P<request_id>" + REQUEST_ID_PATTERN + r")",
):
    """Persistent button for refusing a divorce."""

    def __init__(self, request_id: str):
        super().__init__(
            discord.ui.Button(
                label="Refuse",
                emoji="💞",
                style=discord.ButtonStyle.primary,
                custom_id=f"{DIVORCE_REJECT_PREFIX}{request_id}",
            )
        )
        self.request_id = request_id

    @classmethod
    async def from_custom_id(cls, interaction: discord.Interaction, item: discord.ui.Button, match) -> "DivorceRejectButton":
        return cls(match.group("request_id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        bot: "CovenantBot" = interaction.client
        try:
            record = bot.relationships.reject_divorce(self.request_id, interaction.user.id)
        except CovenantError as e:
            await _reject_click(interaction, e)
            return

        await interaction.response.edit_message(
            embed=divorce_rejected_embed(_mention(int(record["applicant"])), interaction.user.mention),
            view=None,
        )


# =============================================================================
# Views Using Dynamic Items
# =============================================================================

class ProposalView(discord.ui.View):
    def __init__(self, proposal_id: str):
        super().__init__(timeout=None)
        self.add_item(ProposalAcceptButton(proposal_id))
        self.add_item(ProposalRejectButton(proposal_id))


class DivorceRequestView(discord.ui.View):
    def __init__(self, request_id: str):
        super().__init__(timeout=None)
        self.add_item(DivorceAcceptButton(request_id))
        self.add_item(DivorceRejectButton(request_id))


# =============================================================================
# Setup Function (for persistent views)
# =============================================================================

def setup_marriage_views(bot: "CovenantBot") -> None:
    """Register marriage dynamic items for persistence."""
    bot.add_dynamic_items(
        ProposalAcceptButton,
        ProposalRejectButton,
        DivorceAcceptButton,
        DivorceRejectButton,
    )


__all__ = [
    "ProposalAcceptButton",
    "ProposalRejectButton",
    "DivorceAcceptButton",
    "DivorceRejectButton",
    "ProposalView",
    "DivorceRequestView",
    "setup_marriage_views",
]
