"""
Covenant Bot - Marriage Embeds
==============================

Embed builders for proposals, weddings and divorces.
"""

from typing import Optional

import discord

from src.core.config import EmbedColors
from src.utils.footer import set_footer
from src.utils.time_format import days_since, format_duration, format_timestamp


def _finish(embed: discord.Embed) -> discord.Embed:
    embed.timestamp = discord.utils.utcnow()
    set_footer(embed)
    return embed


def proposal_embed(proposer: discord.abc.User, target: discord.abc.User, ttl_seconds: int) -> discord.Embed:
    embed = discord.Embed(
        title="💍 Marriage Proposal",
        description=f"{proposer.mention} is proposing to {target.mention}!",
        color=EmbedColors.PROPOSAL,
    )
    embed.add_field(name="💕 Message", value=f"{target.mention}, will you marry me?", inline=False)
    embed.add_field(name="⏰ Valid For", value=format_duration(ttl_seconds // 60), inline=True)
    embed.add_field(name="📝 How to Respond", value="Use the buttons below", inline=True)
    embed.set_thumbnail(url=proposer.display_avatar.url)
    return _finish(embed)


def wedding_embed(proposer_mention: str, target_mention: str, married_at: str) -> discord.Embed:
    embed = discord.Embed(
        title="🎉 Wedding Announcement",
        description=f"Congratulations to {proposer_mention} and {target_mention} on their marriage!",
        color=EmbedColors.MARRIED,
    )
    embed.add_field(name="💒 Married", value=format_timestamp(married_at), inline=False)
    embed.add_field(name="💝 Blessing", value="Wishing you a lifetime of happiness together!", inline=False)
    return _finish(embed)


def proposal_rejected_embed(proposer_mention: str, target_mention: str) -> discord.Embed:
    embed = discord.Embed(
        title="💔 Proposal Declined",
        description=f"{target_mention} declined {proposer_mention}'s proposal.",
        color=EmbedColors.REJECTED,
    )
    embed.add_field(name="💪 Chin Up", value="The right one is still out there!", inline=False)
    return _finish(embed)


def single_embed(subject: discord.abc.User, is_self: bool) -> discord.Embed:
    embed = discord.Embed(
        title="💔 Single",
        description="You're single 🐕" if is_self else f"{subject.display_name} is single 🐕",
        color=EmbedColors.SINGLE,
    )
    embed.add_field(name="Tip", value="Why not try `/propose`?", inline=False)
    return _finish(embed)


def marriage_status_embed(
    subject: discord.abc.User,
    spouse_name: str,
    married_at: Optional[str],
    is_self: bool,
    spouse_avatar: Optional[str] = None,
) -> discord.Embed:
    description = (
        f"You are married to **{spouse_name}**"
        if is_self
        else f"**{subject.display_name}** is married to **{spouse_name}**"
    )
    embed = discord.Embed(title="💕 Marriage Status", description=description, color=EmbedColors.MARRIED)
    embed.add_field(name="💒 Married", value=format_timestamp(married_at), inline=True)
    embed.add_field(name="📅 Days Together", value=str(days_since(married_at)), inline=True)
    if spouse_avatar:
        embed.set_thumbnail(url=spouse_avatar)
    return _finish(embed)


def divorce_request_embed(applicant: discord.abc.User, spouse_mention: str, ttl_seconds: int) -> discord.Embed:
    embed = discord.Embed(
        title="📜 Divorce Request",
        description=f"{applicant.mention} is asking {spouse_mention} for a divorce.",
        color=EmbedColors.DIVORCE,
    )
    embed.add_field(name="⏰ Valid For", value=format_duration(ttl_seconds // 60), inline=True)
    embed.add_field(name="📝 How to Respond", value="The spouse uses the buttons below", inline=True)
    return _finish(embed)


def divorce_certificate_embed(applicant_mention: str, spouse_mention: str, married_at: Optional[str]) -> discord.Embed:
    embed = discord.Embed(
        title="📋 Divorce Certificate",
        description=f"{applicant_mention} and {spouse_mention} are now divorced.",
        color=EmbedColors.DIVORCE,
    )
    embed.add_field(name="⏰ Marriage Lasted", value=f"{days_since(married_at)} days", inline=True)
    embed.add_field(name="🕊️ Blessing", value="May you both find new happiness!", inline=False)
    return _finish(embed)


def divorce_rejected_embed(applicant_mention: str, spouse_mention: str) -> discord.Embed:
    embed = discord.Embed(
        title="💞 Divorce Declined",
        description=f"{spouse_mention} declined {applicant_mention}'s divorce request. The marriage continues.",
        color=EmbedColors.MARRIED,
    )
    return _finish(embed)


__all__ = [
    "proposal_embed",
    "wedding_embed",
    "proposal_rejected_embed",
    "single_embed",
    "marriage_status_embed",
    "divorce_request_embed",
    "divorce_certificate_embed",
    "divorce_rejected_embed",
]
