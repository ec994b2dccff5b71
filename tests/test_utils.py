"""
Covenant Bot - Utility Tests
============================

Tests for time formatting, DM delivery and input validation helpers.
"""

from unittest.mock import MagicMock

import pytest

from src.core.constants import DEFAULT_REASON
from src.core.errors import DurationOutOfRangeError
from src.utils.dm_helpers import DeliveryResult, build_notice_embed, safe_send_dm
from src.utils.footer import FOOTER_TEXT
from src.utils.time_format import (
    days_since,
    format_duration,
    format_ms_timestamp,
    format_timestamp,
    iso_from_ms,
    parse_iso,
)
from src.utils.validators import Validators


# =============================================================================
# Time Format
# =============================================================================

class TestTimeFormat:

    def test_iso_from_ms(self):
        assert iso_from_ms(0) == "1970-01-01T00:00:00.000Z"
        assert iso_from_ms(1_500) == "1970-01-01T00:00:01.500Z"

    def test_parse_iso_accepts_z_suffix(self):
        dt = parse_iso("2024-01-01T00:00:00.000Z")
        assert dt is not None
        assert dt.utcoffset().total_seconds() == 0

    def test_parse_iso_rejects_garbage(self):
        assert parse_iso("yesterday") is None
        assert parse_iso(None) is None

    @pytest.mark.parametrize("minutes, expected", [
        (0, "0m"),
        (45, "45m"),
        (60, "1h"),
        (125, "2h 5m"),
        (1440, "1d"),
        (1500, "1d 1h"),
        (40320, "28d"),
    ])
    def test_format_duration(self, minutes, expected):
        assert format_duration(minutes) == expected

    def test_discord_timestamps(self):
        assert format_timestamp("1970-01-01T00:01:40.000Z") == "<t:100:f>"
        assert format_timestamp("bad") == "Unknown"
        assert format_ms_timestamp(100_000) == "<t:100:R>"

    def test_days_since(self):
        assert days_since("1970-01-01T00:00:00.000Z", now=3 * 86_400_000 + 5) == 3
        assert days_since("1970-01-10T00:00:00.000Z", now=0) == 0
        assert days_since(None, now=0) == 0


# =============================================================================
# DM Helpers
# =============================================================================

class TestDmHelpers:

    @pytest.mark.asyncio
    async def test_delivered(self, mock_discord_member):
        result = await safe_send_dm(mock_discord_member, content="hi", context="Test DM")

        assert result == DeliveryResult.ok()
        assert bool(result) is True

    @pytest.mark.asyncio
    async def test_closed_dms(self, mock_discord_member, forbidden):
        mock_discord_member.send.side_effect = forbidden

        result = await safe_send_dm(mock_discord_member, content="hi")

        assert bool(result) is False
        assert result.reason == "dms_closed"

    @pytest.mark.asyncio
    async def test_http_failure(self, mock_discord_member, http_error):
        mock_discord_member.send.side_effect = http_error

        result = await safe_send_dm(mock_discord_member, content="hi")

        assert result.reason == "http_error"

    def test_notice_embed_fields(self, mock_guild, mock_discord_moderator):
        embed = build_notice_embed(
            "Title",
            0xFFAA00,
            guild=mock_guild,
            moderator=mock_discord_moderator,
            reason="",
            fields=[("Count", "2"), ("Note", "long", False)],
        )

        names = [field.name for field in embed.fields]
        assert names == ["Server", "Moderator", "Count", "Note", "Reason"]
        assert embed.fields[0].value == "Test Guild"
        assert embed.fields[3].inline is False
        assert embed.fields[-1].value == "No reason provided"
        assert embed.footer.text == FOOTER_TEXT


# =============================================================================
# Validators
# =============================================================================

class TestValidators:

    @pytest.mark.parametrize("minutes", [1, 60, 40320])
    def test_valid_durations(self, minutes):
        assert Validators.validate_mute_duration(minutes) == minutes

    @pytest.mark.parametrize("minutes", [0, -5, 40321])
    def test_out_of_range_durations(self, minutes):
        with pytest.raises(DurationOutOfRangeError):
            Validators.validate_mute_duration(minutes)

    def test_blank_reason_uses_placeholder(self):
        assert Validators.validate_reason(None) == DEFAULT_REASON
        assert Validators.validate_reason("   ") == DEFAULT_REASON

    def test_long_reason_truncated(self):
        reason = Validators.validate_reason("x" * 2000)
        assert len(reason) == Validators.REASON_MAX
        assert reason.endswith("...")

    def test_can_moderate_respects_hierarchy(self, mock_guild, mock_discord_member):
        me = MagicMock()
        me.id = 42
        me.guild_permissions.moderate_members = True
        me.top_role = 10
        mock_guild.me = me
        mock_discord_member.top_role = 5

        assert Validators.can_moderate(mock_guild, mock_discord_member, "moderate_members") is True

        mock_discord_member.top_role = 10
        assert Validators.can_moderate(mock_guild, mock_discord_member, "moderate_members") is False

    def test_cannot_moderate_owner_or_admin(self, mock_guild, mock_discord_member):
        me = MagicMock()
        me.id = 42
        me.guild_permissions.moderate_members = True
        me.top_role = 10
        mock_guild.me = me
        mock_discord_member.top_role = 1

        mock_discord_member.guild_permissions.administrator = True
        assert Validators.can_moderate(mock_guild, mock_discord_member, "moderate_members") is False

        mock_discord_member.guild_permissions.administrator = False
        mock_guild.owner_id = mock_discord_member.id
        assert Validators.can_moderate(mock_guild, mock_discord_member, "moderate_members") is False
