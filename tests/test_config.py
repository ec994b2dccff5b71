"""
Covenant Bot - Configuration Tests
==================================

Tests for environment parsing and the admin permission gate.
"""

from unittest.mock import MagicMock

import pytest

from src.core.config import (
    ConfigValidationError,
    check_admin_permission,
    is_admin,
    load_config,
)


REQUIRED = {
    "BOT_TOKEN": "token",
    "CLIENT_ID": "1000",
    "GUILD_ID": "2000",
    "ADMIN_ROLE_ID": "3000",
}

OPTIONAL = [
    "WARN_MUTE_THRESHOLD",
    "WARN_KICK_THRESHOLD",
    "WARN_BAN_THRESHOLD",
    "AUTO_MUTE_MINUTES",
    "UNILATERAL_DIVORCE",
    "PENDING_REQUEST_TTL",
    "SPREADSHEET_ID",
    "SPREADSHEET_RANGE",
    "REGISTRATION_CHANNEL_ID",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_CLIENT_EMAIL",
    "HEALTH_PORT",
    "ERROR_WEBHOOK_URL",
]


@pytest.fixture
def env(monkeypatch):
    """Minimal valid environment with every optional variable unset."""
    for name in OPTIONAL:
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


# =============================================================================
# Loading
# =============================================================================

class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, env):
        config = load_config()

        assert config.guild_id == 2000
        assert config.admin_role_id == 3000
        assert (config.warn_mute_threshold, config.warn_kick_threshold, config.warn_ban_threshold) == (3, 5, 7)
        assert config.auto_mute_minutes == 1440
        assert config.unilateral_divorce is False
        assert config.pending_request_ttl == 1800
        assert config.registration_enabled is False

    @pytest.mark.parametrize("missing", list(REQUIRED))
    def test_missing_required(self, env, missing):
        env.delenv(missing)
        with pytest.raises(ConfigValidationError, match=missing):
            load_config()

    def test_non_integer_id(self, env):
        env.setenv("GUILD_ID", "not-a-number")
        with pytest.raises(ConfigValidationError):
            load_config()

    def test_thresholds_must_be_ordered(self, env):
        env.setenv("WARN_MUTE_THRESHOLD", "6")
        env.setenv("WARN_KICK_THRESHOLD", "4")
        with pytest.raises(ConfigValidationError):
            load_config()

    def test_invalid_optional_int_falls_back(self, env):
        env.setenv("AUTO_MUTE_MINUTES", "soon")
        assert load_config().auto_mute_minutes == 1440

    def test_auto_mute_clamped_to_timeout_ceiling(self, env):
        env.setenv("AUTO_MUTE_MINUTES", "999999")
        assert load_config().auto_mute_minutes == 40320

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("1", True),
        ("YES", True),
        ("false", False),
        ("0", False),
        ("", False),
    ])
    def test_unilateral_divorce_flag(self, env, raw, expected):
        env.setenv("UNILATERAL_DIVORCE", raw)
        assert load_config().unilateral_divorce is expected

    def test_bad_webhook_url_ignored(self, env):
        env.setenv("ERROR_WEBHOOK_URL", "not a url")
        assert load_config().error_webhook_url is None


# =============================================================================
# Permissions
# =============================================================================

class TestAdminPermission:
    """Tests for is_admin and check_admin_permission."""

    def test_admin_role_grants_access(self, mock_discord_member):
        role = MagicMock()
        role.id = 3000
        mock_discord_member.roles = [role]
        assert is_admin(mock_discord_member, admin_role_id=3000) is True

    def test_administrator_permission_grants_access(self, mock_discord_member):
        mock_discord_member.guild_permissions.administrator = True
        assert is_admin(mock_discord_member, admin_role_id=3000) is True

    def test_regular_member_denied(self, mock_discord_member):
        assert is_admin(mock_discord_member, admin_role_id=3000) is False

    def test_none_denied(self):
        assert is_admin(None, admin_role_id=3000) is False

    @pytest.mark.asyncio
    async def test_check_sends_ephemeral_denial(self, mock_interaction, mock_discord_member):
        mock_interaction.user = mock_discord_member

        allowed = await check_admin_permission(mock_interaction, admin_role_id=3000)

        assert allowed is False
        _, kwargs = mock_interaction.response.send_message.call_args
        assert kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_check_allows_admin(self, mock_interaction, mock_discord_member):
        mock_discord_member.guild_permissions.administrator = True
        mock_interaction.user = mock_discord_member

        assert await check_admin_permission(mock_interaction, admin_role_id=3000) is True
        mock_interaction.response.send_message.assert_not_awaited()
