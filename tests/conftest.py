"""
Covenant Bot - Test Configuration
=================================

Shared fixtures for all tests.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.core.config import Config
from src.core.database import Store
from src.services.escalation import EscalationPolicy, Thresholds
from src.services.relationship import RelationshipWorkflow
from src.services.warning_ledger import WarningLedger


GUILD_ID = 987654321
MODERATOR_ID = 111222333
ADMIN_ROLE_ID = 444555666
REGISTRATION_CHANNEL_ID = 777888999


# =============================================================================
# Discord Exceptions
# =============================================================================

def make_forbidden() -> discord.Forbidden:
    """Build a real discord.Forbidden without a live HTTP response."""
    return discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions")


def make_http_error() -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=500, reason="Server Error"), "Internal Error")


def make_not_found() -> discord.NotFound:
    return discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Member")


# =============================================================================
# Store & Services
# =============================================================================

@pytest.fixture
def store():
    """Fresh in-memory store."""
    return Store()


@pytest.fixture
def disk_store(tmp_path):
    """Store backed by a temporary data directory."""
    return Store(tmp_path / "data")


@pytest.fixture
def policy(store):
    return EscalationPolicy(store, Thresholds(mute=3, kick=5, ban=7), auto_mute_minutes=1440)


@pytest.fixture
def ledger(store, policy):
    return WarningLedger(store, policy)


@pytest.fixture
def workflow(store):
    return RelationshipWorkflow(store, unilateral_divorce=False, request_ttl=30 * 60)


# =============================================================================
# Mock Discord Objects
# =============================================================================

@pytest.fixture
def mock_guild():
    """Create a mock Discord guild."""
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Guild"
    guild.owner_id = 1
    guild.get_member = MagicMock(return_value=None)
    guild.fetch_member = AsyncMock(side_effect=make_not_found())
    guild.ban = AsyncMock()
    return guild


@pytest.fixture
def mock_discord_member(mock_guild):
    """Create a mock Discord member that can receive DMs and be timed out."""
    member = MagicMock()
    member.id = 123456789
    member.name = "testuser"
    member.display_name = "Test User"
    member.mention = "<@123456789>"
    member.guild = mock_guild
    member.roles = []
    member.guild_permissions.administrator = False
    member.send = AsyncMock()
    member.timeout = AsyncMock()
    member.kick = AsyncMock()
    member.ban = AsyncMock()
    member.is_timed_out = MagicMock(return_value=True)
    mock_guild.get_member.return_value = member
    return member


@pytest.fixture
def mock_discord_moderator():
    """Create a mock Discord moderator."""
    mod = MagicMock()
    mod.id = MODERATOR_ID
    mod.name = "moduser"
    mod.display_name = "Mod User"
    mod.mention = f"<@{MODERATOR_ID}>"
    return mod


@pytest.fixture
def mock_interaction(mock_discord_moderator, mock_guild):
    """Create a mock interaction that has not been answered yet."""
    interaction = MagicMock()
    interaction.user = mock_discord_moderator
    interaction.guild = mock_guild
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.edit_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    interaction.message.edit = AsyncMock()
    return interaction


@pytest.fixture
def mock_bot(mock_guild):
    """Create a mock bot instance."""
    bot = MagicMock()
    bot.get_guild = MagicMock(return_value=mock_guild)
    bot.wait_until_ready = AsyncMock()
    return bot


@pytest.fixture
def forbidden():
    return make_forbidden()


@pytest.fixture
def http_error():
    return make_http_error()


@pytest.fixture
def config(monkeypatch):
    """Install a minimal configuration as the global instance."""
    cfg = Config(
        bot_token="test-token",
        application_id=1,
        guild_id=GUILD_ID,
        admin_role_id=ADMIN_ROLE_ID,
        registration_channel_id=REGISTRATION_CHANNEL_ID,
    )
    monkeypatch.setattr("src.core.config._config", cfg)
    return cfg
