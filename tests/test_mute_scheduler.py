"""
Covenant Bot - Mute Scheduler Tests
===================================

Tests for releasing expired mutes with mocked guilds and members.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.services.mute_scheduler import MuteScheduler


NOW = 1_700_000_000_000


def _record_expired_mute(store, user_id, guild_id, minutes=10):
    """Store a mute that ended one millisecond before NOW."""
    store.add_mute(user_id, guild_id, 1, "noise", minutes, NOW - minutes * 60 * 1000 - 1)


class TestSweep:
    """Tests for MuteScheduler.sweep."""

    @pytest.mark.asyncio
    async def test_nothing_expired(self, mock_bot, store, mock_discord_member):
        store.add_mute(mock_discord_member.id, 5, 1, "noise", 10, NOW)
        scheduler = MuteScheduler(mock_bot, store)

        assert await scheduler.sweep(now=NOW) == 0
        assert store.get_mute(mock_discord_member.id) is not None

    @pytest.mark.asyncio
    async def test_notifies_then_lifts_timeout(self, mock_bot, store, mock_discord_member, mock_guild):
        _record_expired_mute(store, mock_discord_member.id, mock_guild.id)
        calls = []
        mock_discord_member.send.side_effect = lambda **kwargs: calls.append("dm")
        mock_discord_member.timeout.side_effect = lambda *args, **kwargs: calls.append("lift")
        scheduler = MuteScheduler(mock_bot, store)

        released = await scheduler.sweep(now=NOW)

        assert released == 1
        assert calls == ["dm", "lift"]
        args, _ = mock_discord_member.timeout.call_args
        assert args[0] is None
        assert store.get_mute(mock_discord_member.id) is None

    @pytest.mark.asyncio
    async def test_timeout_already_ended_still_notifies(self, mock_bot, store, mock_discord_member, mock_guild):
        _record_expired_mute(store, mock_discord_member.id, mock_guild.id)
        mock_discord_member.is_timed_out.return_value = False
        scheduler = MuteScheduler(mock_bot, store)

        await scheduler.sweep(now=NOW)

        mock_discord_member.send.assert_awaited_once()
        mock_discord_member.timeout.assert_not_awaited()
        assert store.get_mute(mock_discord_member.id) is None

    @pytest.mark.asyncio
    async def test_mute_recorded_during_sweep_survives(self, mock_bot, store, mock_discord_member, mock_guild):
        _record_expired_mute(store, mock_discord_member.id, mock_guild.id)

        async def remute(**kwargs):
            store.add_mute(mock_discord_member.id, mock_guild.id, 1, "second offence", 60, NOW)

        mock_discord_member.send.side_effect = remute
        scheduler = MuteScheduler(mock_bot, store)

        await scheduler.sweep(now=NOW)

        record = store.get_mute(mock_discord_member.id)
        assert record is not None
        assert record["reason"] == "second offence"
        mock_discord_member.timeout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_guild_still_removes_record(self, mock_bot, store):
        _record_expired_mute(store, 42, 999)
        mock_bot.get_guild.return_value = None
        scheduler = MuteScheduler(mock_bot, store)

        assert await scheduler.sweep(now=NOW) == 1
        assert store.get_mute(42) is None

    @pytest.mark.asyncio
    async def test_departed_member_still_removes_record(self, mock_bot, store, mock_guild):
        _record_expired_mute(store, 42, mock_guild.id)
        mock_guild.get_member.return_value = None
        scheduler = MuteScheduler(mock_bot, store)

        assert await scheduler.sweep(now=NOW) == 1
        mock_guild.fetch_member.assert_awaited_once_with(42)
        assert store.get_mute(42) is None

    @pytest.mark.asyncio
    async def test_fetches_uncached_member(self, mock_bot, store, mock_guild, mock_discord_member):
        _record_expired_mute(store, mock_discord_member.id, mock_guild.id)
        mock_guild.get_member.return_value = None
        mock_guild.fetch_member = AsyncMock(return_value=mock_discord_member)
        scheduler = MuteScheduler(mock_bot, store)

        await scheduler.sweep(now=NOW)

        mock_discord_member.timeout.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_release_still_removes_record(
        self, mock_bot, store, mock_discord_member, mock_guild, forbidden
    ):
        _record_expired_mute(store, mock_discord_member.id, mock_guild.id)
        mock_discord_member.timeout.side_effect = forbidden
        scheduler = MuteScheduler(mock_bot, store)

        assert await scheduler.sweep(now=NOW) == 1
        assert store.get_mute(mock_discord_member.id) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_stop_sweep(self, mock_bot, store, mock_guild):
        _record_expired_mute(store, 1, mock_guild.id)
        _record_expired_mute(store, 2, mock_guild.id)
        mock_guild.get_member = MagicMock(side_effect=RuntimeError("cache broken"))
        scheduler = MuteScheduler(mock_bot, store)

        assert await scheduler.sweep(now=NOW) == 2
        assert store.count_active_mutes() == 0


class TestLifecycle:
    """Tests for starting and stopping the background task."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, mock_bot, store):
        scheduler = MuteScheduler(mock_bot, store, interval=3600)

        await scheduler.start()
        assert scheduler.running is True
        assert scheduler.task is not None

        await scheduler.stop()
        assert scheduler.running is False
        assert scheduler.task.done()
