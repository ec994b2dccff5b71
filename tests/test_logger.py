"""
Covenant Bot - Logger Tests
===========================

Tests for log files, retention cleanup and webhook error alerts.
"""

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.logger import TreeLogger


WEBHOOK_URL = "https://discord.com/api/webhooks/1/token"


@pytest.fixture
def tree_logger(tmp_path):
    return TreeLogger(tmp_path)


class TestLogFiles:

    def test_tree_block_written(self, tree_logger):
        tree_logger.tree("Proposal Created", [("Proposer", "1"), ("Target", "2")], emoji="💍")

        body = tree_logger.log_file.read_text(encoding="utf-8")
        assert "💍 Proposal Created" in body
        assert "├─ Proposer: 1" in body
        assert "└─ Target: 2" in body

    def test_errors_copied_to_error_file(self, tree_logger):
        tree_logger.info("Routine")
        tree_logger.error("Mute Failed", [("User", "42")])

        errors = tree_logger.error_file.read_text(encoding="utf-8")
        assert "Mute Failed" in errors
        assert "└─ User: 42" in errors
        assert "Routine" not in errors


class TestRetention:

    def test_old_dated_folders_removed(self, tmp_path):
        old = tmp_path / "2000-01-01"
        old.mkdir()
        (old / "Covenant-2000-01-01.log").write_text("old", encoding="utf-8")
        notes = tmp_path / "notes"
        notes.mkdir()

        log = TreeLogger(tmp_path)

        assert not old.exists()
        assert notes.exists()
        assert log.log_dir.exists()

    def test_recent_folders_kept(self, tree_logger):
        assert tree_logger._cleanup_old_logs() == 0
        assert tree_logger.log_dir.exists()


class TestWebhookAlerts:

    @pytest.mark.asyncio
    async def test_detailed_error_schedules_alert(self, tree_logger):
        tree_logger.set_webhook(WEBHOOK_URL)
        tree_logger._send_webhook_error = AsyncMock()

        tree_logger.error("Ban Failed", [("User", "42")])
        await asyncio.sleep(0)

        tree_logger._send_webhook_error.assert_awaited_once_with("Ban Failed", [("User", "42")])

    @pytest.mark.asyncio
    async def test_no_webhook_no_alert(self, tree_logger):
        tree_logger._send_webhook_error = AsyncMock()

        tree_logger.error("Ban Failed", [("User", "42")])
        await asyncio.sleep(0)

        tree_logger._send_webhook_error.assert_not_awaited()

    def test_without_running_loop(self, tree_logger):
        tree_logger.set_webhook(WEBHOOK_URL)
        tree_logger._send_webhook_error = MagicMock()

        tree_logger.error("Startup Failed", [("Reason", "x")])

        tree_logger._send_webhook_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_alert_payload(self, tree_logger, monkeypatch):
        response = MagicMock(status=204)
        post_context = MagicMock()
        post_context.__aenter__.return_value = response
        session = MagicMock()
        session.post.return_value = post_context
        session_context = MagicMock()
        session_context.__aenter__.return_value = session
        monkeypatch.setattr(sys.modules["src.core.logger"].aiohttp, "ClientSession", MagicMock(return_value=session_context))
        tree_logger.set_webhook(WEBHOOK_URL)

        await tree_logger._send_webhook_error("Ban Failed", [("User", "42"), ("Error", "Forbidden")])

        args, kwargs = session.post.call_args
        assert args[0] == WEBHOOK_URL
        embed = kwargs["json"]["embeds"][0]
        assert embed["title"] == "❌ Ban Failed"
        assert embed["description"] == "**User:** 42\n**Error:** Forbidden"
        assert embed["footer"]["text"] == f"Run ID: {tree_logger.run_id}"
