"""
Covenant Bot - Health & Error Handler Tests
===========================================

Tests for the health payload and error categorization.
"""

import json

import pytest
from gspread.exceptions import GSpreadException

from src.core.health import HealthCheckServer
from src.utils.error_handler import ErrorHandler


class TestHealthStatus:

    def test_reports_store_counters(self, mock_bot, store):
        mock_bot.is_ready.return_value = True
        mock_bot.guilds = [object()]
        mock_bot.store = store
        store.add_mute(1, 5, 9, "r", 10, 0)
        store.add_proposal(2, 3, 5, 0)

        status = HealthCheckServer(mock_bot, port=0).status()

        assert status["status"] == "healthy"
        assert status["guilds"] == 1
        assert status["active_mutes"] == 1
        assert status["pending_proposals"] == 1
        assert status["pending_divorces"] == 0

    @pytest.mark.asyncio
    async def test_handler_returns_json(self, mock_bot, store):
        mock_bot.is_ready.return_value = False
        mock_bot.guilds = []
        mock_bot.store = store

        response = await HealthCheckServer(mock_bot, port=0).health_handler(None)

        assert response.status == 200
        assert json.loads(response.text)["status"] == "starting"


class TestErrorHandler:

    def test_categories(self, forbidden):
        assert ErrorHandler.categorize_error(forbidden) == "discord"
        assert ErrorHandler.categorize_error(GSpreadException("x")) == "spreadsheet"
        assert ErrorHandler.categorize_error(OSError("disk")) == "storage"
        assert ErrorHandler.categorize_error(ValueError("x")) == "general"

    def test_most_specific_suggestion_wins(self, forbidden, http_error):
        assert "permissions" in ErrorHandler.get_recovery_suggestion(forbidden)
        assert "Discord API" in ErrorHandler.get_recovery_suggestion(http_error)

    def test_critical_error_dumped(self, tmp_path, monkeypatch):
        monkeypatch.setattr("src.utils.error_handler.LOGS_DIR", tmp_path)

        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            ErrorHandler.handle(e, location="test", critical=True)

        dumps = list((tmp_path / "errors").glob("error_*.json"))
        assert len(dumps) == 1
        assert json.loads(dumps[0].read_text(encoding="utf-8"))["error_message"] == "boom"
