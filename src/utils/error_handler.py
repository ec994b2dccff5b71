"""
Covenant Bot - Error Handler
============================

Categorized error logging with recovery hints.

Features:
- Error categorization (Discord, storage, spreadsheet)
- Recovery suggestions in the log line
- Discord interaction context capture
- Critical error file dumps under logs/errors
"""

import json
import traceback
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import discord
from google.auth import exceptions as google_auth_exceptions
from gspread import exceptions as gspread_exceptions

from src.core.logger import logger, LOGS_DIR


class ErrorContext:
    """Captures and formats detailed error context"""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (interaction, member, ...)

        Returns:
            Dictionary with full error context
        """
        context = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": {k: str(v)[:200] for k, v in kwargs.items()},
        }

        interaction = kwargs.get("interaction")
        if isinstance(interaction, discord.Interaction):
            command = interaction.command
            context["discord_context"] = {
                "guild": interaction.guild.name if interaction.guild else "DM",
                "user": str(interaction.user),
                "user_id": interaction.user.id if interaction.user else None,
                "command": command.qualified_name if command else None,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints"""

    ERROR_CATEGORIES = {
        "discord": (discord.Forbidden, discord.NotFound, discord.HTTPException),
        "spreadsheet": (gspread_exceptions.GSpreadException, google_auth_exceptions.GoogleAuthError),
        "storage": (json.JSONDecodeError, OSError),
    }

    SUGGESTIONS = {
        discord.Forbidden: "Check bot permissions and role hierarchy",
        discord.NotFound: "Resource not found - check IDs and channels",
        discord.HTTPException: "Discord API issue - will retry on next action",
        gspread_exceptions.APIError: "Sheets API error - check spreadsheet sharing and quota",
        google_auth_exceptions.GoogleAuthError: "Google credentials rejected - check service account env",
        json.JSONDecodeError: "Corrupted data file - check the data directory",
        OSError: "File system issue - check disk space and permissions",
    }

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: BaseException) -> str:
        for error_type, suggestion in cls.SUGGESTIONS.items():
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context) -> None:
        """
        Log an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error should be dumped to disk
            **context: Additional context
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:100]),
            ("Recovery", suggestion),
        ]
        if "discord_context" in full_context:
            dc = full_context["discord_context"]
            details.append(("Command", str(dc["command"])))
            details.append(("User", f"{dc['user']} ({dc['user_id']})"))

        if critical:
            logger.critical("Critical Error", details)
            cls._store_critical_error(full_context)
        else:
            logger.error("Unhandled Error", details)

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        """Dump a critical error's context to logs/errors for later analysis."""
        error_dir = Path(LOGS_DIR) / "errors"
        try:
            error_dir.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            error_file = error_dir / f"error_{timestamp}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(context, f, indent=2, default=str)
        except OSError as save_error:
            logger.warning("Error Dump Failed", [("Error", str(save_error)[:100])])
            return

        logger.info("Critical Error Saved", [("File", str(error_file))])


__all__ = ["ErrorContext", "ErrorHandler"]
