"""
Covenant Bot - Logger Module
============================

Tree-style logging to the console and to one folder of files per day.

DESIGN:
    A moderation action (who, whom, why, result) is logged as one
    titled block of key/value lines so it reads at a glance in both the
    console and the files. Errors are copied to a separate file and,
    when ERROR_WEBHOOK_URL is set, posted to a Discord webhook.

    Dated folders older than LOG_RETENTION_DAYS are removed on startup.
"""

import os
import uuid
import asyncio
from datetime import datetime
from pathlib import Path
from typing import List, Tuple, Optional

import aiohttp
from zoneinfo import ZoneInfo


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path(os.getenv("LOGS_DIR", "logs"))
"""Root of the dated log folders."""

LOG_RETENTION_DAYS = 7

LOCAL_TZ = ZoneInfo("Asia/Taipei")
"""Timezone of every timestamp the bot prints."""

Details = Optional[List[Tuple[str, str]]]


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Logger writing titled blocks with ├─ / └─ connectors.

    Attributes:
        run_id: Short id of this process, stamped on the session header.
        log_file: Today's main log.
        error_file: Today's error-only log.
    """

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self.run_id: str = str(uuid.uuid4())[:8]
        self._webhook_url: Optional[str] = None
        self._logs_dir = logs_dir

        today = datetime.now(LOCAL_TZ).strftime("%Y-%m-%d")
        self.log_dir = logs_dir / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"Covenant-{today}.log"
        self.error_file = self.log_dir / f"Covenant-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Post future detailed errors to this Discord webhook (None disables)."""
        self._webhook_url = url

    # =========================================================================
    # Files
    # =========================================================================

    def _cleanup_old_logs(self) -> int:
        """Delete dated folders past retention. Returns how many were removed."""
        now = datetime.now()
        removed = 0

        for item in self._logs_dir.iterdir():
            if not item.is_dir():
                continue
            try:
                folder_date = datetime.strptime(item.name, "%Y-%m-%d")
            except ValueError:
                continue
            if (now - folder_date).days <= LOG_RETENTION_DAYS:
                continue
            for f in item.iterdir():
                f.unlink()
            item.rmdir()
            removed += 1

        if removed:
            print(f"[LOG CLEANUP] Removed {removed} old log directories")
        return removed

    def _write_session_header(self) -> None:
        started = datetime.now(LOCAL_TZ).strftime("%Y-%m-%d %I:%M:%S %p %Z")
        rule = "=" * 60
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(f"\n{rule}\nSESSION {self.run_id} STARTED {started}\n{rule}\n")

    def _append(self, path: Path, line: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{line}\n")

    # =========================================================================
    # Core Logging
    # =========================================================================

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """Print one line and append it to today's log (and error log)."""
        text = f"{emoji} {message}" if emoji else message
        if include_timestamp:
            stamp = datetime.now(LOCAL_TZ).strftime("[%I:%M:%S %p %Z]")
            text = f"{stamp} {text}"

        print(text)
        self._append(self.log_file, text)
        if is_error:
            self._append(self.error_file, text)

    def _write_items(self, items: List[Tuple[str, str]], is_error: bool = False) -> None:
        last = len(items) - 1
        for i, (key, value) in enumerate(items):
            connector = "└─" if i == last else "├─"
            self._write(f"  {connector} {key}: {value}", include_timestamp=False, is_error=is_error)

    def tree(
        self,
        title: str,
        items: List[Tuple[str, str]],
        emoji: str = "📦",
    ) -> None:
        """
        Log a titled block of key/value lines.

        Example output:
            [02:30:45 PM CST] 💍 Proposal Created
              ├─ Proposer: 1234
              ├─ Target: 5678
              └─ Expires: 30m
        """
        self._append(self.log_file, "")
        self._write(title, emoji=emoji)
        self._write_items(items)
        self._append(self.log_file, "")

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str, details: Details = None) -> None:
        """Only written when the DEBUG environment variable is set."""
        if os.getenv("DEBUG"):
            self._write(msg, "🔍")
            if details:
                self._write_items(details)

    def info(self, msg: str, details: Details = None) -> None:
        self._write(msg, "ℹ️")
        if details:
            self._write_items(details)

    def warning(self, msg: str, details: Details = None) -> None:
        self._write(msg, "⚠️")
        if details:
            self._write_items(details)

    def error(self, msg: str, details: Details = None) -> None:
        """
        Log an error to both files.

        Errors with details are also sent to the webhook, if one is set
        and an event loop is running to carry the request.
        """
        if not details:
            self._write(msg, "❌", is_error=True)
            return

        self._write(msg, "❌", is_error=True)
        self._write_items(details, is_error=True)

        if self._webhook_url:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return
            loop.create_task(self._send_webhook_error(msg, details))

    def critical(self, msg: str, details: Details = None) -> None:
        self._write(msg, "🚨", is_error=True)
        if details:
            self._write_items(details, is_error=True)

    # =========================================================================
    # Webhook
    # =========================================================================

    async def _send_webhook_error(self, title: str, details: List[Tuple[str, str]]) -> None:
        """Post one error embed. Failures are printed, never raised."""
        if not self._webhook_url:
            return

        payload = {
            "embeds": [{
                "title": f"❌ {title}",
                "description": "\n".join(f"**{k}:** {v}" for k, v in details),
                "color": 0xDC3545,
                "timestamp": datetime.now(LOCAL_TZ).isoformat(),
                "footer": {"text": f"Run ID: {self.run_id}"},
            }]
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status != 204:
                        print(f"Webhook error: {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Shared logger; every module imports this instance."""


__all__ = [
    "logger",
    "TreeLogger",
    "LOCAL_TZ",
]
