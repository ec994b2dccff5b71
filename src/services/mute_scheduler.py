"""
Covenant Bot - Mute Scheduler Service
=====================================

Background service that releases mutes whose time has run out.

DESIGN:
    Runs as a background task every mute_check_interval seconds. The
    store's mute records are the source of truth. A record whose unmute
    time has passed is deleted after its sweep, even when the guild or
    member can't be found, so a bad record is never retried forever. A
    mute recorded again while the sweep awaits Discord replaces the old
    record and is left untouched.
"""

import asyncio
from typing import TYPE_CHECKING, Optional

import discord

from src.core.logger import logger
from src.core.config import EmbedColors
from src.core.database import MuteRecord, Store
from src.utils.dm_helpers import send_notice_dm
from src.utils.time_format import format_duration, now_ms

if TYPE_CHECKING:
    from src.bot import CovenantBot


# =============================================================================
# Mute Scheduler Service
# =============================================================================

class MuteScheduler:
    """
    Background service for automatic mute expiration.

    Attributes:
        bot: Reference to the main bot instance.
        store: Store holding mute records.
        interval: Seconds between sweeps.
        task: Background task reference.
        running: Whether the scheduler is active.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, bot: "CovenantBot", store: Store, interval: int = 60) -> None:
        self.bot = bot
        self.store = store
        self.interval = interval
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """Start the background task, replacing any running one."""
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._scheduler_loop())

        logger.tree("Mute Scheduler Started", [
            ("Check Interval", f"{self.interval}s"),
            ("Tracked Mutes", str(self.store.count_active_mutes())),
        ], emoji="⏰")

    async def stop(self) -> None:
        """Stop the background task."""
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        logger.info("Mute Scheduler Stopped")

    # =========================================================================
    # Scheduler Loop
    # =========================================================================

    async def _scheduler_loop(self) -> None:
        """Sweep, sleep, repeat. A failed sweep is logged and the loop goes on."""
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Mute Scheduler Error", [
                    ("Error", str(e)[:100]),
                ])
            await asyncio.sleep(self.interval)

    # =========================================================================
    # Mute Processing
    # =========================================================================

    async def sweep(self, now: Optional[int] = None) -> int:
        """
        Release every mute whose unmute time has passed.

        Args:
            now: Override for the current time in ms.

        Returns:
            Number of mute records released.
        """
        current = now if now is not None else now_ms()
        expired = self.store.get_expired_mutes(current)
        if not expired:
            return 0

        for user_id, record in expired:
            try:
                await self._release(int(user_id), record)
            except Exception as e:
                logger.error("Auto-Unmute Failed", [
                    ("User ID", user_id),
                    ("Guild ID", record.get("guildId", "?")),
                    ("Error", str(e)[:100]),
                ])
            finally:
                self.store.remove_mute_if(int(user_id), record)

        logger.tree("Expired Mutes Processed", [
            ("Released", str(len(expired))),
        ], emoji="⏰")

        return len(expired)

    async def _release(self, user_id: int, record: MuteRecord) -> None:
        """Notify the member, then lift their timeout if this mute still holds."""
        guild = self.bot.get_guild(int(record["guildId"]))
        if guild is None:
            logger.warning("Auto-Unmute Skipped", [
                ("User ID", str(user_id)),
                ("Reason", "Guild not accessible"),
            ])
            return

        member = await self._fetch_member(guild, user_id)
        if member is None:
            logger.debug("Auto-Unmute Skipped", [
                ("User ID", str(user_id)),
                ("Reason", "Member left guild"),
            ])
            return

        await send_notice_dm(
            member,
            title="🔊 Your mute has expired",
            color=EmbedColors.RELEASE,
            context="Mute Expired DM",
            guild=guild,
            description=f"Your mute in **{guild.name}** has ended.",
            fields=[("Duration", format_duration(record.get("duration", 0)))],
        )

        if not member.is_timed_out():
            return
        if not self.store.is_current_mute(user_id, record):
            logger.debug("Auto-Unmute Skipped", [
                ("User ID", str(user_id)),
                ("Reason", "Muted again during sweep"),
            ])
            return

        try:
            await member.timeout(None, reason="Auto-unmute: mute duration expired")
        except discord.Forbidden:
            logger.error("Auto-Unmute Permission Denied", [
                ("User", f"{member} ({member.id})"),
                ("Guild", guild.name),
            ])
            return
        except discord.HTTPException as e:
            logger.error("Auto-Unmute HTTP Error", [
                ("User", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            return

        logger.tree("Auto-Unmute", [
            ("User", f"{member} ({member.id})"),
            ("Guild", guild.name),
            ("Reason", "Mute duration expired"),
        ], emoji="🔊")

    async def _fetch_member(self, guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
        member = guild.get_member(user_id)
        if member is not None:
            return member
        try:
            return await guild.fetch_member(user_id)
        except (discord.NotFound, discord.HTTPException):
            return None


__all__ = ["MuteScheduler"]
