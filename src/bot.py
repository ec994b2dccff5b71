"""
Covenant Bot - Main Bot Class
=============================

Core Discord client for a single community server: warnings with
auto-escalation, timed mutes, a consent-based marriage feature and
registration ingestion.

DESIGN:
    The bot owns the Store and every service, built once in __init__
    and handed to cogs through attributes. Background sweepers start
    in on_ready and stop in close().

    SERVICE INITIALIZATION ORDER:
    1. __init__: Store, escalation, ledger, relationships, registration
    2. setup_hook: command cogs, persistent buttons, guild command sync
    3. on_ready: mute scheduler, request sweeper, health server
"""

from datetime import datetime
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import Store
from src.core.errors import CovenantError
from src.services.escalation import EscalationPolicy, Thresholds
from src.services.mute_scheduler import MuteScheduler
from src.services.registration import RegistrationService, RegistrationSheet
from src.services.relationship import RelationshipWorkflow
from src.services.request_sweeper import RequestSweeper
from src.services.warning_ledger import WarningLedger
from src.utils.error_handler import ErrorHandler
from src.utils.interaction import safe_respond


# =============================================================================
# CovenantBot Class
# =============================================================================

class CovenantBot(commands.Bot):
    """
    Main Discord bot class.

    Attributes:
        store: JSON document store shared by every service.
        warning_ledger: Warning records and escalation.
        relationships: Proposal, marriage and divorce workflow.
        registration: Registration service, None when not configured.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, store: Optional[Store] = None) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
            application_id=self.config.application_id,
        )

        self.start_time: datetime = datetime.now()

        self.store = store or Store(self.config.data_dir)
        self.escalation = EscalationPolicy(
            self.store,
            Thresholds.from_config(self.config),
            self.config.auto_mute_minutes,
        )
        self.warning_ledger = WarningLedger(self.store, self.escalation)
        self.relationships = RelationshipWorkflow(
            self.store,
            unilateral_divorce=self.config.unilateral_divorce,
            request_ttl=self.config.pending_request_ttl,
        )
        self.registration: Optional[RegistrationService] = None
        if self.config.registration_enabled:
            self.registration = RegistrationService(RegistrationSheet.from_config(self.config))

        self.mute_scheduler: Optional[MuteScheduler] = None
        self.request_sweeper: Optional[RequestSweeper] = None
        self.health_server = None

        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs, register persistent buttons and sync commands."""
        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        from src.commands.marriage import setup_marriage_views
        setup_marriage_views(self)

        self.tree.error(self.on_app_command_error)

        guild = discord.Object(id=self.config.guild_id)
        self.tree.copy_global_to(guild=guild)
        try:
            synced = await self.tree.sync(guild=guild)
            logger.tree("Commands Synced", [
                ("Guild", str(self.config.guild_id)),
                ("Count", str(len(synced))),
            ], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Start background services once per process."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

        await self._init_services()

        logger.tree("COVENANT READY", [
            ("Mute Scheduler", "Running" if self.mute_scheduler else "Stopped"),
            ("Request Sweeper", "Running" if self.request_sweeper else "Stopped"),
            ("Registration", "Enabled" if self.registration else "Disabled"),
            ("Health Server", "Running" if self.health_server else "Disabled"),
        ], emoji="🔥")

    async def _init_services(self) -> None:
        self.mute_scheduler = MuteScheduler(self, self.store, self.config.mute_check_interval)
        await self.mute_scheduler.start()

        self.request_sweeper = RequestSweeper(
            self, self.relationships, self.config.request_sweep_interval
        )
        await self.request_sweeper.start()

        if self.config.health_port:
            from src.core.health import HealthCheckServer
            self.health_server = HealthCheckServer(self, self.config.health_port)
            await self.health_server.start()

    # =========================================================================
    # Error Handling
    # =========================================================================

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Last-resort handler so no command is left without a reply."""
        if isinstance(error, app_commands.CheckFailure):
            # The failing check has already replied
            if not interaction.response.is_done():
                await safe_respond(interaction, "❌ You can't use this command here.")
            return

        original = getattr(error, "original", error)
        if isinstance(original, CovenantError):
            await safe_respond(interaction, original.user_message)
            return

        ErrorHandler.handle(original, location="app_command", interaction=interaction)
        await safe_respond(interaction, "❌ An error occurred while running this command!")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Stop background services, then disconnect."""
        logger.info("Initiating Graceful Shutdown")

        if self.mute_scheduler:
            await self.mute_scheduler.stop()

        if self.request_sweeper:
            await self.request_sweeper.stop()

        if self.health_server:
            await self.health_server.stop()

        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["CovenantBot"]
