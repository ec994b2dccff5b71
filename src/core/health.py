"""
Covenant Bot - Health Check Server
==================================

HTTP health check endpoint for external monitoring.

DESIGN:
    Lightweight aiohttp server running inside the bot's event loop.
    The /health endpoint reports connection state and store counters
    without exposing member data. Only started when HEALTH_PORT is set.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from aiohttp import web

from src.core.logger import logger, LOCAL_TZ

if TYPE_CHECKING:
    from src.bot import CovenantBot


# =============================================================================
# Health Check Server
# =============================================================================

class HealthCheckServer:
    """
    Simple HTTP health check server for monitoring.

    Attributes:
        bot: Reference to the main bot instance.
        port: Port number for the HTTP server.
        app: aiohttp Application instance.
        runner: aiohttp AppRunner for lifecycle management.
    """

    def __init__(self, bot: "CovenantBot", port: int = 8080) -> None:
        self.bot = bot
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None

        self.app.router.add_get("/health", self.health_handler)
        self.app.router.add_get("/", self.health_handler)

    # =========================================================================
    # Request Handlers
    # =========================================================================

    def status(self) -> Dict[str, Any]:
        """Current bot status as a JSON-serializable mapping."""
        is_connected = self.bot.is_ready()
        store = self.bot.store
        return {
            "status": "healthy" if is_connected else "starting",
            "bot": "Covenant",
            "connected": is_connected,
            "guilds": len(self.bot.guilds),
            "active_mutes": store.count_active_mutes(),
            "pending_proposals": len(store.proposals),
            "pending_divorces": len(store.divorces),
            "timestamp": datetime.now(LOCAL_TZ).isoformat(),
        }

    async def health_handler(self, request: web.Request) -> web.Response:
        try:
            status = self.status()
        except Exception as e:
            logger.error("Health Check Error", [
                ("Error", str(e)[:100]),
            ])
            return web.json_response({"status": "error", "error": str(e)}, status=500)

        logger.debug("Health Check", [("Status", status["status"])])
        return web.json_response(status)

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """Start serving on 0.0.0.0:port. Failure is logged, not raised."""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, "0.0.0.0", self.port)
            await site.start()
        except OSError as e:
            logger.error("Health Server Startup Failed", [
                ("Port", str(self.port)),
                ("Error", str(e)[:100]),
            ])
            return

        logger.tree("Health Server Started", [
            ("Port", str(self.port)),
            ("Endpoint", f"http://0.0.0.0:{self.port}/health"),
        ], emoji="🏥")

    async def stop(self) -> None:
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Health Server Stopped")


__all__ = ["HealthCheckServer"]
