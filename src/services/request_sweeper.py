"""
Covenant Bot - Request Sweeper Service
======================================

Background service that discards stale proposals and divorce requests.

DESIGN:
    Purely time-based. Expired requests are dropped without notifying
    anyone; their buttons answer "expired" if clicked afterwards.
"""

import asyncio
from typing import TYPE_CHECKING, Optional, Tuple

from src.core.logger import logger
from src.services.relationship import RelationshipWorkflow

if TYPE_CHECKING:
    from src.bot import CovenantBot


class RequestSweeper:
    """
    Periodic sweep of pending relationship requests.

    Attributes:
        bot: Reference to the main bot instance.
        workflow: Relationship workflow owning the requests.
        interval: Seconds between sweeps.
    """

    def __init__(
        self,
        bot: "CovenantBot",
        workflow: RelationshipWorkflow,
        interval: int = 600,
    ) -> None:
        self.bot = bot
        self.workflow = workflow
        self.interval = interval
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._sweeper_loop())

        logger.tree("Request Sweeper Started", [
            ("Check Interval", f"{self.interval}s"),
            ("Request TTL", f"{self.workflow.request_ttl}s"),
        ], emoji="🧹")

    async def stop(self) -> None:
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        logger.info("Request Sweeper Stopped")

    async def _sweeper_loop(self) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                self.sweep()
            except Exception as e:
                logger.error("Request Sweeper Error", [
                    ("Error", str(e)[:100]),
                ])
            await asyncio.sleep(self.interval)

    def sweep(self, now: Optional[int] = None) -> Tuple[int, int]:
        """
        Drop expired requests once.

        Returns:
            Tuple of (expired proposals, expired divorce requests).
        """
        proposals, divorces = self.workflow.expire_pending(now)
        if proposals or divorces:
            logger.tree("Stale Requests Swept", [
                ("Proposals", str(proposals)),
                ("Divorce Requests", str(divorces)),
            ], emoji="🧹")
        return proposals, divorces


__all__ = ["RequestSweeper"]
