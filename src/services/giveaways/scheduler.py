"""
Giveaway Scheduler
==================

Background loop that ends expired giveaways.

DESIGN:
    Every check handles at most a few expired giveaways so a backlog
    after downtime is worked off gradually instead of in one burst of
    API calls. Ended giveaways older than the retention window are
    purged on the same tick.

Author: حَـــــنَّـــــا
"""

import asyncio
import time
from typing import Optional

import discord

from src.core.config import get_config
from src.core.constants import GIVEAWAY_MAX_PER_TICK, GIVEAWAY_RETENTION_DAYS, SECONDS_PER_DAY
from src.core.database import DatabaseManager
from src.core.logger import logger
from src.utils.async_utils import create_safe_task

from .service import GiveawayService


class GiveawayScheduler:
    """
    Giveaway expiry loop.

    Attributes:
        service: Ends giveaways.
        interval: Seconds between checks.
        task: Background loop task.
        running: Whether the loop should keep going.
    """

    def __init__(self, bot: discord.Client, db: DatabaseManager, service: GiveawayService) -> None:
        self.bot = bot
        self.db = db
        self.service = service
        self.interval = get_config().giveaway_check_interval
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()
        self.running = True
        self.task = create_safe_task(self._loop(), "Giveaway Scheduler")
        logger.tree("Giveaway Scheduler Started", [
            ("Check Interval", f"{self.interval}s"),
            ("Per Tick", str(GIVEAWAY_MAX_PER_TICK)),
        ], emoji="🎉")

    async def stop(self) -> None:
        self.running = False
        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        logger.info("Giveaway Scheduler Stopped")

    async def _loop(self) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await self.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Giveaway Scheduler Error", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
            await asyncio.sleep(self.interval)

    async def tick(self, now: Optional[float] = None) -> int:
        """
        End up to GIVEAWAY_MAX_PER_TICK expired giveaways and purge old ones.

        Returns:
            Number of giveaways processed.
        """
        now = time.time() if now is None else now
        expired = self.db.get_expired_giveaways(now, GIVEAWAY_MAX_PER_TICK)
        for giveaway in expired:
            try:
                await self.service.end_giveaway(giveaway)
            except discord.HTTPException as e:
                logger.warning("Giveaway End Failed", [
                    ("ID", str(giveaway["id"])),
                    ("Error", str(e)[:80]),
                ])

        self.db.purge_old_giveaways(now - GIVEAWAY_RETENTION_DAYS * SECONDS_PER_DAY)
        return len(expired)


__all__ = ["GiveawayScheduler"]
