"""
Birthday Scheduler
==================

Posts one birthday announcement per guild per day.

DESIGN:
    Runs once shortly after startup, then every day at the configured
    hour in NY_TZ. The date of the last completed run is stored in
    bot_state, so a restart on the same day never announces twice. A
    failed run leaves the date unset and is retried after a delay.

Author: حَـــــنَّـــــا
"""

import asyncio
from datetime import datetime
from typing import Optional

import discord

from src.core.config import NY_TZ, get_config
from src.core.constants import BIRTHDAY_RETRY_DELAY
from src.core.database import DatabaseManager
from src.core.logger import logger
from src.utils.async_utils import create_safe_task
from src.utils.retry import safe_send

from .helpers import build_announcement_embed, date_key, seconds_until


LAST_SENT_KEY = "birthday_last_sent_date"


class BirthdayScheduler:
    """
    Daily birthday announcer.

    Attributes:
        bot: Client used to resolve guilds and channels.
        db: Database manager.
        task: Background loop task.
        running: Whether the loop should keep going.
    """

    def __init__(self, bot: discord.Client, db: DatabaseManager) -> None:
        self.bot = bot
        self.db = db
        self.hour = get_config().birthday_announce_hour
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()
        self.running = True
        self.task = create_safe_task(self._loop(), "Birthday Scheduler")
        logger.tree("Birthday Scheduler Started", [
            ("Announce At", f"{self.hour:02d}:00 EST"),
            ("Last Sent", str(self.db.get_bot_state(LAST_SENT_KEY, "never"))),
        ], emoji="🎂")

    async def stop(self) -> None:
        self.running = False
        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        logger.info("Birthday Scheduler Stopped")

    async def _loop(self) -> None:
        await self.bot.wait_until_ready()

        delay = 0.0
        while self.running:
            if delay:
                await asyncio.sleep(delay)
            try:
                await self.check_birthdays()
                delay = seconds_until(self.hour)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Birthday Check Failed", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                    ("Retry In", f"{BIRTHDAY_RETRY_DELAY}s"),
                ])
                delay = BIRTHDAY_RETRY_DELAY

    # =========================================================================
    # Check
    # =========================================================================

    async def check_birthdays(self, now: Optional[datetime] = None) -> int:
        """
        Announce today's birthdays unless today was already handled.

        Returns:
            Number of guilds an announcement was posted in.
        """
        now = now or datetime.now(NY_TZ)
        today = date_key(now)
        if self.db.get_bot_state(LAST_SENT_KEY) == today:
            logger.debug("Birthday Check Skipped", [("Date", today)])
            return 0

        local = now.astimezone(NY_TZ)
        announced = 0
        for guild_id, channel_id in self.db.get_guilds_with_setting("birthday_channel"):
            if await self._announce_guild(guild_id, channel_id, local.day, local.month):
                announced += 1

        self.db.set_bot_state(LAST_SENT_KEY, today)
        logger.tree("Birthday Check Complete", [
            ("Date", today),
            ("Guilds Announced", str(announced)),
        ], emoji="🎂")
        return announced

    async def _announce_guild(self, guild_id: int, channel_id: int, day: int, month: int) -> bool:
        guild = self.bot.get_guild(guild_id)
        if guild is None:
            return False

        birthdays = self.db.get_birthdays_on(guild_id, day, month)
        if not birthdays:
            return False

        channel = guild.get_channel(channel_id)
        if channel is None:
            logger.warning("Birthday Channel Missing", [
                ("Guild", f"{guild.name} ({guild.id})"),
                ("Channel ID", str(channel_id)),
            ])
            return False

        embed = build_announcement_embed(guild, [b["user_id"] for b in birthdays])
        return await safe_send(channel, embed=embed) is not None


__all__ = ["BirthdayScheduler", "LAST_SENT_KEY"]
