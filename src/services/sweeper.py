"""
Community Bot - Session Sweeper
===============================

Periodically drops idle wizard sessions and stale interaction guard
entries so neither grows without bound.

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import Optional

from src.core.constants import SWEEP_INTERVAL
from src.core.logger import logger
from src.services.dispatcher import InteractionGuard
from src.services.wizard import SessionStore
from src.utils.async_utils import create_safe_task


class SweeperService:
    """
    Background sweep of in-memory state.

    Attributes:
        store: Wizard session store.
        guard: Interaction dedup guard.
        interval: Seconds between sweeps.
    """

    def __init__(self, store: SessionStore, guard: InteractionGuard, interval: float = SWEEP_INTERVAL) -> None:
        self.store = store
        self.guard = guard
        self.interval = interval
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()
        self.running = True
        self.task = create_safe_task(self._loop(), "Session Sweeper")
        logger.tree("Session Sweeper Started", [
            ("Interval", f"{self.interval}s"),
        ], emoji="🧹")

    async def stop(self) -> None:
        self.running = False
        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        logger.info("Session Sweeper Stopped")

    async def _loop(self) -> None:
        while self.running:
            await asyncio.sleep(self.interval)
            self.sweep()

    def sweep(self) -> tuple:
        """Run one sweep. Returns (sessions_removed, guard_entries_removed)."""
        sessions = self.store.sweep()
        entries = self.guard.sweep()
        if sessions or entries:
            logger.debug("Sweep Complete", [
                ("Wizard Sessions", str(sessions)),
                ("Guard Entries", str(entries)),
            ])
        return sessions, entries


__all__ = ["SweeperService"]
