"""
Interaction Guard
=================

At-most-once handling of a physical interaction.

DESIGN:
    Discord can deliver the same interaction twice (gateway resumes,
    double clicks on a slow client). should_process() claims an
    interaction id; a second claim while the first is in flight returns
    False. mark_complete() must run in a finally block. Entries whose
    handler never completed are dropped by sweep() after ``timeout``
    seconds, and a stale entry is treated as absent even before a sweep.

Author: حَـــــنَّـــــا
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from src.core.logger import logger


@dataclass
class GuardEntry:
    interaction_id: int
    started_at: float
    route_key: str = ""
    user_id: int = 0


class InteractionGuard:
    """
    In-flight interaction set with a timeout.

    Args:
        timeout: Seconds an entry may stay in flight.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.timeout = timeout
        self._clock = clock
        self._entries: Dict[int, GuardEntry] = {}

    def should_process(self, interaction_id: int, route_key: str = "", user_id: int = 0) -> bool:
        """Claim ``interaction_id``. False if it is already in flight."""
        now = self._clock()
        entry = self._entries.get(interaction_id)
        if entry is not None and now - entry.started_at <= self.timeout:
            logger.debug("Duplicate Interaction Dropped", [
                ("Interaction ID", str(interaction_id)),
                ("Route", route_key or "-"),
                ("User ID", str(user_id)),
            ])
            return False

        self._entries[interaction_id] = GuardEntry(interaction_id, now, route_key, user_id)
        return True

    def mark_complete(self, interaction_id: int) -> None:
        self._entries.pop(interaction_id, None)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop entries older than the timeout. Returns how many were dropped."""
        now = self._clock() if now is None else now
        stale = [
            interaction_id for interaction_id, entry in self._entries.items()
            if now - entry.started_at > self.timeout
        ]
        for interaction_id in stale:
            del self._entries[interaction_id]
        if stale:
            logger.debug("Interaction Guard Swept", [("Removed", str(len(stale)))])
        return len(stale)

    def __contains__(self, interaction_id: int) -> bool:
        return interaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["GuardEntry", "InteractionGuard"]
