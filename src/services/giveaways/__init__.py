"""
Giveaways Package
=================

Author: حَـــــنَّـــــا
"""

from .draw import calculate_entries, capped_entries, draw_winners, total_entries
from .handlers import GiveawayRoutes
from .scheduler import GiveawayScheduler
from .service import GiveawayService

__all__ = [
    "GiveawayService",
    "GiveawayScheduler",
    "GiveawayRoutes",
    "calculate_entries",
    "capped_entries",
    "draw_winners",
    "total_entries",
]
