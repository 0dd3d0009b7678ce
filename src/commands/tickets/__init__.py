"""
Community Bot - Ticket Commands
===============================

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import TicketCog

if TYPE_CHECKING:
    from src.bot import CommunityBot


async def setup(bot: "CommunityBot") -> None:
    """Load the Ticket cog."""
    await bot.add_cog(TicketCog(bot))
    logger.tree("Ticket Cog Loaded", [
        ("Commands", "/ticket setup, /ticket edit, /ticket panel"),
    ], emoji="🎫")


__all__ = ["TicketCog", "setup"]
