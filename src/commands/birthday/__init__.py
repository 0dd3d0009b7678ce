"""
Community Bot - Birthday Commands
=================================

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import BirthdayCog

if TYPE_CHECKING:
    from src.bot import CommunityBot


async def setup(bot: "CommunityBot") -> None:
    """Load the Birthday cog."""
    await bot.add_cog(BirthdayCog(bot))
    logger.tree("Birthday Cog Loaded", [
        ("Commands", "/birthday set, remove, view, list, channel"),
    ], emoji="🎂")


__all__ = ["BirthdayCog", "setup"]
