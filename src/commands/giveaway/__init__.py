"""
Community Bot - Giveaway Commands
=================================

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import GiveawayCog

if TYPE_CHECKING:
    from src.bot import CommunityBot


async def setup(bot: "CommunityBot") -> None:
    """Load the Giveaway cog."""
    await bot.add_cog(GiveawayCog(bot))
    logger.tree("Giveaway Cog Loaded", [
        ("Commands", "/giveaway create, end, list, reroll"),
    ], emoji="🎉")


__all__ = ["GiveawayCog", "setup"]
