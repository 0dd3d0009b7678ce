"""
Community Bot - Welcome Commands
================================

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import WelcomeCog

if TYPE_CHECKING:
    from src.bot import CommunityBot


async def setup(bot: "CommunityBot") -> None:
    """Load the Welcome cog."""
    await bot.add_cog(WelcomeCog(bot))
    logger.tree("Welcome Cog Loaded", [
        ("Commands", "/welcome setup, /welcome test"),
    ], emoji="👋")


__all__ = ["WelcomeCog", "setup"]
