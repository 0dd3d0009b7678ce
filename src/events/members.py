"""
Community Bot - Member Events
=============================

Handles member joins.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import CommunityBot


class MemberEvents(commands.Cog):
    """Member event handlers."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        """Assign the welcome role and post the welcome message."""
        if member.bot:
            return

        logger.tree("Member Joined", [
            ("Member", f"{member.name} ({member.id})"),
            ("Guild", f"{member.guild.name} ({member.guild.id})"),
            ("Member Count", str(member.guild.member_count)),
        ], emoji="👋")
        await self.bot.welcome_service.on_member_join(member)

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        """Event handler for bot resuming connection after disconnect."""
        logger.info("Bot Connection Resumed")


async def setup(bot: "CommunityBot") -> None:
    """Add the member events cog to the bot."""
    await bot.add_cog(MemberEvents(bot))
    logger.debug("Member Events Loaded")
