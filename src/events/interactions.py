"""
Community Bot - Interaction Events
==================================

Feeds every component and modal interaction to the dispatcher.

DESIGN:
    Slash commands are handled by the command tree; everything with a
    custom id (buttons, selects, modals) goes through one listener so
    dedup and error policy live in a single place.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import CommunityBot


class InteractionEvents(commands.Cog):
    """Component and modal interaction routing."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type not in (
            discord.InteractionType.component,
            discord.InteractionType.modal_submit,
        ):
            return
        await self.bot.dispatcher.dispatch(interaction)


async def setup(bot: "CommunityBot") -> None:
    """Add the interaction events cog to the bot."""
    await bot.add_cog(InteractionEvents(bot))
    logger.debug("Interaction Events Loaded")
