"""
Giveaway Route Handlers
=======================

Join and Participants buttons on giveaway messages.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord

from src.core.config import EmbedColors
from src.core.database import DatabaseManager
from src.utils.interaction import safe_respond

from .embeds import JOIN_ID, PARTICIPANTS_ID, build_participants_embed
from .service import GiveawayService

if TYPE_CHECKING:
    from src.services.dispatcher import InteractionDispatcher


class GiveawayRoutes:
    def __init__(self, db: DatabaseManager, service: GiveawayService) -> None:
        self.db = db
        self.service = service

    def register(self, dispatcher: "InteractionDispatcher") -> None:
        dispatcher.register(JOIN_ID, self.on_join, "Giveaway Join")
        dispatcher.register(PARTICIPANTS_ID, self.on_participants, "Giveaway Participants")

    async def on_join(self, interaction: discord.Interaction, _: str) -> None:
        if interaction.message is None or not isinstance(interaction.user, discord.Member):
            await safe_respond(interaction, "❌ This giveaway can't be joined from here.")
            return
        success, message = await self.service.join(interaction.user, interaction.message)
        embed = discord.Embed(
            description=f"{'🎉' if success else '❌'} {message}",
            color=EmbedColors.SUCCESS if success else EmbedColors.ERROR,
        )
        await safe_respond(interaction, embed=embed)

    async def on_participants(self, interaction: discord.Interaction, _: str) -> None:
        giveaway = self.db.get_giveaway_by_message(interaction.message.id) if interaction.message else None
        if giveaway is None:
            await safe_respond(interaction, "❌ This giveaway no longer exists.")
            return
        await safe_respond(interaction, embed=build_participants_embed(giveaway))


__all__ = ["GiveawayRoutes"]
