"""
Ticket Route Handlers
=====================

Dispatcher routes for panel buttons and ticket Claim / Close buttons.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord

from src.core.config import EmbedColors
from src.utils.interaction import safe_defer, safe_respond

from .constants import CLAIM_PREFIX, CLOSE_PREFIX, PANEL_BUTTON_PREFIX
from .service import TicketService

if TYPE_CHECKING:
    from src.services.dispatcher import InteractionDispatcher


def _result_embed(success: bool, message: str) -> discord.Embed:
    return discord.Embed(
        description=f"{'✅' if success else '❌'} {message}",
        color=EmbedColors.SUCCESS if success else EmbedColors.ERROR,
    )


def _channel_id(suffix: str):
    return int(suffix) if suffix.isdigit() else None


class TicketRoutes:
    """Binds ticket custom ids to TicketService."""

    def __init__(self, service: TicketService) -> None:
        self.service = service

    def register(self, dispatcher: "InteractionDispatcher") -> None:
        dispatcher.register(PANEL_BUTTON_PREFIX, self.on_panel_button, "Ticket Panel")
        dispatcher.register(CLAIM_PREFIX, self.on_claim, "Ticket Claim")
        dispatcher.register(CLOSE_PREFIX, self.on_close, "Ticket Close")

    async def on_panel_button(self, interaction: discord.Interaction, type_value: str) -> None:
        if interaction.guild is None or not isinstance(interaction.user, discord.Member):
            await safe_respond(interaction, "❌ Tickets can only be opened in a server.")
            return
        # Channel creation can take longer than the 3 second response window
        await safe_defer(interaction, thinking=True)
        success, message = await self.service.open_ticket(interaction.user, type_value)
        await safe_respond(interaction, embed=_result_embed(success, message))

    async def on_claim(self, interaction: discord.Interaction, suffix: str) -> None:
        channel_id = _channel_id(suffix)
        if channel_id is None or not isinstance(interaction.user, discord.Member):
            await safe_respond(interaction, "❌ This ticket button is invalid.")
            return
        success, message = await self.service.claim_ticket(interaction.user, channel_id)
        await safe_respond(interaction, embed=_result_embed(success, message))

    async def on_close(self, interaction: discord.Interaction, suffix: str) -> None:
        channel_id = _channel_id(suffix)
        if channel_id is None or not isinstance(interaction.user, discord.Member):
            await safe_respond(interaction, "❌ This ticket button is invalid.")
            return
        success, message = await self.service.close_ticket(interaction, channel_id)
        await safe_respond(interaction, embed=_result_embed(success, message))


__all__ = ["TicketRoutes"]
