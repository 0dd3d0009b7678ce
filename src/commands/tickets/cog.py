"""
Community Bot - Ticket Cog
==========================

/ticket setup, /ticket edit and /ticket panel.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import EmbedColors, check_manage_permission
from src.core.logger import logger
from src.services.wizard import TicketDraft, open_wizard
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import CommunityBot


@app_commands.guild_only()
@app_commands.default_permissions(manage_guild=True)
class TicketCog(commands.GroupCog, group_name="ticket", group_description="Ticket system setup"):
    """Ticket system administration."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot
        super().__init__()

    @app_commands.command(name="setup", description="Create the ticket system with a step-by-step wizard")
    async def setup(self, interaction: discord.Interaction) -> None:
        if not await check_manage_permission(interaction):
            return
        await open_wizard(interaction, self.bot.wizard)

    @app_commands.command(name="edit", description="Change the existing ticket system")
    async def edit(self, interaction: discord.Interaction) -> None:
        if not await check_manage_permission(interaction):
            return

        system = self.bot.db.get_ticket_system(interaction.guild_id)
        if system is None:
            await safe_respond(interaction, "❌ No ticket system yet. Use `/ticket setup` first.")
            return
        await open_wizard(interaction, self.bot.wizard, TicketDraft.from_record(system))

    @app_commands.command(name="panel", description="Post the ticket panel again")
    async def panel(self, interaction: discord.Interaction) -> None:
        if not await check_manage_permission(interaction):
            return

        system = self.bot.db.get_ticket_system(interaction.guild_id)
        if system is None:
            await safe_respond(interaction, "❌ No ticket system yet. Use `/ticket setup` first.")
            return

        await safe_defer(interaction)
        message = await self.bot.ticket_service.post_panel(interaction.guild, system)
        if message is None:
            await safe_respond(interaction, embed=discord.Embed(
                description="❌ The panel could not be posted. Check that I can send messages in the panel channel.",
                color=EmbedColors.ERROR,
            ))
            return

        logger.tree("Ticket Panel Reposted", [
            ("Guild", f"{interaction.guild.name} ({interaction.guild_id})"),
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
        ], emoji="📌")
        await safe_respond(interaction, embed=discord.Embed(
            description=f"✅ Panel posted: {message.jump_url}",
            color=EmbedColors.SUCCESS,
        ))


__all__ = ["TicketCog"]
