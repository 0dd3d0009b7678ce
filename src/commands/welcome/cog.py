"""
Community Bot - Welcome Cog
===========================

/welcome setup and /welcome test.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import check_manage_permission
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import CommunityBot


@app_commands.guild_only()
@app_commands.default_permissions(manage_guild=True)
class WelcomeCog(commands.GroupCog, group_name="welcome", group_description="Welcome messages"):
    """Welcome message administration."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot
        super().__init__()

    @app_commands.command(name="setup", description="Configure the welcome message")
    async def setup(self, interaction: discord.Interaction) -> None:
        if not await check_manage_permission(interaction):
            return
        await self.bot.welcome_routes.open(interaction)

    @app_commands.command(name="test", description="Send the welcome message for yourself")
    async def test(self, interaction: discord.Interaction) -> None:
        if not await check_manage_permission(interaction):
            return

        config = self.bot.db.get_guild_config(interaction.guild_id)
        if not config.get("welcome_channel"):
            await safe_respond(interaction, "❌ Set a welcome channel in `/welcome setup` first.")
            return

        await safe_defer(interaction)
        message = await self.bot.welcome_service.send_welcome(interaction.user, config)
        if message is None:
            await safe_respond(interaction, "❌ The welcome message could not be sent.")
        else:
            await safe_respond(interaction, f"✅ Sent: {message.jump_url}")


__all__ = ["WelcomeCog"]
