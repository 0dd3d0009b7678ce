"""
Community Bot - Birthday Cog
============================

Members store their birthday; admins pick the announcement channel.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import EmbedColors, check_manage_permission
from src.services.birthdays import build_set_embed, format_date, is_valid_date
from src.utils.footer import set_footer
from src.utils.interaction import safe_respond

if TYPE_CHECKING:
    from src.bot import CommunityBot


LIST_LIMIT = 40


@app_commands.guild_only()
class BirthdayCog(commands.GroupCog, group_name="birthday", group_description="Birthday announcements"):
    """Birthday commands."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot
        super().__init__()

    @app_commands.command(name="set", description="Set your birthday")
    @app_commands.describe(day="Day of the month", month="Month number (1-12)")
    async def set_birthday(
        self,
        interaction: discord.Interaction,
        day: app_commands.Range[int, 1, 31],
        month: app_commands.Range[int, 1, 12],
    ) -> None:
        if not is_valid_date(day, month):
            await safe_respond(interaction, f"❌ {day}/{month} is not a valid date.")
            return
        self.bot.db.set_birthday(interaction.user.id, interaction.guild_id, day, month)
        await safe_respond(interaction, embed=build_set_embed(interaction.user, day, month))

    @app_commands.command(name="remove", description="Remove your birthday")
    async def remove(self, interaction: discord.Interaction) -> None:
        if self.bot.db.remove_birthday(interaction.user.id, interaction.guild_id):
            await safe_respond(interaction, "🗑️ Your birthday has been removed.")
        else:
            await safe_respond(interaction, "You don't have a birthday set.")

    @app_commands.command(name="view", description="Show someone's birthday")
    @app_commands.describe(user="Member to look up (defaults to you)")
    async def view(self, interaction: discord.Interaction, user: Optional[discord.Member] = None) -> None:
        target = user or interaction.user
        record = self.bot.db.get_birthday(target.id, interaction.guild_id)
        if record is None:
            await safe_respond(interaction, f"{target.mention} has no birthday set.")
            return
        await safe_respond(interaction, f"🎂 {target.mention}'s birthday is **{format_date(record['day'], record['month'])}**.")

    @app_commands.command(name="list", description="List birthdays in this server")
    async def list_birthdays(self, interaction: discord.Interaction) -> None:
        records = self.bot.db.get_guild_birthdays(interaction.guild_id)
        if not records:
            await safe_respond(interaction, "No birthdays have been set yet.")
            return

        lines = [
            f"**{format_date(r['day'], r['month'])}** <@{r['user_id']}>"
            for r in records[:LIST_LIMIT]
        ]
        if len(records) > LIST_LIMIT:
            lines.append(f"... and {len(records) - LIST_LIMIT} more")
        embed = discord.Embed(
            title=f"🎂 Birthdays ({len(records)})",
            description="\n".join(lines),
            color=EmbedColors.BIRTHDAY,
        )
        await safe_respond(interaction, embed=set_footer(embed, interaction.guild.name))

    @app_commands.command(name="channel", description="Set the birthday announcement channel")
    @app_commands.describe(channel="Where birthdays are announced")
    async def channel(self, interaction: discord.Interaction, channel: discord.TextChannel) -> None:
        if not await check_manage_permission(interaction):
            return
        self.bot.db.update_guild_config(interaction.guild_id, birthday_channel=channel.id)
        await safe_respond(interaction, f"✅ Birthdays will be announced in {channel.mention}.")


__all__ = ["BirthdayCog"]
