"""
Community Bot - Giveaway Cog
============================

/giveaway create, end, list and reroll.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import EmbedColors, check_manage_permission
from src.core.constants import GIVEAWAY_MAX_BONUS_ENTRIES, GIVEAWAY_MAX_DURATION_MINUTES, GIVEAWAY_MAX_WINNERS
from src.core.logger import logger
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import CommunityBot


def _parse_message_id(raw: str) -> Optional[int]:
    """Accept a bare id or a message link."""
    tail = raw.strip().rstrip("/").split("/")[-1]
    return int(tail) if tail.isdigit() else None


@app_commands.guild_only()
@app_commands.default_permissions(manage_guild=True)
class GiveawayCog(commands.GroupCog, group_name="giveaway", group_description="Run giveaways"):
    """Giveaway administration."""

    def __init__(self, bot: "CommunityBot") -> None:
        self.bot = bot
        super().__init__()

    def _lookup(self, interaction: discord.Interaction, raw: str) -> Optional[dict]:
        message_id = _parse_message_id(raw)
        if message_id is None:
            return None
        giveaway = self.bot.db.get_giveaway_by_message(message_id)
        if giveaway is None or giveaway["guild_id"] != interaction.guild_id:
            return None
        return giveaway

    # =========================================================================
    # /giveaway create
    # =========================================================================

    @app_commands.command(name="create", description="Start a giveaway in this channel")
    @app_commands.describe(
        title="What is being given away",
        duration_minutes="How long the giveaway runs",
        winners="Number of winners",
        description="Extra details shown on the giveaway",
        bonus_role="Role that earns extra entries",
        bonus_entries="Extra entries for the bonus role",
    )
    async def create(
        self,
        interaction: discord.Interaction,
        title: app_commands.Range[str, 1, 200],
        duration_minutes: app_commands.Range[int, 1, GIVEAWAY_MAX_DURATION_MINUTES],
        winners: app_commands.Range[int, 1, GIVEAWAY_MAX_WINNERS] = 1,
        description: Optional[app_commands.Range[str, 1, 1000]] = None,
        bonus_role: Optional[discord.Role] = None,
        bonus_entries: Optional[app_commands.Range[int, 1, GIVEAWAY_MAX_BONUS_ENTRIES]] = None,
    ) -> None:
        if not await check_manage_permission(interaction):
            return

        bonus_roles = []
        if bonus_role is not None:
            bonus_roles.append({"role_id": bonus_role.id, "entries": bonus_entries or 1})

        await safe_defer(interaction)
        giveaway = await self.bot.giveaway_service.create_giveaway(
            interaction.channel,
            interaction.user,
            title,
            duration_minutes,
            winners,
            description=description,
            bonus_roles=bonus_roles,
        )
        if giveaway is None:
            await safe_respond(interaction, "❌ I couldn't post the giveaway in this channel.")
            return
        await safe_respond(interaction, embed=discord.Embed(
            description=f"🎉 Giveaway **{title}** started! It ends <t:{int(giveaway['end_time'])}:R>.",
            color=EmbedColors.SUCCESS,
        ))

    # =========================================================================
    # /giveaway end
    # =========================================================================

    @app_commands.command(name="end", description="End a giveaway now")
    @app_commands.describe(message_id="Giveaway message ID or link")
    async def end(self, interaction: discord.Interaction, message_id: str) -> None:
        if not await check_manage_permission(interaction):
            return

        giveaway = self._lookup(interaction, message_id)
        if giveaway is None:
            await safe_respond(interaction, "❌ No giveaway found for that message.")
            return
        if giveaway["ended"]:
            await safe_respond(interaction, "This giveaway has already ended. Use `/giveaway reroll` instead.")
            return

        confirmed = await self.bot.confirmation.ask(
            interaction,
            f"End **{giveaway['title']}** now and draw {giveaway['winners']} winner(s)?",
            title="End Giveaway",
        )
        if not confirmed:
            return

        winners = await self.bot.giveaway_service.end_giveaway(giveaway)
        if winners is None:
            await safe_respond(interaction, "❌ The giveaway could not be ended. It may already be over or its message is gone.")
            return

        logger.tree("Giveaway Ended Early", [
            ("ID", str(giveaway["id"])),
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
        ], emoji="⏹️")
        await safe_respond(interaction, f"✅ Ended with {len(winners)} winner(s).")

    # =========================================================================
    # /giveaway list
    # =========================================================================

    @app_commands.command(name="list", description="Show running giveaways")
    async def list_giveaways(self, interaction: discord.Interaction) -> None:
        giveaways = self.bot.db.get_active_giveaways(interaction.guild_id)
        if not giveaways:
            await safe_respond(interaction, "There are no running giveaways.")
            return

        lines = []
        for giveaway in giveaways:
            link = f"https://discord.com/channels/{giveaway['guild_id']}/{giveaway['channel_id']}/{giveaway['message_id']}"
            lines.append(
                f"**[{giveaway['title']}]({link})** ends <t:{int(giveaway['end_time'])}:R>"
                f" · {len(giveaway['participants'])} participants"
            )
        embed = discord.Embed(
            title=f"🎉 Running Giveaways ({len(giveaways)})",
            description="\n".join(lines)[:4000],
            color=EmbedColors.GIVEAWAY,
        )
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /giveaway reroll
    # =========================================================================

    @app_commands.command(name="reroll", description="Draw new winners for an ended giveaway")
    @app_commands.describe(message_id="Giveaway message ID or link")
    async def reroll(self, interaction: discord.Interaction, message_id: str) -> None:
        if not await check_manage_permission(interaction):
            return

        giveaway = self._lookup(interaction, message_id)
        if giveaway is None:
            await safe_respond(interaction, "❌ No giveaway found for that message.")
            return
        if not giveaway["ended"]:
            await safe_respond(interaction, "This giveaway is still running.")
            return

        await safe_defer(interaction)
        winners = await self.bot.giveaway_service.reroll(giveaway)
        if winners:
            await safe_respond(interaction, f"🔁 New winner(s): {', '.join(f'<@{w}>' for w in winners)}")
        else:
            await safe_respond(interaction, "No eligible participants left to draw from.")


__all__ = ["GiveawayCog"]
