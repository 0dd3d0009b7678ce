"""
Giveaway Service
================

Creating, joining, ending and rerolling giveaways.

DESIGN:
    The giveaway row is written before the message is posted so the
    message can carry the giveaway id in its footer; if posting fails the
    row is removed again. Ending is conditional on ``ended = 0`` so the
    scheduler and /giveaway end can race without drawing twice.

Author: حَـــــنَّـــــا
"""

import random
import time
from typing import List, Optional, Tuple

import discord

from src.core.constants import SECONDS_PER_MINUTE
from src.core.database import DatabaseManager
from src.core.logger import logger
from src.utils.retry import fetch_channel, fetch_message, safe_send

from .draw import calculate_entries, draw_winners
from .embeds import (
    build_ended_embed,
    build_giveaway_embed,
    build_giveaway_view,
    build_winner_announcement,
)


class GiveawayService:
    """
    Giveaway lifecycle.

    Args:
        bot: Client used to resolve channels and members.
        db: Database manager.
        rng: Random source for draws.
    """

    def __init__(self, bot: discord.Client, db: DatabaseManager, rng: Optional[random.Random] = None) -> None:
        self.bot = bot
        self.db = db
        self.rng = rng or random.Random()

    # =========================================================================
    # Create
    # =========================================================================

    async def create_giveaway(
        self,
        channel: discord.abc.Messageable,
        host: discord.abc.User,
        title: str,
        duration_minutes: int,
        winners: int,
        description: Optional[str] = None,
        bonus_roles: Optional[List[dict]] = None,
    ) -> Optional[dict]:
        """
        Store and post a giveaway.

        Returns:
            The giveaway record, or None if the message could not be posted.
        """
        guild_id = channel.guild.id
        end_time = time.time() + duration_minutes * SECONDS_PER_MINUTE
        giveaway_id = self.db.create_giveaway(
            guild_id=guild_id,
            channel_id=channel.id,
            title=title,
            end_time=end_time,
            winners=winners,
            created_by=host.id,
            description=description,
            bonus_roles=bonus_roles,
        )
        giveaway = self.db.get_giveaway(giveaway_id)

        message = await safe_send(channel, embed=build_giveaway_embed(giveaway), view=build_giveaway_view())
        if message is None:
            self.db.delete_giveaway(giveaway_id)
            return None

        self.db.set_giveaway_message(giveaway_id, message.id)
        giveaway["message_id"] = message.id
        return giveaway

    # =========================================================================
    # Join
    # =========================================================================

    async def join(self, member: discord.Member, message: discord.Message) -> Tuple[bool, str]:
        giveaway = self.db.get_giveaway_by_message(message.id)
        if giveaway is None:
            return (False, "This giveaway no longer exists.")
        if giveaway["ended"] or giveaway["end_time"] <= time.time():
            return (False, "This giveaway has already ended.")
        if member.id in giveaway["participants"]:
            return (False, "You have already joined this giveaway.")

        entries = calculate_entries((role.id for role in member.roles), giveaway["bonus_roles"])
        participants = self.db.add_giveaway_participant(giveaway["id"], member.id, entries)
        if participants is None:
            return (False, "You have already joined this giveaway.")

        giveaway["participants"] = participants
        try:
            await message.edit(embed=build_giveaway_embed(giveaway))
        except discord.HTTPException as e:
            logger.debug("Giveaway Embed Refresh Failed", [("Error", str(e)[:80])])

        logger.tree("Giveaway Joined", [
            ("Giveaway", f"#{giveaway['id']} {giveaway['title'][:40]}"),
            ("Member", f"{member.name} ({member.id})"),
            ("Entries", str(entries)),
        ], emoji="🎟️")
        word = "entry" if entries == 1 else "entries"
        return (True, f"You joined **{giveaway['title']}** with **{entries}** {word}!")

    # =========================================================================
    # End / Reroll
    # =========================================================================

    def _eligible(self, giveaway: dict, guild: Optional[discord.Guild]) -> dict:
        """Participants still in the guild."""
        if guild is None:
            return dict(giveaway["participants"])
        return {
            user_id: entries
            for user_id, entries in giveaway["participants"].items()
            if guild.get_member(user_id) is not None
        }

    async def end_giveaway(self, giveaway: dict) -> Optional[List[int]]:
        """
        Draw winners, mark ended, update the message and announce.

        Returns:
            The winners, or None when the giveaway was deleted because its
            channel or message is gone, or had already ended.
        """
        channel = await fetch_channel(self.bot, giveaway["channel_id"])
        message = await fetch_message(channel, giveaway.get("message_id"))
        if channel is None or message is None:
            self.db.delete_giveaway(giveaway["id"])
            logger.warning("Orphaned Giveaway Deleted", [
                ("ID", str(giveaway["id"])),
                ("Channel", "Missing" if channel is None else "OK"),
                ("Message", "Missing"),
            ])
            return None

        winners = draw_winners(self._eligible(giveaway, channel.guild), giveaway["winners"], self.rng)
        if not self.db.mark_giveaway_ended(giveaway["id"], winners):
            return None

        giveaway["ended"] = True
        try:
            await message.edit(embed=build_ended_embed(giveaway, winners), view=build_giveaway_view(ended=True))
        except discord.HTTPException as e:
            logger.warning("Giveaway Message Update Failed", [("ID", str(giveaway["id"])), ("Error", str(e)[:80])])

        await safe_send(channel, build_winner_announcement(giveaway, winners), reference=message)

        logger.tree("Giveaway Ended", [
            ("ID", str(giveaway["id"])),
            ("Title", giveaway["title"][:50]),
            ("Participants", str(len(giveaway["participants"]))),
            ("Winners", ", ".join(str(w) for w in winners) or "None"),
        ], emoji="🏆")
        return winners

    async def reroll(self, giveaway: dict) -> List[int]:
        """Draw new winners for an ended giveaway, excluding previous winners."""
        channel = await fetch_channel(self.bot, giveaway["channel_id"])
        guild = getattr(channel, "guild", None)
        winners = draw_winners(
            self._eligible(giveaway, guild),
            giveaway["winners"],
            self.rng,
            exclude=giveaway.get("winner_ids") or [],
        )
        self.db.set_giveaway_winners(giveaway["id"], winners)

        message = await fetch_message(channel, giveaway.get("message_id"))
        if message is not None:
            try:
                await message.edit(embed=build_ended_embed(giveaway, winners))
            except discord.HTTPException as e:
                logger.debug("Giveaway Reroll Edit Failed", [("Error", str(e)[:80])])
        await safe_send(channel, build_winner_announcement(giveaway, winners, reroll=True))

        logger.tree("Giveaway Rerolled", [
            ("ID", str(giveaway["id"])),
            ("Winners", ", ".join(str(w) for w in winners) or "None"),
        ], emoji="🔁")
        return winners


__all__ = ["GiveawayService"]
