"""
Giveaway Embeds
===============

Author: حَـــــنَّـــــا
"""

from typing import List

import discord

from src.core.config import EmbedColors
from src.utils.footer import set_footer

from .draw import total_entries


JOIN_ID = "giveaway_join"
PARTICIPANTS_ID = "giveaway_participants"


def _mentions(user_ids: List[int]) -> str:
    return ", ".join(f"<@{user_id}>" for user_id in user_ids) if user_ids else "No valid participants"


def build_giveaway_embed(giveaway: dict) -> discord.Embed:
    end = int(giveaway["end_time"])
    participants = giveaway.get("participants") or {}
    embed = discord.Embed(
        title=f"🎉 {giveaway['title']}",
        description=giveaway.get("description") or "Press **Join** to enter!",
        color=EmbedColors.GIVEAWAY,
    )
    embed.add_field(name="⏰ Ends", value=f"<t:{end}:R> (<t:{end}:f>)", inline=True)
    embed.add_field(name="🏆 Winners", value=str(giveaway["winners"]), inline=True)
    embed.add_field(
        name="🎫 Entries",
        value=f"{len(participants)} participants | {total_entries(participants)} entries",
        inline=True,
    )
    bonus_roles = giveaway.get("bonus_roles") or []
    if bonus_roles:
        embed.add_field(
            name="⭐ Bonus Entries",
            value="\n".join(f"<@&{b['role_id']}>: +{b['entries']}" for b in bonus_roles),
            inline=False,
        )
    if giveaway.get("created_by"):
        embed.add_field(name="Hosted By", value=f"<@{giveaway['created_by']}>", inline=True)
    return set_footer(embed, f"Giveaway #{giveaway['id']}" if giveaway.get("id") else None)


def build_ended_embed(giveaway: dict, winner_ids: List[int]) -> discord.Embed:
    participants = giveaway.get("participants") or {}
    embed = discord.Embed(
        title=f"🎉 {giveaway['title']} (Ended)",
        description=giveaway.get("description") or None,
        color=EmbedColors.ENDED,
    )
    embed.add_field(name="🏆 Winners", value=_mentions(winner_ids), inline=False)
    embed.add_field(
        name="🎫 Entries",
        value=f"{len(participants)} participants | {total_entries(participants)} entries",
        inline=True,
    )
    embed.add_field(name="⏰ Ended", value=f"<t:{int(giveaway['end_time'])}:R>", inline=True)
    return set_footer(embed, f"Giveaway #{giveaway['id']}" if giveaway.get("id") else None)


def build_winner_announcement(giveaway: dict, winner_ids: List[int], reroll: bool = False) -> str:
    if not winner_ids:
        return f"😢 Nobody entered **{giveaway['title']}**, so there is no winner."
    prefix = "🔁 New winner(s)" if reroll else "🎊 Congratulations"
    return f"{prefix} {_mentions(winner_ids)}! You won **{giveaway['title']}**!"


def build_participants_embed(giveaway: dict, limit: int = 20) -> discord.Embed:
    participants = giveaway.get("participants") or {}
    ranked = sorted(participants.items(), key=lambda item: item[1], reverse=True)
    lines = [f"<@{user_id}> - {entries} {'entry' if entries == 1 else 'entries'}" for user_id, entries in ranked[:limit]]
    if len(ranked) > limit:
        lines.append(f"...and {len(ranked) - limit} more")
    return discord.Embed(
        title=f"👥 Participants: {giveaway['title']}",
        description="\n".join(lines) or "No participants yet.",
        color=EmbedColors.GIVEAWAY,
    ).set_footer(text=f"{len(participants)} participants | {total_entries(participants)} entries")


def build_giveaway_view(ended: bool = False) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        style=discord.ButtonStyle.success,
        label="Join",
        emoji="🎉",
        custom_id=JOIN_ID,
        disabled=ended,
    ))
    view.add_item(discord.ui.Button(
        style=discord.ButtonStyle.secondary,
        label="Participants",
        emoji="👥",
        custom_id=PARTICIPANTS_ID,
    ))
    return view


__all__ = [
    "JOIN_ID",
    "PARTICIPANTS_ID",
    "build_giveaway_embed",
    "build_ended_embed",
    "build_winner_announcement",
    "build_participants_embed",
    "build_giveaway_view",
]
