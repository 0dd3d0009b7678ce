"""
Birthday Helpers
================

Date validation, scheduling math and embeds for birthdays.

Author: حَـــــنَّـــــا
"""

import random
from datetime import datetime, timedelta
from typing import List, Optional

import discord

from src.core.config import EmbedColors, NY_TZ
from src.utils.footer import set_footer


# February allows 29 so leap-day birthdays can be stored
DAYS_IN_MONTH = [31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

BIRTHDAY_WISHES = [
    "Have an amazing day! 🎉",
    "Wishing you a fantastic year ahead! 🥳",
    "Hope your day is as awesome as you are! 🎈",
    "Cake for everyone! 🍰",
    "Another trip around the sun, well done! ☀️",
]


def is_valid_date(day: int, month: int) -> bool:
    if month < 1 or month > 12 or day < 1:
        return False
    return day <= DAYS_IN_MONTH[month - 1]


def format_date(day: int, month: int) -> str:
    return f"{day} {MONTH_NAMES[month - 1]}"


def date_key(moment: datetime) -> str:
    """YYYY-MM-DD of ``moment`` in the bot's timezone."""
    return moment.astimezone(NY_TZ).strftime("%Y-%m-%d")


def seconds_until(hour: int, now: Optional[datetime] = None) -> float:
    """Seconds from ``now`` until the next ``hour``:00 in NY_TZ."""
    now = (now or datetime.now(NY_TZ)).astimezone(NY_TZ)
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


def build_set_embed(user: discord.abc.User, day: int, month: int) -> discord.Embed:
    embed = discord.Embed(
        title="🎂 Birthday Saved",
        description=f"{user.mention}'s birthday is set to **{format_date(day, month)}**.",
        color=EmbedColors.BIRTHDAY,
    )
    embed.set_thumbnail(url=user.display_avatar.url)
    return embed


def build_announcement_embed(
    guild: discord.Guild,
    user_ids: List[int],
    wish: Optional[str] = None,
) -> discord.Embed:
    lines = "\n".join(f"🎂 <@{user_id}>" for user_id in user_ids)
    embed = discord.Embed(
        title="🎉 Birthdays Today!",
        description=f"{lines}\n\n{wish or random.choice(BIRTHDAY_WISHES)}",
        color=EmbedColors.BIRTHDAY,
        timestamp=datetime.now(NY_TZ),
    )
    if len(user_ids) == 1:
        member = guild.get_member(user_ids[0])
        if member is not None:
            embed.set_thumbnail(url=member.display_avatar.url)
    return set_footer(embed, guild.name)


__all__ = [
    "DAYS_IN_MONTH",
    "MONTH_NAMES",
    "BIRTHDAY_WISHES",
    "is_valid_date",
    "format_date",
    "date_key",
    "seconds_until",
    "build_set_embed",
    "build_announcement_embed",
]
