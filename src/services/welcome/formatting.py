"""
Welcome Message Formatting
==========================

Placeholder substitution, color validation and the welcome embed.

Placeholders: {user} (mention), {username}, {guild}, {member_count}.

Author: حَـــــنَّـــــا
"""

import re
from datetime import datetime
from typing import Optional

import discord

from src.core.config import EmbedColors, NY_TZ
from src.core.database import GUILD_CONFIG_DEFAULTS


USER_AVATAR = "user_avatar"
"""Image setting that shows the joining member's avatar."""

_COLOR_RE = re.compile(r"^#?[0-9A-Fa-f]{6}$")


def format_welcome_text(template: Optional[str], member: discord.Member) -> str:
    if not template:
        return ""
    guild = member.guild
    return (
        template
        .replace("{user}", member.mention)
        .replace("{username}", member.name)
        .replace("{guild}", guild.name)
        .replace("{member_count}", str(guild.member_count or 0))
    )


def is_valid_color(value: str) -> bool:
    return bool(_COLOR_RE.match(value or ""))


def normalize_color(value: str) -> str:
    """'00ff00' -> '#00FF00'. Caller validates first."""
    value = value.strip()
    return ("#" + value.lstrip("#")).upper()


def parse_color(value: Optional[str]) -> int:
    if value and is_valid_color(value):
        return int(value.lstrip("#"), 16)
    return EmbedColors.WELCOME


def build_welcome_embed(config: dict, member: discord.Member) -> discord.Embed:
    embed = discord.Embed(
        title=format_welcome_text(config.get("welcome_title") or GUILD_CONFIG_DEFAULTS["welcome_title"], member)[:256],
        description=format_welcome_text(
            config.get("welcome_message") or GUILD_CONFIG_DEFAULTS["welcome_message"], member,
        )[:4096],
        color=parse_color(config.get("welcome_color")),
        timestamp=datetime.now(NY_TZ),
    )

    image = config.get("welcome_image")
    if image == USER_AVATAR:
        embed.set_thumbnail(url=member.display_avatar.url)
    elif image:
        embed.set_image(url=image)

    footer = format_welcome_text(config.get("welcome_footer"), member)
    if footer:
        embed.set_footer(text=footer[:2048])
    return embed


__all__ = [
    "USER_AVATAR",
    "format_welcome_text",
    "is_valid_color",
    "normalize_color",
    "parse_color",
    "build_welcome_embed",
]
