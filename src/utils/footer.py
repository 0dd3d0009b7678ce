"""
Community Bot - Embed Footer Utility
====================================

Shared footer for public embeds (panels, announcements, giveaways).
The bot's avatar URL is cached once at startup.

Author: حَـــــنَّـــــا
"""

from typing import Optional

import discord

from src.core.logger import logger


FOOTER_TEXT = "Community Bot"

_cached_avatar_url: Optional[str] = None


def init_footer(bot: discord.Client) -> None:
    """Cache the bot avatar. Call once after the bot is ready."""
    global _cached_avatar_url
    if bot.user is None:
        return
    _cached_avatar_url = bot.user.display_avatar.url
    logger.tree("Footer Initialized", [
        ("Text", FOOTER_TEXT),
        ("Avatar Cached", "Yes"),
    ], emoji="📝")


def set_footer(embed: discord.Embed, text: Optional[str] = None) -> discord.Embed:
    """Set the standard footer; ``text`` is prefixed to the bot name."""
    footer = f"{text} • {FOOTER_TEXT}" if text else FOOTER_TEXT
    embed.set_footer(text=footer, icon_url=_cached_avatar_url)
    return embed


__all__ = ["FOOTER_TEXT", "init_footer", "set_footer"]
