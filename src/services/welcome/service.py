"""
Welcome Service
===============

Greets new members: optional auto role, then an embed or plain message
in the configured welcome channel.

Author: حَـــــنَّـــــا
"""

from typing import Optional

import discord

from src.core.database import GUILD_CONFIG_DEFAULTS, DatabaseManager
from src.core.logger import logger
from src.utils.retry import safe_send

from .formatting import build_welcome_embed, format_welcome_text


class WelcomeService:
    """Sends welcome messages from each guild's guild_config row."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def on_member_join(self, member: discord.Member) -> Optional[discord.Message]:
        config = self.db.get_guild_config(member.guild.id)
        await self._assign_role(member, config.get("welcome_role"))

        if not config.get("welcome_channel"):
            return None
        return await self.send_welcome(member, config)

    async def send_welcome(self, member: discord.Member, config: Optional[dict] = None) -> Optional[discord.Message]:
        """
        Post the welcome for ``member``. Also used for previews.

        Returns:
            The sent message, or None if the channel is missing or unwritable.
        """
        config = config or self.db.get_guild_config(member.guild.id)
        channel = member.guild.get_channel(config.get("welcome_channel") or 0)
        if channel is None:
            logger.warning("Welcome Channel Missing", [
                ("Guild", f"{member.guild.name} ({member.guild.id})"),
                ("Channel ID", str(config.get("welcome_channel"))),
            ])
            return None

        if config.get("welcome_embed_enabled"):
            message = await safe_send(channel, embed=build_welcome_embed(config, member))
        else:
            text = format_welcome_text(
                config.get("welcome_message") or GUILD_CONFIG_DEFAULTS["welcome_message"], member,
            )
            message = await safe_send(channel, text[:2000])

        if message is not None:
            logger.tree("Welcome Sent", [
                ("Guild", member.guild.name),
                ("Member", f"{member.name} ({member.id})"),
                ("Mode", "Embed" if config.get("welcome_embed_enabled") else "Text"),
            ], emoji="👋")
        return message

    async def _assign_role(self, member: discord.Member, role_id: Optional[int]) -> None:
        if not role_id:
            return
        role = member.guild.get_role(role_id)
        if role is None:
            logger.warning("Welcome Role Missing", [
                ("Guild", f"{member.guild.name} ({member.guild.id})"),
                ("Role ID", str(role_id)),
            ])
            return
        try:
            await member.add_roles(role, reason="Welcome role")
        except discord.HTTPException as e:
            logger.warning("Welcome Role Assign Failed", [
                ("Member", f"{member.name} ({member.id})"),
                ("Role", role.name),
                ("Error", str(e)[:80]),
            ])


__all__ = ["WelcomeService"]
