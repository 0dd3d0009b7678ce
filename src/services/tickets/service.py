"""
Ticket System Service
=====================

Panel posting and the ticket lifecycle: open -> claimed -> closed.

DESIGN:
    The ticket system for a guild is whatever the setup wizard saved in
    ticket_systems. Tickets are private threads in the panel channel
    (thread mode) or text channels under the configured category with
    permission overwrites for the owner, the staff role and the bot.

    Status only moves forward. The database updates are conditional on
    the current status, so a second Claim or Close click loses the race
    cleanly instead of rewriting the record.

    Operations return (success, message) tuples; the route handlers turn
    them into replies.

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import discord

from src.core.config import EmbedColors, has_manage_guild
from src.core.constants import TICKET_DELETE_DELAY
from src.core.database import TICKET_CLAIMED, TICKET_CLOSED, DatabaseManager
from src.core.logger import logger
from src.utils.async_utils import create_safe_task
from src.utils.retry import fetch_channel, fetch_message, safe_send

from .constants import THREAD_AUTO_ARCHIVE_MINUTES
from .embeds import (
    build_log_embed,
    build_panel_embed,
    build_panel_view,
    build_status_embed,
    build_ticket_controls,
    build_ticket_embed,
)
from .naming import format_ticket_name

if TYPE_CHECKING:
    from src.services.confirmation import ConfirmationService


class TicketService:
    """
    Ticket panels and ticket lifecycle for every guild.

    Args:
        bot: Client used to resolve channels.
        db: Database manager.
        confirmation: Used to confirm closing a ticket.
    """

    def __init__(
        self,
        bot: discord.Client,
        db: DatabaseManager,
        confirmation: "ConfirmationService",
    ) -> None:
        self.bot = bot
        self.db = db
        self.confirmation = confirmation
        self._open_locks: Dict[int, asyncio.Lock] = {}

    # =========================================================================
    # Permissions
    # =========================================================================

    def is_staff(self, member: Any) -> bool:
        """Staff role holders, Manage Channels, or Manage Server."""
        if member is None or getattr(member, "guild", None) is None:
            return False
        config = self.db.get_guild_config(member.guild.id)
        staff_role = config.get("ticket_staff_role")
        if staff_role and any(role.id == staff_role for role in getattr(member, "roles", [])):
            return True
        perms = getattr(member, "guild_permissions", None)
        if perms is not None and perms.manage_channels:
            return True
        return has_manage_guild(member)

    # =========================================================================
    # Panel
    # =========================================================================

    async def post_panel(self, guild: discord.Guild, system: dict) -> Optional[discord.Message]:
        """
        Post the panel, or edit the existing panel message in place.

        Returns:
            The panel message, or None if the channel is unusable.
        """
        channel = await fetch_channel(self.bot, system.get("channel_id"))
        if channel is None:
            logger.warning("Ticket Panel Channel Missing", [
                ("Guild", f"{guild.name} ({guild.id})"),
                ("Channel ID", str(system.get("channel_id"))),
            ])
            return None

        embed = build_panel_embed(system)
        view = build_panel_view(system)

        existing = await fetch_message(channel, system.get("panel_message_id"))
        if existing is not None:
            try:
                await existing.edit(embed=embed, view=view)
                message = existing
            except discord.HTTPException:
                message = await safe_send(channel, embed=embed, view=view)
        else:
            message = await safe_send(channel, embed=embed, view=view)

        if message is None:
            return None

        self.db.set_panel_message(guild.id, message.id)
        logger.tree("Ticket Panel Posted", [
            ("Guild", f"{guild.name} ({guild.id})"),
            ("Channel", f"#{getattr(channel, 'name', channel.id)}"),
            ("Message ID", str(message.id)),
            ("Types", str(len(system.get("types") or []))),
        ], emoji="📋")
        return message

    # =========================================================================
    # Open
    # =========================================================================

    def _open_lock(self, guild_id: int) -> asyncio.Lock:
        lock = self._open_locks.get(guild_id)
        if lock is None:
            lock = asyncio.Lock()
            self._open_locks[guild_id] = lock
        return lock

    async def open_ticket(self, member: discord.Member, type_value: str) -> Tuple[bool, str]:
        """
        Create a ticket for ``member``.

        Opens in one guild run one at a time so the per-user limit check
        and the ticket number cannot be raced by a double click.
        """
        async with self._open_lock(member.guild.id):
            return await self._open_ticket(member, type_value)

    async def _open_ticket(self, member: discord.Member, type_value: str) -> Tuple[bool, str]:
        guild = member.guild
        system = self.db.get_ticket_system(guild.id)
        if system is None:
            return (False, "The ticket system is not configured.")

        role_id = system.get("required_role_id")
        if role_id and member.get_role(role_id) is None:
            return (False, f"You need the <@&{role_id}> role to create tickets.")

        limit = system.get("max_tickets_per_user") or 0
        if limit > 0 and self.db.count_open_tickets(guild.id, member.id) >= limit:
            return (False, f"You can only have {limit} open ticket(s) at a time.")

        ticket_type = next((t for t in system.get("types") or [] if t.get("value") == type_value), None)
        if ticket_type is None:
            return (False, "The selected ticket type is no longer available.")

        number = self.db.next_ticket_number(guild.id)
        name = format_ticket_name(system.get("naming_format"), type_value, member.name, number)

        try:
            if system.get("thread_mode"):
                channel = await self._create_thread(member, system, name)
            else:
                channel = await self._create_channel(member, system, name)
        except discord.Forbidden:
            return (False, "I don't have permission to create ticket channels here.")

        if channel is None:
            return (False, "The ticket channel or category no longer exists. Ask an admin to run `/ticket edit`.")

        self.db.create_ticket(guild.id, channel.id, member.id, type_value)

        await safe_send(
            channel,
            member.mention,
            embed=build_ticket_embed(member, ticket_type, number),
            view=build_ticket_controls(channel.id),
        )
        await self._log(system, build_log_embed("🎫 Ticket Created", [
            ("User", f"{member.mention} (`{member.name}`)"),
            ("Type", ticket_type["name"]),
            ("Channel", channel.mention),
        ], EmbedColors.SUCCESS))

        return (True, f"Your ticket has been created: {channel.mention}")

    async def _create_thread(self, member: discord.Member, system: dict, name: str) -> Optional[discord.Thread]:
        panel_channel = await fetch_channel(self.bot, system.get("channel_id"))
        if not isinstance(panel_channel, discord.TextChannel):
            return None
        thread = await panel_channel.create_thread(
            name=name,
            type=discord.ChannelType.private_thread,
            auto_archive_duration=THREAD_AUTO_ARCHIVE_MINUTES,
            invitable=False,
            reason=f"Ticket created by {member}",
        )
        await thread.add_user(member)
        return thread

    async def _create_channel(self, member: discord.Member, system: dict, name: str) -> Optional[discord.TextChannel]:
        guild = member.guild
        category = guild.get_channel(system.get("category_id") or 0)
        if not isinstance(category, discord.CategoryChannel):
            return None

        overwrites = {
            guild.default_role: discord.PermissionOverwrite(view_channel=False),
            member: discord.PermissionOverwrite(
                view_channel=True, send_messages=True, read_message_history=True, attach_files=True,
            ),
            guild.me: discord.PermissionOverwrite(
                view_channel=True, send_messages=True, read_message_history=True, manage_channels=True,
            ),
        }
        staff_role_id = self.db.get_guild_config(guild.id).get("ticket_staff_role")
        staff_role = guild.get_role(staff_role_id) if staff_role_id else None
        if staff_role is not None:
            overwrites[staff_role] = discord.PermissionOverwrite(
                view_channel=True, send_messages=True, read_message_history=True,
            )

        return await guild.create_text_channel(
            name=name,
            category=category,
            overwrites=overwrites,
            reason=f"Ticket created by {member}",
        )

    # =========================================================================
    # Claim
    # =========================================================================

    async def claim_ticket(self, member: discord.Member, channel_id: int) -> Tuple[bool, str]:
        ticket = self.db.get_ticket_by_channel(channel_id)
        if ticket is None:
            return (False, "This is not a ticket channel.")
        if not self.is_staff(member):
            return (False, "Only staff can claim tickets.")
        if ticket["status"] != "open" or not self.db.claim_ticket(channel_id, member.id):
            return (False, "This ticket has already been claimed or closed.")

        channel = await fetch_channel(self.bot, channel_id)
        await safe_send(channel, embed=build_status_embed(TICKET_CLAIMED, member))

        system = self.db.get_ticket_system(member.guild.id)
        await self._log(system, build_log_embed("✋ Ticket Claimed", [
            ("Staff", member.mention),
            ("Owner", f"<@{ticket['user_id']}>"),
            ("Channel", f"<#{channel_id}>"),
        ], EmbedColors.WARNING))
        return (True, "You claimed this ticket.")

    # =========================================================================
    # Close
    # =========================================================================

    def can_close(self, member: discord.Member, ticket: dict) -> bool:
        return member.id == ticket.get("user_id") or self.is_staff(member)

    async def close_ticket(self, interaction: discord.Interaction, channel_id: int) -> Tuple[bool, str]:
        """
        Ask for confirmation, then close and clean up the ticket channel.

        The confirmation prompt is the interaction's initial response, so
        the caller must reply with a follow-up.
        """
        member = interaction.user
        ticket = self.db.get_ticket_by_channel(channel_id)
        if ticket is None:
            return (False, "This is not a ticket channel.")
        if ticket["status"] == TICKET_CLOSED:
            return (False, "This ticket is already closed.")
        if not self.can_close(member, ticket):
            return (False, "Only the ticket owner or staff can close this ticket.")

        confirmed = await self.confirmation.ask(
            interaction,
            "Close this ticket? The channel will be removed shortly after.",
            title="🔒 Close Ticket",
        )
        if not confirmed:
            return (False, "Ticket close cancelled.")

        if not self.db.close_ticket(channel_id, member.id):
            return (False, "This ticket is already closed.")

        channel = await fetch_channel(self.bot, channel_id)
        await safe_send(channel, embed=build_status_embed(
            TICKET_CLOSED, member, f"This channel will be removed in {TICKET_DELETE_DELAY} seconds.",
        ))

        system = self.db.get_ticket_system(interaction.guild_id)
        await self._log(system, build_log_embed("🔒 Ticket Closed", [
            ("Closed By", member.mention),
            ("Owner", f"<@{ticket['user_id']}>"),
            ("Type", ticket.get("type") or "-"),
            ("Channel", f"<#{channel_id}>"),
        ], EmbedColors.ERROR))

        if channel is not None:
            create_safe_task(self._remove_channel(channel), "Ticket Channel Removal")
        return (True, "Ticket closed.")

    async def _remove_channel(self, channel: Any) -> None:
        """Delete a ticket channel, or archive and lock a ticket thread."""
        await asyncio.sleep(TICKET_DELETE_DELAY)
        try:
            if isinstance(channel, discord.Thread):
                await channel.edit(archived=True, locked=True)
            else:
                await channel.delete(reason="Ticket closed")
        except discord.NotFound:
            return
        except discord.HTTPException as e:
            logger.warning("Ticket Channel Cleanup Failed", [
                ("Channel ID", str(channel.id)),
                ("Error", str(e)[:80]),
            ])

    # =========================================================================
    # Logging
    # =========================================================================

    async def _log(self, system: Optional[dict], embed: discord.Embed) -> None:
        if not system or not system.get("log_channel_id"):
            return
        channel = await fetch_channel(self.bot, system["log_channel_id"])
        await safe_send(channel, embed=embed)


__all__ = ["TicketService"]
