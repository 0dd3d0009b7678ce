"""
Ticket System Embeds
====================

Embed and component builders for panels, ticket channels and log posts.

Author: حَـــــنَّـــــا
"""

from datetime import datetime
from typing import List, Optional, Tuple

import discord

from src.core.config import EmbedColors, NY_TZ
from src.core.constants import MAX_TICKET_TYPES, PANEL_BUTTONS_PER_ROW
from src.services.wizard.constants import DEFAULT_PANEL_DESCRIPTION, DEFAULT_PANEL_TITLE, DEFAULT_TYPE_EMOJI
from src.utils.footer import set_footer

from .constants import CLAIM_PREFIX, CLOSE_PREFIX, PANEL_BUTTON_PREFIX, STATUS_COLOR, STATUS_EMOJI


# =============================================================================
# Panel
# =============================================================================

def build_panel_embed(system: dict) -> discord.Embed:
    embed = discord.Embed(
        title=system.get("panel_title") or DEFAULT_PANEL_TITLE,
        description=system.get("panel_description") or DEFAULT_PANEL_DESCRIPTION,
        color=EmbedColors.TICKET,
    )
    types = system.get("types") or []
    if types:
        embed.add_field(
            name="Ticket Types",
            value="\n".join(
                f"{t.get('emoji') or DEFAULT_TYPE_EMOJI} **{t['name']}**"
                + (f" - {t['description']}" if t.get("description") else "")
                for t in types[:MAX_TICKET_TYPES]
            )[:1024],
        )
    if system.get("required_role_id"):
        embed.add_field(name="Requirement", value=f"<@&{system['required_role_id']}> only", inline=True)
    return set_footer(embed)


def build_panel_view(system: dict) -> discord.ui.View:
    """One button per ticket type, five per row."""
    view = discord.ui.View(timeout=None)
    for index, ticket_type in enumerate((system.get("types") or [])[:MAX_TICKET_TYPES]):
        view.add_item(discord.ui.Button(
            style=discord.ButtonStyle.primary,
            label=ticket_type["name"][:80],
            emoji=ticket_type.get("emoji") or DEFAULT_TYPE_EMOJI,
            custom_id=f"{PANEL_BUTTON_PREFIX}{ticket_type['value']}",
            row=index // PANEL_BUTTONS_PER_ROW,
        ))
    return view


# =============================================================================
# Ticket Channel
# =============================================================================

def build_ticket_embed(user: discord.abc.User, ticket_type: dict, number: int) -> discord.Embed:
    embed = discord.Embed(
        title=f"{ticket_type.get('emoji') or DEFAULT_TYPE_EMOJI} {ticket_type['name']} Ticket",
        description=(
            f"Hello {user.mention}, welcome to your ticket!\n\n"
            f"**Ticket Type:** {ticket_type.get('description') or ticket_type['name']}"
        ),
        color=STATUS_COLOR["open"],
        timestamp=datetime.now(NY_TZ),
    )
    embed.add_field(
        name="📝 Instructions",
        value="Please describe your issue or request in detail. A staff member will assist you shortly.",
        inline=False,
    )
    embed.add_field(
        name="🔒 Close Ticket",
        value="Press **Close** below once your issue is resolved.",
        inline=False,
    )
    return set_footer(embed, f"Ticket #{number}")


def build_ticket_controls(channel_id: int, claimed: bool = False) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        style=discord.ButtonStyle.success,
        label="Claimed" if claimed else "Claim",
        emoji="✋",
        custom_id=f"{CLAIM_PREFIX}{channel_id}",
        disabled=claimed,
    ))
    view.add_item(discord.ui.Button(
        style=discord.ButtonStyle.danger,
        label="Close",
        emoji="🔒",
        custom_id=f"{CLOSE_PREFIX}{channel_id}",
    ))
    return view


def build_status_embed(status: str, actor: discord.abc.User, note: Optional[str] = None) -> discord.Embed:
    verbs = {"claimed": "claimed", "closed": "closed"}
    description = f"{STATUS_EMOJI.get(status, '')} Ticket {verbs.get(status, status)} by {actor.mention}"
    if note:
        description += f"\n{note}"
    return discord.Embed(description=description, color=STATUS_COLOR.get(status, EmbedColors.INFO))


# =============================================================================
# Log Channel
# =============================================================================

def build_log_embed(
    title: str,
    fields: List[Tuple[str, str]],
    color: int = EmbedColors.INFO,
) -> discord.Embed:
    embed = discord.Embed(title=title, color=color, timestamp=datetime.now(NY_TZ))
    for name, value in fields:
        embed.add_field(name=name, value=value, inline=True)
    return embed


__all__ = [
    "build_panel_embed",
    "build_panel_view",
    "build_ticket_embed",
    "build_ticket_controls",
    "build_status_embed",
    "build_log_embed",
]
