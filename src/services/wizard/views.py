"""
Ticket Setup Wizard Views
=========================

Turns a rendered ViewModel into a discord.Embed and discord.ui.View, and
builds the modals the wizard opens.

Components carry custom ids only. Clicks reach the wizard through the
interaction dispatcher, so the views here have no callbacks.

Author: حَـــــنَّـــــا
"""

from typing import Optional

import discord

from src.core.constants import WIZARD_VIEW_TIMEOUT

from .constants import (
    FIELD_MAX_TICKETS,
    FIELD_NAMING_FORMAT,
    FIELD_PANEL_DESCRIPTION,
    FIELD_PANEL_TITLE,
    FIELD_REQUIRED_ROLE,
    FIELD_TYPE_DESCRIPTION,
    FIELD_TYPE_EMOJI,
    FIELD_TYPE_NAME,
    LIMITS_MODAL,
    NAMING_MODAL,
    PANEL_MODAL,
    ROLE_MODAL,
    TYPE_DESCRIPTION_MAX_LENGTH,
    TYPE_MODAL,
    TYPE_NAME_MAX_LENGTH,
)
from .models import TicketDraft
from .render import ControlModel, ViewModel


# =============================================================================
# Embed / View Builders
# =============================================================================

def build_embed(vm: ViewModel) -> discord.Embed:
    description = vm.description
    if vm.notice:
        description = f"⚠️ {vm.notice}\n\n{description}"

    embed = discord.Embed(title=vm.title, description=description, color=vm.color)
    for f in vm.fields:
        embed.add_field(name=f.name, value=f.value[:1024] or "-", inline=f.inline)
    if vm.footer:
        embed.set_footer(text=vm.footer)
    return embed


def _build_item(control: ControlModel) -> discord.ui.Item:
    if control.kind == "button":
        return discord.ui.Button(
            style=discord.ButtonStyle[control.style],
            label=control.label or None,
            custom_id=control.custom_id,
            emoji=control.emoji,
            disabled=control.disabled,
            row=control.row,
        )

    if control.kind == "select":
        return discord.ui.Select(
            custom_id=control.custom_id,
            placeholder=control.label,
            options=[
                discord.SelectOption(
                    label=o.label[:100],
                    value=o.value,
                    emoji=o.emoji,
                    description=(o.description[:100] if o.description else None),
                )
                for o in control.options
            ],
            disabled=control.disabled,
            row=control.row,
        )

    channel_types = (
        [discord.ChannelType.category]
        if control.kind == "category_select"
        else [discord.ChannelType.text]
    )
    return discord.ui.ChannelSelect(
        custom_id=control.custom_id,
        placeholder=control.label,
        channel_types=channel_types,
        disabled=control.disabled,
        row=control.row,
    )


def build_view(vm: ViewModel) -> Optional[discord.ui.View]:
    """None when the screen has no controls (terminal screens)."""
    if not vm.controls:
        return None
    view = discord.ui.View(timeout=WIZARD_VIEW_TIMEOUT)
    for control in vm.controls:
        view.add_item(_build_item(control))
    return view


# =============================================================================
# Modals
# =============================================================================

def _text(
    custom_id: str,
    label: str,
    *,
    default: Optional[str] = None,
    placeholder: Optional[str] = None,
    required: bool = True,
    max_length: int = 100,
    paragraph: bool = False,
) -> discord.ui.TextInput:
    return discord.ui.TextInput(
        label=label,
        custom_id=custom_id,
        style=discord.TextStyle.paragraph if paragraph else discord.TextStyle.short,
        default=default,
        placeholder=placeholder,
        required=required,
        max_length=max_length,
    )


def build_type_modal() -> discord.ui.Modal:
    modal = discord.ui.Modal(title="Add Ticket Type", custom_id=TYPE_MODAL)
    modal.add_item(_text(FIELD_TYPE_NAME, "Name", placeholder="General Support", max_length=TYPE_NAME_MAX_LENGTH))
    modal.add_item(_text(FIELD_TYPE_EMOJI, "Emoji", placeholder="🎫", required=False, max_length=64))
    modal.add_item(_text(
        FIELD_TYPE_DESCRIPTION, "Description",
        required=False, max_length=TYPE_DESCRIPTION_MAX_LENGTH, paragraph=True,
    ))
    return modal


def build_role_modal(draft: TicketDraft) -> discord.ui.Modal:
    modal = discord.ui.Modal(title="Required Role", custom_id=ROLE_MODAL)
    modal.add_item(_text(
        FIELD_REQUIRED_ROLE, "Role ID (empty = everyone)",
        default=str(draft.required_role_id) if draft.required_role_id else None,
        required=False, max_length=20,
    ))
    return modal


def build_naming_modal(draft: TicketDraft) -> discord.ui.Modal:
    modal = discord.ui.Modal(title="Naming Format", custom_id=NAMING_MODAL)
    modal.add_item(_text(
        FIELD_NAMING_FORMAT, "Format ({type}, {user}, {number})",
        default=draft.naming_format, max_length=100,
    ))
    return modal


def build_panel_modal(draft: TicketDraft) -> discord.ui.Modal:
    modal = discord.ui.Modal(title="Panel Text", custom_id=PANEL_MODAL)
    modal.add_item(_text(FIELD_PANEL_TITLE, "Title", default=draft.panel_title, max_length=256))
    modal.add_item(_text(
        FIELD_PANEL_DESCRIPTION, "Description",
        default=draft.panel_description, max_length=2000, paragraph=True,
    ))
    return modal


def build_limits_modal(draft: TicketDraft) -> discord.ui.Modal:
    modal = discord.ui.Modal(title="Ticket Limit", custom_id=LIMITS_MODAL)
    modal.add_item(_text(
        FIELD_MAX_TICKETS, "Open tickets per user (0 = unlimited)",
        default=str(draft.max_tickets_per_user), max_length=2,
    ))
    return modal


__all__ = [
    "build_embed",
    "build_view",
    "build_type_modal",
    "build_role_modal",
    "build_naming_modal",
    "build_panel_modal",
    "build_limits_modal",
]
