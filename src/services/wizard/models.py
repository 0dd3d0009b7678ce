"""
Ticket Setup Wizard Models
==========================

Draft and session records for the ticket setup wizard.

Author: حَـــــنَّـــــا
"""

import re
import time
import unicodedata
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

import discord

from .constants import (
    DEFAULT_MAX_TICKETS,
    DEFAULT_NAMING_FORMAT,
    DEFAULT_PANEL_DESCRIPTION,
    DEFAULT_PANEL_TITLE,
    DEFAULT_TYPE_EMOJI,
    WizardStep,
)


SessionKey = Tuple[Optional[int], int]
"""(guild_id, user_id); guild_id is None for DMs."""

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, collapse non [a-z0-9] runs to '-', trim dashes."""
    return _SLUG_RE.sub("-", name.lower()).strip("-")


# Categories that may follow a pictograph inside one emoji
_EMOJI_PART_CATEGORIES = frozenset({"So", "Sk", "Mn", "Me", "Cf"})
_KEYCAP = "\u20e3"


def is_valid_emoji(value: str) -> bool:
    """
    True for a single unicode emoji or a server emoji like ``<:name:id>``.

    Anything else would be rejected by Discord when used as a select
    option or button emoji.
    """
    value = value.strip()
    if not value or len(value) > 64 or any(ch.isspace() for ch in value):
        return False
    if value.startswith("<"):
        partial = discord.PartialEmoji.from_str(value)
        return partial.id is not None and bool(partial.name)
    if len(value) > 16:
        return False
    if _KEYCAP in value:
        return value[0] in "0123456789#*" and value.endswith(_KEYCAP)
    categories = [unicodedata.category(ch) for ch in value]
    return "So" in categories and all(c in _EMOJI_PART_CATEGORIES for c in categories)


def _stored_emoji(value: Optional[str]) -> str:
    if value and is_valid_emoji(value):
        return value.strip()
    return DEFAULT_TYPE_EMOJI


@dataclass
class TicketType:
    name: str
    emoji: str = DEFAULT_TYPE_EMOJI
    description: str = ""
    value: str = ""

    def __post_init__(self) -> None:
        if not self.value:
            self.value = slugify(self.name)

    def to_record(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TicketType":
        return cls(
            name=record.get("name", ""),
            emoji=_stored_emoji(record.get("emoji")),
            description=record.get("description") or "",
            value=record.get("value") or "",
        )


@dataclass
class TicketDraft:
    """Fields collected by the wizard before they are saved."""

    channel_id: Optional[int] = None
    category_id: Optional[int] = None
    log_channel_id: Optional[int] = None
    types: List[TicketType] = field(default_factory=list)
    thread_mode: bool = False
    required_role_id: Optional[int] = None
    naming_format: str = DEFAULT_NAMING_FORMAT
    panel_title: str = DEFAULT_PANEL_TITLE
    panel_description: str = DEFAULT_PANEL_DESCRIPTION
    max_tickets_per_user: int = DEFAULT_MAX_TICKETS
    is_editing: bool = False
    edit_id: Optional[int] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def to_record(self) -> Dict[str, Any]:
        """Columns for ticket_systems (editing flags excluded)."""
        return {
            "channel_id": self.channel_id,
            "category_id": self.category_id,
            "log_channel_id": self.log_channel_id,
            "thread_mode": self.thread_mode,
            "required_role_id": self.required_role_id,
            "naming_format": self.naming_format,
            "types": [t.to_record() for t in self.types],
            "panel_title": self.panel_title,
            "panel_description": self.panel_description,
            "max_tickets_per_user": self.max_tickets_per_user,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TicketDraft":
        """Load a saved ticket system back into an editable draft."""
        return cls(
            channel_id=record.get("channel_id"),
            category_id=record.get("category_id"),
            log_channel_id=record.get("log_channel_id"),
            types=[TicketType.from_record(t) for t in record.get("types") or []],
            thread_mode=bool(record.get("thread_mode")),
            required_role_id=record.get("required_role_id"),
            naming_format=record.get("naming_format") or DEFAULT_NAMING_FORMAT,
            panel_title=record.get("panel_title") or DEFAULT_PANEL_TITLE,
            panel_description=record.get("panel_description") or DEFAULT_PANEL_DESCRIPTION,
            max_tickets_per_user=(
                record["max_tickets_per_user"]
                if record.get("max_tickets_per_user") is not None
                else DEFAULT_MAX_TICKETS
            ),
            is_editing=True,
            edit_id=record.get("id"),
        )


@dataclass
class WizardSession:
    """One user's in-progress wizard."""

    guild_id: Optional[int]
    user_id: int
    step: WizardStep = WizardStep.WELCOME
    draft: TicketDraft = field(default_factory=TicketDraft)
    history: List[WizardStep] = field(default_factory=list)
    notice: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    last_touched_at: float = field(default_factory=time.time)

    @property
    def key(self) -> SessionKey:
        return (self.guild_id, self.user_id)

    def touch(self) -> None:
        self.last_touched_at = time.time()


__all__ = [
    "SessionKey",
    "TicketType",
    "TicketDraft",
    "WizardSession",
    "slugify",
    "is_valid_emoji",
]
