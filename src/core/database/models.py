"""
Community Bot - Database Type Definitions
=========================================

TypedDict definitions for database records.

Author: حَـــــنَّـــــا
"""

from typing import Dict, List, Optional, TypedDict


class GuildConfigRecord(TypedDict, total=False):
    """Per-guild feature settings (defaults filled in on read)."""
    guild_id: int
    welcome_channel: Optional[int]
    welcome_role: Optional[int]
    welcome_title: str
    welcome_message: str
    welcome_color: str
    welcome_image: Optional[str]
    welcome_footer: Optional[str]
    welcome_embed_enabled: int
    birthday_channel: Optional[int]
    ticket_staff_role: Optional[int]
    created_at: float
    updated_at: float


class TicketTypeRecord(TypedDict):
    """One ticket type as stored in ticket_systems.types."""
    name: str
    emoji: str
    description: str
    value: str


class TicketSystemRecord(TypedDict, total=False):
    """Confirmed ticket setup for a guild."""
    id: int
    guild_id: int
    channel_id: Optional[int]
    category_id: Optional[int]
    log_channel_id: Optional[int]
    thread_mode: bool
    required_role_id: Optional[int]
    naming_format: str
    types: List[TicketTypeRecord]
    panel_title: str
    panel_description: str
    max_tickets_per_user: int
    panel_message_id: Optional[int]
    created_at: float
    updated_at: float


class TicketRecord(TypedDict, total=False):
    """A single ticket channel or thread."""
    id: int
    guild_id: int
    channel_id: int
    user_id: int
    type: str
    status: str
    claimed_by: Optional[int]
    claimed_at: Optional[float]
    closed_by: Optional[int]
    closed_at: Optional[float]
    created_at: float


class BirthdayRecord(TypedDict, total=False):
    user_id: int
    guild_id: int
    day: int
    month: int
    set_by: Optional[int]
    set_at: Optional[float]


class BonusRoleRecord(TypedDict):
    role_id: int
    entries: int


class GiveawayRecord(TypedDict, total=False):
    """A giveaway and its entrants (participants maps user id -> entries)."""
    id: int
    guild_id: int
    channel_id: int
    message_id: Optional[int]
    title: str
    description: Optional[str]
    end_time: float
    winners: int
    created_by: Optional[int]
    participants: Dict[int, int]
    bonus_roles: List[BonusRoleRecord]
    ended: bool
    winner_ids: List[int]
    created_at: float


__all__ = [
    "GuildConfigRecord",
    "TicketTypeRecord",
    "TicketSystemRecord",
    "TicketRecord",
    "BirthdayRecord",
    "BonusRoleRecord",
    "GiveawayRecord",
]
