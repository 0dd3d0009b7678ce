"""
Community Bot - Ticket System Operations
========================================

Stores the confirmed ticket setup, one row per guild.

Author: حَـــــنَّـــــا
"""

import json
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.core.logger import logger
from src.core.database.base import _safe_json_loads
from src.core.database.models import TicketSystemRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


TICKET_SYSTEM_FIELDS = (
    "channel_id",
    "category_id",
    "log_channel_id",
    "thread_mode",
    "required_role_id",
    "naming_format",
    "types",
    "panel_title",
    "panel_description",
    "max_tickets_per_user",
)


def _row_to_system(row) -> TicketSystemRecord:
    record: Dict[str, Any] = dict(row)
    record["types"] = _safe_json_loads(record.get("types"), [])
    record["thread_mode"] = bool(record.get("thread_mode"))
    return record


class TicketSystemsMixin:
    """Mixin for ticket_systems operations."""

    def upsert_ticket_system(
        self: "DatabaseManager",
        guild_id: int,
        fields: Dict[str, Any],
    ) -> TicketSystemRecord:
        """
        Insert or update the guild's ticket system in one statement.

        Args:
            guild_id: Owning guild.
            fields: Values for TICKET_SYSTEM_FIELDS; missing keys are stored as NULL.

        Returns:
            The stored record.
        """
        values = {name: fields.get(name) for name in TICKET_SYSTEM_FIELDS}
        values["types"] = json.dumps(values["types"] or [])
        values["thread_mode"] = 1 if values["thread_mode"] else 0
        now = time.time()

        columns = ", ".join(TICKET_SYSTEM_FIELDS)
        placeholders = ", ".join("?" for _ in TICKET_SYSTEM_FIELDS)
        updates = ", ".join(f"{name} = excluded.{name}" for name in TICKET_SYSTEM_FIELDS)
        self.execute(
            f"""INSERT INTO ticket_systems (guild_id, {columns}, created_at, updated_at)
                VALUES (?, {placeholders}, ?, ?)
                ON CONFLICT(guild_id) DO UPDATE SET {updates}, updated_at = excluded.updated_at""",
            (guild_id, *values.values(), now, now),
        )

        logger.tree("Ticket System Saved", [
            ("Guild ID", str(guild_id)),
            ("Panel Channel", str(values["channel_id"])),
            ("Mode", "Threads" if values["thread_mode"] else "Channels"),
            ("Types", str(len(fields.get("types") or []))),
        ], emoji="🎫")
        return self.get_ticket_system(guild_id)

    def get_ticket_system(self: "DatabaseManager", guild_id: int) -> Optional[TicketSystemRecord]:
        row = self.fetchone("SELECT * FROM ticket_systems WHERE guild_id = ?", (guild_id,))
        return _row_to_system(row) if row else None

    def set_panel_message(self: "DatabaseManager", guild_id: int, message_id: int) -> None:
        """Remember which message holds the guild's ticket panel."""
        self.execute(
            "UPDATE ticket_systems SET panel_message_id = ?, updated_at = ? WHERE guild_id = ?",
            (message_id, time.time(), guild_id),
        )
