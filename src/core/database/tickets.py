"""
Community Bot - Database Ticket Operations
==========================================

Ticket lifecycle persistence.

DESIGN:
    Status moves open -> claimed -> closed and never backwards. Every
    update carries its precondition in the WHERE clause, so a stale click
    (claim after close, double close) changes nothing and returns False.
    There is no reopen: a user opens a new ticket instead.

Author: حَـــــنَّـــــا
"""

import time
from typing import TYPE_CHECKING, List, Optional

from src.core.logger import logger
from src.core.database.models import TicketRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


TICKET_OPEN = "open"
TICKET_CLAIMED = "claimed"
TICKET_CLOSED = "closed"


class TicketsMixin:
    """Mixin for ticket database operations."""

    def create_ticket(
        self: "DatabaseManager",
        guild_id: int,
        channel_id: int,
        user_id: int,
        ticket_type: str,
    ) -> int:
        """
        Record a newly opened ticket.

        Returns:
            The ticket's row id.
        """
        cursor = self.execute(
            """INSERT INTO tickets (guild_id, channel_id, user_id, type, status, created_at)
               VALUES (?, ?, ?, ?, 'open', ?)""",
            (guild_id, channel_id, user_id, ticket_type, time.time()),
        )
        logger.tree("Ticket Created", [
            ("Ticket", f"#{cursor.lastrowid}"),
            ("Type", ticket_type),
            ("User ID", str(user_id)),
            ("Channel ID", str(channel_id)),
        ], emoji="🎫")
        return cursor.lastrowid

    def get_ticket_by_channel(self: "DatabaseManager", channel_id: int) -> Optional[TicketRecord]:
        row = self.fetchone("SELECT * FROM tickets WHERE channel_id = ?", (channel_id,))
        return dict(row) if row else None

    def get_open_tickets(self: "DatabaseManager", guild_id: int) -> List[TicketRecord]:
        """Open and claimed tickets for a guild, oldest first."""
        rows = self.fetchall(
            """SELECT * FROM tickets WHERE guild_id = ? AND status IN ('open', 'claimed')
               ORDER BY created_at ASC""",
            (guild_id,),
        )
        return [dict(row) for row in rows]

    def count_open_tickets(self: "DatabaseManager", guild_id: int, user_id: int) -> int:
        row = self.fetchone(
            """SELECT COUNT(*) AS total FROM tickets
               WHERE guild_id = ? AND user_id = ? AND status IN ('open', 'claimed')""",
            (guild_id, user_id),
        )
        return row["total"] if row else 0

    def next_ticket_number(self: "DatabaseManager", guild_id: int) -> int:
        """Sequential number for the ticket name's {number} placeholder."""
        row = self.fetchone(
            "SELECT COUNT(*) AS total FROM tickets WHERE guild_id = ?",
            (guild_id,),
        )
        return (row["total"] if row else 0) + 1

    def claim_ticket(self: "DatabaseManager", channel_id: int, staff_id: int) -> bool:
        """Move an open ticket to claimed. False if it was not open."""
        cursor = self.execute(
            """UPDATE tickets SET status = 'claimed', claimed_by = ?, claimed_at = ?
               WHERE channel_id = ? AND status = 'open'""",
            (staff_id, time.time(), channel_id),
        )
        if cursor.rowcount > 0:
            logger.tree("Ticket Claimed", [
                ("Channel ID", str(channel_id)),
                ("Staff ID", str(staff_id)),
            ], emoji="✋")
            return True
        return False

    def close_ticket(self: "DatabaseManager", channel_id: int, closed_by: int) -> bool:
        """Close an open or claimed ticket. False if already closed or unknown."""
        cursor = self.execute(
            """UPDATE tickets SET status = 'closed', closed_by = ?, closed_at = ?
               WHERE channel_id = ? AND status IN ('open', 'claimed')""",
            (closed_by, time.time(), channel_id),
        )
        if cursor.rowcount > 0:
            logger.tree("Ticket Closed", [
                ("Channel ID", str(channel_id)),
                ("Closed By", str(closed_by)),
            ], emoji="🔒")
            return True
        return False
