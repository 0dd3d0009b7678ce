"""
Community Bot - Giveaway Operations
===================================

Giveaways and their entrants.

DESIGN:
    Participants are a JSON object {user_id: entries} on the giveaway row.
    Joining reads, checks and writes that object inside one transaction so
    two simultaneous joins cannot drop each other's entry.

Author: حَـــــنَّـــــا
"""

import json
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from src.core.logger import logger
from src.core.database.base import _safe_json_loads
from src.core.database.models import BonusRoleRecord, GiveawayRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


def _row_to_giveaway(row) -> GiveawayRecord:
    record: Dict[str, Any] = dict(row)
    participants = _safe_json_loads(record.get("participants"), {})
    record["participants"] = {int(user_id): int(entries) for user_id, entries in participants.items()}
    record["bonus_roles"] = _safe_json_loads(record.get("bonus_roles"), [])
    record["winner_ids"] = [int(w) for w in _safe_json_loads(record.get("winner_ids"), [])]
    record["ended"] = bool(record.get("ended"))
    return record


class GiveawaysMixin:
    """Mixin for giveaway operations."""

    def create_giveaway(
        self: "DatabaseManager",
        guild_id: int,
        channel_id: int,
        title: str,
        end_time: float,
        winners: int,
        created_by: int,
        description: Optional[str] = None,
        bonus_roles: Optional[List[BonusRoleRecord]] = None,
        message_id: Optional[int] = None,
    ) -> int:
        cursor = self.execute(
            """INSERT INTO giveaways (
                guild_id, channel_id, message_id, title, description, end_time,
                winners, created_by, participants, bonus_roles, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, '{}', ?, ?)""",
            (
                guild_id, channel_id, message_id, title, description, end_time,
                winners, created_by, json.dumps(bonus_roles or []), time.time(),
            ),
        )
        logger.tree("Giveaway Created", [
            ("ID", str(cursor.lastrowid)),
            ("Title", title[:50]),
            ("Winners", str(winners)),
            ("Bonus Roles", str(len(bonus_roles or []))),
        ], emoji="🎉")
        return cursor.lastrowid

    def set_giveaway_message(self: "DatabaseManager", giveaway_id: int, message_id: int) -> None:
        self.execute(
            "UPDATE giveaways SET message_id = ? WHERE id = ?",
            (message_id, giveaway_id),
        )

    def get_giveaway(self: "DatabaseManager", giveaway_id: int) -> Optional[GiveawayRecord]:
        row = self.fetchone("SELECT * FROM giveaways WHERE id = ?", (giveaway_id,))
        return _row_to_giveaway(row) if row else None

    def get_giveaway_by_message(self: "DatabaseManager", message_id: int) -> Optional[GiveawayRecord]:
        row = self.fetchone("SELECT * FROM giveaways WHERE message_id = ?", (message_id,))
        return _row_to_giveaway(row) if row else None

    def get_active_giveaways(self: "DatabaseManager", guild_id: int) -> List[GiveawayRecord]:
        rows = self.fetchall(
            "SELECT * FROM giveaways WHERE guild_id = ? AND ended = 0 ORDER BY end_time ASC",
            (guild_id,),
        )
        return [_row_to_giveaway(row) for row in rows]

    def get_expired_giveaways(self: "DatabaseManager", now: float, limit: int) -> List[GiveawayRecord]:
        """Unfinished giveaways whose end time has passed, soonest first."""
        rows = self.fetchall(
            """SELECT * FROM giveaways WHERE ended = 0 AND end_time <= ?
               ORDER BY end_time ASC LIMIT ?""",
            (now, limit),
        )
        return [_row_to_giveaway(row) for row in rows]

    def add_giveaway_participant(
        self: "DatabaseManager",
        giveaway_id: int,
        user_id: int,
        entries: int,
    ) -> Optional[Dict[int, int]]:
        """
        Add a user to a running giveaway.

        Returns:
            The updated participants map, or None when the giveaway is
            missing, already ended, or the user has already joined.
        """
        with self.transaction() as tx:
            row = tx.execute(
                "SELECT participants, ended FROM giveaways WHERE id = ?",
                (giveaway_id,),
            ).fetchone()
            if row is None or row["ended"]:
                return None
            participants = _safe_json_loads(row["participants"], {})
            if str(user_id) in participants:
                return None
            participants[str(user_id)] = entries
            tx.execute(
                "UPDATE giveaways SET participants = ? WHERE id = ?",
                (json.dumps(participants), giveaway_id),
            )
        return {int(uid): int(count) for uid, count in participants.items()}

    def mark_giveaway_ended(self: "DatabaseManager", giveaway_id: int, winner_ids: List[int]) -> bool:
        """End a running giveaway. False if it had already ended."""
        cursor = self.execute(
            "UPDATE giveaways SET ended = 1, winner_ids = ? WHERE id = ? AND ended = 0",
            (json.dumps(winner_ids), giveaway_id),
        )
        return cursor.rowcount > 0

    def set_giveaway_winners(self: "DatabaseManager", giveaway_id: int, winner_ids: List[int]) -> None:
        """Replace the winners of an ended giveaway (reroll)."""
        self.execute(
            "UPDATE giveaways SET winner_ids = ? WHERE id = ?",
            (json.dumps(winner_ids), giveaway_id),
        )

    def delete_giveaway(self: "DatabaseManager", giveaway_id: int) -> None:
        self.execute("DELETE FROM giveaways WHERE id = ?", (giveaway_id,))

    def purge_old_giveaways(self: "DatabaseManager", older_than: float) -> int:
        """Delete ended giveaways whose end time is before ``older_than``."""
        cursor = self.execute(
            "DELETE FROM giveaways WHERE ended = 1 AND end_time < ?",
            (older_than,),
        )
        if cursor.rowcount:
            logger.info("Old Giveaways Purged", [("Count", str(cursor.rowcount))])
        return cursor.rowcount
