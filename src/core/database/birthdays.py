"""
Community Bot - Birthday Operations
===================================

Author: حَـــــنَّـــــا
"""

import time
from typing import TYPE_CHECKING, List, Optional

from src.core.logger import logger
from src.core.database.models import BirthdayRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class BirthdaysMixin:
    """Mixin for birthday operations."""

    def set_birthday(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        day: int,
        month: int,
        set_by: Optional[int] = None,
    ) -> None:
        """Store or replace a member's birthday. The date must already be validated."""
        self.execute(
            """INSERT OR REPLACE INTO birthdays (user_id, guild_id, day, month, set_by, set_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (user_id, guild_id, day, month, set_by or user_id, time.time()),
        )
        logger.tree("Birthday Set", [
            ("User ID", str(user_id)),
            ("Guild ID", str(guild_id)),
            ("Date", f"{day:02d}/{month:02d}"),
        ], emoji="🎂")

    def get_birthday(self: "DatabaseManager", user_id: int, guild_id: int) -> Optional[BirthdayRecord]:
        row = self.fetchone(
            "SELECT * FROM birthdays WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id),
        )
        return dict(row) if row else None

    def remove_birthday(self: "DatabaseManager", user_id: int, guild_id: int) -> bool:
        cursor = self.execute(
            "DELETE FROM birthdays WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id),
        )
        return cursor.rowcount > 0

    def get_guild_birthdays(self: "DatabaseManager", guild_id: int) -> List[BirthdayRecord]:
        """All birthdays in a guild in calendar order."""
        rows = self.fetchall(
            "SELECT * FROM birthdays WHERE guild_id = ? ORDER BY month, day",
            (guild_id,),
        )
        return [dict(row) for row in rows]

    def get_birthdays_on(self: "DatabaseManager", guild_id: int, day: int, month: int) -> List[BirthdayRecord]:
        rows = self.fetchall(
            "SELECT * FROM birthdays WHERE guild_id = ? AND day = ? AND month = ?",
            (guild_id, day, month),
        )
        return [dict(row) for row in rows]
