"""
Community Bot - Guild Config Operations
=======================================

Per-guild settings row shared by every feature.

DESIGN:
    The row is created lazily with INSERT OR IGNORE the first time any
    feature touches it and is never deleted. Reads fill unset columns with
    their documented defaults so callers never branch on NULL for text.

Author: حَـــــنَّـــــا
"""

import time
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from src.core.logger import logger
from src.core.database.models import GuildConfigRecord
from src.core.database.schema import GUILD_CONFIG_COLUMNS

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


GUILD_CONFIG_DEFAULTS: Dict[str, Any] = {
    "welcome_title": "Welcome!",
    "welcome_message": "Welcome {user} to **{guild}**! You are member #{member_count}.",
    "welcome_color": "#5865F2",
    "welcome_embed_enabled": 1,
}


class GuildConfigMixin:
    """Mixin for guild_config operations."""

    def ensure_guild_config(self: "DatabaseManager", guild_id: int) -> None:
        """Create the guild's row if it does not exist yet."""
        now = time.time()
        cursor = self.execute(
            "INSERT OR IGNORE INTO guild_config (guild_id, created_at, updated_at) VALUES (?, ?, ?)",
            (guild_id, now, now),
        )
        if cursor.rowcount > 0:
            logger.debug("Guild Config Created", [("Guild ID", str(guild_id))])

    def get_guild_config(self: "DatabaseManager", guild_id: int) -> GuildConfigRecord:
        """
        Return the guild's settings, creating the row on first access.

        Unset columns come back as their GUILD_CONFIG_DEFAULTS value.
        """
        self.ensure_guild_config(guild_id)
        row = self.fetchone("SELECT * FROM guild_config WHERE guild_id = ?", (guild_id,))
        record: Dict[str, Any] = dict(row)
        for key, default in GUILD_CONFIG_DEFAULTS.items():
            if record.get(key) is None:
                record[key] = default
        return record

    def update_guild_config(self: "DatabaseManager", guild_id: int, **fields: Any) -> None:
        """
        Set one or more feature columns.

        Raises:
            ValueError: If a field is not a guild_config column.
        """
        if not fields:
            return
        unknown = [name for name in fields if name not in GUILD_CONFIG_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown guild_config columns: {', '.join(unknown)}")

        self.ensure_guild_config(guild_id)
        assignments = ", ".join(f"{name} = ?" for name in fields)
        self.execute(
            f"UPDATE guild_config SET {assignments}, updated_at = ? WHERE guild_id = ?",
            (*fields.values(), time.time(), guild_id),
        )
        logger.tree("Guild Config Updated", [
            ("Guild ID", str(guild_id)),
            ("Fields", ", ".join(fields)),
        ], emoji="⚙️")

    def get_guilds_with_setting(self: "DatabaseManager", column: str) -> List[Tuple[int, Any]]:
        """Return ``(guild_id, value)`` for guilds where ``column`` is set."""
        if column not in GUILD_CONFIG_COLUMNS:
            raise ValueError(f"Unknown guild_config column: {column}")
        rows = self.fetchall(
            f"SELECT guild_id, {column} FROM guild_config WHERE {column} IS NOT NULL"
        )
        return [(row["guild_id"], row[column]) for row in rows]
