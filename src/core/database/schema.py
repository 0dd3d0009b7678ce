"""
Database Schema Module
======================

Table definitions and column migrations.

Author: حَـــــنَّـــــا
"""

import sqlite3
from typing import TYPE_CHECKING, Dict, List

from src.core.logger import logger

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


# =============================================================================
# Guild Config Columns
# =============================================================================

GUILD_CONFIG_COLUMNS: Dict[str, str] = {
    # Welcome
    "welcome_channel": "INTEGER",
    "welcome_role": "INTEGER",
    "welcome_title": "TEXT",
    "welcome_message": "TEXT",
    "welcome_color": "TEXT",
    "welcome_image": "TEXT",
    "welcome_footer": "TEXT",
    "welcome_embed_enabled": "INTEGER DEFAULT 1",
    # Birthdays
    "birthday_channel": "INTEGER",
    # Tickets
    "ticket_staff_role": "INTEGER",
}
"""Feature columns on guild_config. New entries are added to old databases at startup."""


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Create tables if missing and migrate in new columns.

        DESIGN: CREATE TABLE IF NOT EXISTS makes restarts safe; columns
        added after a table first shipped go through _add_missing_columns
        so existing databases pick them up.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # Bot State (key/value JSON)
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS bot_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Guild Config
        # DESIGN: One row per guild, created lazily, never deleted
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS guild_config (
                guild_id INTEGER PRIMARY KEY,
                created_at REAL,
                updated_at REAL
            )
        """)
        self._add_missing_columns(cursor, "guild_config", GUILD_CONFIG_COLUMNS)

        # -----------------------------------------------------------------
        # Ticket Systems (confirmed setup wizard output)
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS ticket_systems (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER UNIQUE NOT NULL,
                channel_id INTEGER,
                category_id INTEGER,
                log_channel_id INTEGER,
                thread_mode INTEGER DEFAULT 0,
                required_role_id INTEGER,
                naming_format TEXT DEFAULT 'ticket-{type}-{user}',
                types TEXT DEFAULT '[]',
                panel_title TEXT,
                panel_description TEXT,
                max_tickets_per_user INTEGER DEFAULT 1,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        self._add_missing_columns(cursor, "ticket_systems", {
            "panel_message_id": "INTEGER",
        })

        # -----------------------------------------------------------------
        # Tickets
        # DESIGN: status only moves open -> claimed -> closed
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS tickets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                channel_id INTEGER UNIQUE NOT NULL,
                user_id INTEGER NOT NULL,
                type TEXT,
                status TEXT NOT NULL DEFAULT 'open',
                claimed_by INTEGER,
                claimed_at REAL,
                closed_by INTEGER,
                closed_at REAL,
                created_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_tickets_user ON tickets(guild_id, user_id, status)"
        )

        # -----------------------------------------------------------------
        # Birthdays
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS birthdays (
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                day INTEGER NOT NULL,
                month INTEGER NOT NULL,
                set_by INTEGER,
                set_at REAL,
                PRIMARY KEY (user_id, guild_id)
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_birthdays_date ON birthdays(guild_id, month, day)"
        )

        # -----------------------------------------------------------------
        # Giveaways
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS giveaways (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                channel_id INTEGER NOT NULL,
                message_id INTEGER,
                title TEXT NOT NULL,
                description TEXT,
                end_time REAL NOT NULL,
                winners INTEGER NOT NULL DEFAULT 1,
                created_by INTEGER,
                participants TEXT DEFAULT '{}',
                bonus_roles TEXT DEFAULT '[]',
                created_at REAL NOT NULL
            )
        """)
        self._add_missing_columns(cursor, "giveaways", {
            "ended": "INTEGER DEFAULT 0",
            "winner_ids": "TEXT DEFAULT '[]'",
        })
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_giveaways_due ON giveaways(ended, end_time)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_giveaways_message ON giveaways(message_id)"
        )

        conn.commit()

    def _add_missing_columns(
        self: "DatabaseManager",
        cursor: sqlite3.Cursor,
        table: str,
        columns: Dict[str, str],
    ) -> List[str]:
        """
        Add every column in ``columns`` that ``table`` does not have yet.

        Returns:
            Names of the columns that were added.
        """
        existing = {row[1] for row in cursor.execute(f"PRAGMA table_info({table})")}
        added = []
        for name, definition in columns.items():
            if name in existing:
                continue
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {name} {definition}")
            added.append(name)

        if added:
            logger.tree("Schema Migrated", [
                ("Table", table),
                ("Added", ", ".join(added)),
            ], emoji="🧱")
        return added
