"""
Community Bot - Database Manager
================================

Central SQLite database manager for all bot data.

Author: حَـــــنَّـــــا
"""

import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from src.core.logger import logger
from src.core.constants import DB_CONNECTION_TIMEOUT, SQLITE_BUSY_TIMEOUT

from src.core.database.schema import SchemaMixin
from src.core.database.guild_config import GuildConfigMixin
from src.core.database.ticket_systems import TicketSystemsMixin
from src.core.database.tickets import TicketsMixin
from src.core.database.birthdays import BirthdaysMixin
from src.core.database.giveaways import GiveawaysMixin
from src.core.database.state import StateMixin


# =============================================================================
# Constants
# =============================================================================

# src/core/database/manager.py -> project root is four levels up
DATA_DIR: Path = Path(__file__).parent.parent.parent.parent / "data"
DB_PATH: Path = DATA_DIR / "community.db"


# =============================================================================
# Database Manager (Singleton)
# =============================================================================

class DatabaseManager(
    SchemaMixin,
    GuildConfigMixin,
    TicketSystemsMixin,
    TicketsMixin,
    BirthdaysMixin,
    GiveawaysMixin,
    StateMixin,
):
    """
    Process-wide database manager.

    DESIGN: One connection shared by every handler, WAL mode for
    concurrent readers, and a lock around each statement so background
    sweeps and interaction handlers never interleave a write.
    """

    _instance: Optional["DatabaseManager"] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._db_lock: threading.RLock = threading.RLock()
        self._conn: Optional[sqlite3.Connection] = None
        self._path: Path = DB_PATH

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._connect()
        self._init_tables()
        self._initialized = True

        logger.tree("Database Manager Initialized", [
            ("Path", str(self._path)),
            ("WAL Mode", "Enabled"),
        ], emoji="🗄️")

    # =========================================================================
    # Connection Management
    # =========================================================================

    def _connect(self) -> None:
        try:
            self._conn = sqlite3.connect(
                str(self._path),
                check_same_thread=False,
                timeout=DB_CONNECTION_TIMEOUT,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT}")
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            logger.error("Database Connection Failed", [
                ("Path", str(self._path)),
                ("Error", str(e)),
            ])
            raise

    def _ensure_connection(self) -> sqlite3.Connection:
        """Return a live connection, reconnecting if it was dropped."""
        if self._conn is None:
            self._connect()
        try:
            self._conn.execute("SELECT 1")
        except sqlite3.Error:
            self._connect()
        return self._conn

    def execute(self, query: str, params: Tuple = (), commit: bool = True) -> sqlite3.Cursor:
        """Execute one statement under the connection lock."""
        with self._db_lock:
            conn = self._ensure_connection()
            cursor = conn.execute(query, params)
            if commit:
                conn.commit()
            return cursor

    def fetchone(self, query: str, params: Tuple = ()) -> Optional[sqlite3.Row]:
        return self.execute(query, params, commit=False).fetchone()

    def fetchall(self, query: str, params: Tuple = ()) -> List[sqlite3.Row]:
        return self.execute(query, params, commit=False).fetchall()

    def close(self) -> None:
        with self._db_lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("Database Connection Closed")

    # =========================================================================
    # Transaction Support
    # =========================================================================

    class Transaction:
        """
        Atomic block of statements.

        Usage:
            with db.transaction() as tx:
                row = tx.execute("SELECT ...", (...)).fetchone()
                tx.execute("UPDATE ...", (...))
            # Commits on success, rolls back on exception
        """

        def __init__(self, db: "DatabaseManager"):
            self._db = db
            self._conn: Optional[sqlite3.Connection] = None

        def __enter__(self) -> "DatabaseManager.Transaction":
            self._db._db_lock.acquire()
            try:
                self._conn = self._db._ensure_connection()
                self._conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error:
                self._db._db_lock.release()
                raise
            return self

        def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
            try:
                if exc_type is None:
                    self._conn.commit()
                else:
                    self._conn.rollback()
                    logger.warning("Database Transaction Rolled Back", [
                        ("Error", str(exc_val)[:100] if exc_val else "Unknown"),
                    ])
            finally:
                self._db._db_lock.release()
            return False

        def execute(self, query: str, params: Tuple = ()) -> sqlite3.Cursor:
            return self._conn.execute(query, params)

    def transaction(self) -> "DatabaseManager.Transaction":
        """Open a BEGIN IMMEDIATE transaction."""
        return self.Transaction(self)


# =============================================================================
# Global Instance
# =============================================================================

def get_db() -> DatabaseManager:
    """Return the shared DatabaseManager."""
    return DatabaseManager()


__all__ = ["DatabaseManager", "get_db", "DB_PATH", "DATA_DIR"]
