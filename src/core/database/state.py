"""
Community Bot - State Operations Mixin
======================================

Key/value bot state stored as JSON.

Author: حَـــــنَّـــــا
"""

import json
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .manager import DatabaseManager


class StateMixin:
    """Mixin for bot state operations."""

    def get_bot_state(self: "DatabaseManager", key: str, default: Any = None) -> Any:
        """
        Get a bot state value.

        Args:
            key: State key to retrieve.
            default: Returned when the key is not stored.
        """
        row = self.fetchone("SELECT value FROM bot_state WHERE key = ?", (key,))
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            return row["value"]

    def set_bot_state(self: "DatabaseManager", key: str, value: Any) -> None:
        """Store ``value`` (JSON encoded) under ``key``."""
        self.execute(
            "INSERT OR REPLACE INTO bot_state (key, value, updated_at) VALUES (?, ?, ?)",
            (key, json.dumps(value), time.time()),
        )
