"""
Community Bot - Database Helpers
================================

Small helpers shared by the database mixins.

Author: حَـــــنَّـــــا
"""

import json
from typing import Any, Optional

from src.core.logger import logger


def _safe_json_loads(value: Optional[str], default: Any) -> Any:
    """Decode a JSON column, returning ``default`` when empty or corrupt."""
    if not value:
        return default
    try:
        return json.loads(value)
    except (json.JSONDecodeError, ValueError):
        logger.warning("Corrupted JSON in database", [
            ("Value", value[:50]),
        ])
        return default
