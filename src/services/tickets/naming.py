"""
Ticket Naming
=============

Channel / thread names built from the guild's naming format.

Author: حَـــــنَّـــــا
"""

import re

from src.core.constants import TICKET_NAME_MAX_LENGTH
from src.services.wizard.constants import DEFAULT_NAMING_FORMAT

_INVALID_RE = re.compile(r"[^a-z0-9_-]+")
_DASHES_RE = re.compile(r"-{2,}")


def format_ticket_name(naming_format: str, ticket_type: str, username: str, number: int) -> str:
    """
    Fill {type}, {user} and {number} and make the result a valid channel name.

    Lowercased, anything outside [a-z0-9_-] becomes '-', repeated dashes
    collapse, at most 100 characters. An empty result falls back to
    ``ticket-<number>``.
    """
    name = (naming_format or DEFAULT_NAMING_FORMAT)
    name = name.replace("{type}", ticket_type).replace("{user}", username).replace("{number}", str(number))
    name = _INVALID_RE.sub("-", name.lower())
    name = _DASHES_RE.sub("-", name).strip("-")
    name = name[:TICKET_NAME_MAX_LENGTH].rstrip("-")
    return name or f"ticket-{number}"


__all__ = ["format_ticket_name"]
