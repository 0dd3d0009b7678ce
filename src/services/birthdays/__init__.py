"""
Birthdays Package
=================

Author: حَـــــنَّـــــا
"""

from .helpers import build_announcement_embed, build_set_embed, format_date, is_valid_date, seconds_until
from .scheduler import LAST_SENT_KEY, BirthdayScheduler

__all__ = [
    "BirthdayScheduler",
    "LAST_SENT_KEY",
    "build_announcement_embed",
    "build_set_embed",
    "format_date",
    "is_valid_date",
    "seconds_until",
]
