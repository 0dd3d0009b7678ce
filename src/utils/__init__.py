"""
Community Bot - Utils Package
=============================

Helpers shared across services.

Available Utilities:
    interaction: Single-acknowledgement response helpers
    retry: Transient-error retry and safe fetch/send
    footer: Standardized embed footer
    async_utils: Logged background tasks and gathers
    error_handler: Top-level error categorization

Author: حَـــــنَّـــــا
"""

from .footer import FOOTER_TEXT, init_footer, set_footer


__all__ = [
    "FOOTER_TEXT",
    "init_footer",
    "set_footer",
]
