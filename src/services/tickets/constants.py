"""
Ticket System Constants
=======================

Custom ids and presentation constants for ticket panels and tickets.

Author: حَـــــنَّـــــا
"""

from src.core.config import EmbedColors


# Custom id prefixes (suffix = ticket type value or channel id)
PANEL_BUTTON_PREFIX = "ticket_button_"
CLAIM_PREFIX = "ticket_claim_"
CLOSE_PREFIX = "ticket_close_"

THREAD_AUTO_ARCHIVE_MINUTES = 10080        # 7 days

STATUS_COLOR = {
    "open": EmbedColors.TICKET,
    "claimed": EmbedColors.WARNING,
    "closed": EmbedColors.ENDED,
}

STATUS_EMOJI = {
    "open": "🟢",
    "claimed": "✋",
    "closed": "🔒",
}
