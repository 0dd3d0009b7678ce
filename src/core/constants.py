"""
Community Bot - Centralized Constants
=====================================

Magic numbers shared across services. Import from here instead of
hardcoding values.

Author: حَـــــنَّـــــا
"""

# =============================================================================
# Time Constants (in seconds)
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# =============================================================================
# Interval Constants (in seconds)
# =============================================================================

SWEEP_INTERVAL = 60                        # Wizard session + guard sweep
GIVEAWAY_CHECK_INTERVAL = SECONDS_PER_MINUTE
BIRTHDAY_RETRY_DELAY = 5 * SECONDS_PER_MINUTE  # Wait after a failed birthday run

# =============================================================================
# Timeout Constants (in seconds)
# =============================================================================

INTERACTION_GUARD_TIMEOUT = 30
CONFIRMATION_TIMEOUT = 30
WIZARD_VIEW_TIMEOUT = 15 * SECONDS_PER_MINUTE  # Discord-side view lifetime
TICKET_DELETE_DELAY = 5                    # Grace period before deleting a closed ticket channel

# =============================================================================
# Database Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0
SQLITE_BUSY_TIMEOUT = 5000                 # milliseconds

# =============================================================================
# Ticket Constants
# =============================================================================

MAX_TICKET_TYPES = 25                      # 5 buttons x 5 rows
PANEL_BUTTONS_PER_ROW = 5
MAX_TICKETS_PER_USER_LIMIT = 10
TICKET_NAME_MAX_LENGTH = 100

# =============================================================================
# Giveaway Constants
# =============================================================================

GIVEAWAY_MAX_WINNERS = 5
GIVEAWAY_MAX_ENTRIES_PER_USER = 10
GIVEAWAY_MAX_PER_TICK = 3                  # Expired giveaways processed per check
GIVEAWAY_RETENTION_DAYS = 30
GIVEAWAY_MAX_DURATION_MINUTES = 60 * 24 * 30
GIVEAWAY_MAX_BONUS_ENTRIES = 50

# =============================================================================
# Discord Error Codes
# =============================================================================

UNKNOWN_INTERACTION = 10062                # Interaction expired before we answered
ALREADY_ACKNOWLEDGED = 40060               # Another code path answered first
