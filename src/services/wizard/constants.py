"""
Ticket Setup Wizard Constants
=============================

Steps, defaults and custom ids for the ticket setup wizard.

Author: حَـــــنَّـــــا
"""

from enum import Enum
from typing import Dict, List, Tuple


class WizardStep(str, Enum):
    """Wizard steps in the order they are walked."""

    WELCOME = "welcome"
    CHANNELS = "channels"
    TICKET_TYPES = "ticket_types"
    ADVANCED = "advanced"
    REVIEW = "review"


STEP_ORDER: List[WizardStep] = [
    WizardStep.WELCOME,
    WizardStep.CHANNELS,
    WizardStep.TICKET_TYPES,
    WizardStep.ADVANCED,
    WizardStep.REVIEW,
]

STEP_TITLES: Dict[WizardStep, str] = {
    WizardStep.WELCOME: "Welcome",
    WizardStep.CHANNELS: "Channels",
    WizardStep.TICKET_TYPES: "Ticket Types",
    WizardStep.ADVANCED: "Advanced",
    WizardStep.REVIEW: "Review",
}


# =============================================================================
# Draft Defaults
# =============================================================================

DEFAULT_NAMING_FORMAT = "ticket-{type}-{user}"
DEFAULT_PANEL_TITLE = "Support Tickets"
DEFAULT_PANEL_DESCRIPTION = "Click a button below to create a ticket for assistance."
DEFAULT_MAX_TICKETS = 1
DEFAULT_TYPE_EMOJI = "🎫"

# (name, emoji, description)
DEFAULT_TICKET_TYPES: List[Tuple[str, str, str]] = [
    ("General Support", "🆘", "Get help with general questions"),
    ("Bug Report", "🐛", "Report a bug or issue"),
    ("Feature Request", "💡", "Suggest a new feature"),
    ("Other", "❓", "Anything else"),
]

TYPE_NAME_MAX_LENGTH = 50
TYPE_DESCRIPTION_MAX_LENGTH = 100


# =============================================================================
# Custom IDs
# =============================================================================

# Navigation
WIZARD_NEXT = "ticket_wizard_next"
WIZARD_BACK = "ticket_wizard_back"
WIZARD_CANCEL = "ticket_wizard_cancel"
WIZARD_CONFIRM = "ticket_wizard_confirm"
WIZARD_JUMP = "ticket_wizard_jump_"          # + step value

# Channels step
SELECT_PANEL_CHANNEL = "wizard_select_panel_channel"
SELECT_CATEGORY = "wizard_select_category"
SELECT_LOG_CHANNEL = "wizard_select_log_channel"
TOGGLE_MODE = "wizard_toggle_mode"

# Ticket types step
ADD_TYPE = "wizard_add_type"
QUICK_SETUP = "wizard_quick_setup"
REMOVE_TYPE = "wizard_remove_type"

# Advanced step
SET_ROLE = "wizard_set_role"
SET_FORMAT = "wizard_set_format"
SET_PANEL = "wizard_set_panel"
SET_LIMITS = "wizard_set_limits"

# Modals and their inputs
TYPE_MODAL = "wizard_type_modal"
ROLE_MODAL = "wizard_role_modal"
NAMING_MODAL = "wizard_naming_modal"
PANEL_MODAL = "wizard_panel_modal"
LIMITS_MODAL = "wizard_limits_modal"

FIELD_TYPE_NAME = "type_name"
FIELD_TYPE_EMOJI = "type_emoji"
FIELD_TYPE_DESCRIPTION = "type_description"
FIELD_REQUIRED_ROLE = "required_role_id"
FIELD_NAMING_FORMAT = "naming_format"
FIELD_PANEL_TITLE = "panel_title"
FIELD_PANEL_DESCRIPTION = "panel_description"
FIELD_MAX_TICKETS = "max_tickets"
