"""
Ticket Setup Wizard Package
===========================

Multi-step ticket system setup: session store, state machine, pure
rendering, discord view builders and dispatcher routes.

Author: حَـــــنَّـــــا
"""

from .constants import STEP_ORDER, WizardStep
from .handlers import WizardRoutes, open_wizard
from .machine import TicketSetupWizard, WizardOutcome, step_requirement, validate_draft
from .models import TicketDraft, TicketType, WizardSession, is_valid_emoji, slugify
from .render import ViewModel, render_cancelled, render_completed, render_expired, render_step
from .session_store import InMemorySessionStore, SessionStore

__all__ = [
    "WizardStep",
    "STEP_ORDER",
    "TicketSetupWizard",
    "WizardOutcome",
    "WizardRoutes",
    "open_wizard",
    "step_requirement",
    "validate_draft",
    "TicketDraft",
    "TicketType",
    "WizardSession",
    "slugify",
    "is_valid_emoji",
    "ViewModel",
    "render_step",
    "render_expired",
    "render_cancelled",
    "render_completed",
    "SessionStore",
    "InMemorySessionStore",
]
