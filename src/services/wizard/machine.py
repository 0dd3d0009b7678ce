"""
Ticket Setup Wizard State Machine
=================================

Walks an admin through WELCOME -> CHANNELS -> TICKET_TYPES -> ADVANCED ->
REVIEW and saves the result with one upsert on confirm.

DESIGN:
    Sessions live in a SessionStore keyed by (guild_id, user_id). Every
    operation takes the session's lock, loads it, applies one transition,
    stores it back and returns a WizardOutcome carrying the ViewModel to
    show. A missing session never raises; it yields an "expired" outcome.

    Moves forward push the current step onto a breadcrumb stack; back()
    pops it. Jumping from the review screen into any step therefore
    returns to the review screen, not to the step before the jump target.

    Nothing is persisted until confirm(). A failed save leaves the
    session in place so the admin can press Confirm again.

Author: حَـــــنَّـــــا
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from src.core.constants import MAX_TICKET_TYPES, MAX_TICKETS_PER_USER_LIMIT
from src.core.logger import logger

from .constants import (
    DEFAULT_PANEL_DESCRIPTION,
    DEFAULT_PANEL_TITLE,
    DEFAULT_TICKET_TYPES,
    STEP_ORDER,
    TYPE_DESCRIPTION_MAX_LENGTH,
    TYPE_NAME_MAX_LENGTH,
    WizardStep,
)
from .models import SessionKey, TicketDraft, TicketType, WizardSession, is_valid_emoji, slugify
from .render import ViewModel, render_cancelled, render_completed, render_expired, render_step
from .session_store import SessionStore


# =============================================================================
# Outcome
# =============================================================================

ACTIVE = "active"
EXPIRED = "expired"
COMPLETED = "completed"
CANCELLED = "cancelled"


@dataclass
class WizardOutcome:
    """Result of one wizard operation."""

    view: ViewModel
    status: str = ACTIVE
    session: Optional[WizardSession] = None
    system: Optional[dict] = None

    @property
    def expired(self) -> bool:
        return self.status == EXPIRED

    @property
    def completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status == CANCELLED


# =============================================================================
# Validation
# =============================================================================

def step_requirement(step: WizardStep, draft: TicketDraft) -> Optional[str]:
    """Notice explaining what ``step`` still needs, or None when complete."""
    if step == WizardStep.CHANNELS:
        if draft.channel_id is None:
            return "Select a panel channel before continuing."
        if not draft.thread_mode and draft.category_id is None:
            return "Select a ticket category (or switch to threads) before continuing."
    elif step == WizardStep.TICKET_TYPES:
        if not draft.types:
            return "Add at least one ticket type before continuing."
        if len(draft.types) > MAX_TICKET_TYPES:
            return f"A panel can hold at most {MAX_TICKET_TYPES} ticket types."
    return None


def validate_draft(draft: TicketDraft) -> Optional[str]:
    """First problem that blocks saving, or None."""
    for step in STEP_ORDER:
        problem = step_requirement(step, draft)
        if problem:
            return problem
    return None


# =============================================================================
# Wizard
# =============================================================================

class TicketSetupWizard:
    """
    Ticket setup state machine.

    Args:
        store: Session storage shared with the sweeper.
        persist: Saves a confirmed draft; called as persist(guild_id, fields)
            and returns the stored record. Usually db.upsert_ticket_system.
    """

    def __init__(
        self,
        store: SessionStore[SessionKey, WizardSession],
        persist: Callable[[Optional[int], dict], Any],
    ) -> None:
        self.store = store
        self._persist = persist

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(
        self,
        guild_id: Optional[int],
        user_id: int,
        draft: Optional[TicketDraft] = None,
    ) -> WizardOutcome:
        """Open a fresh session at WELCOME, replacing any existing one."""
        key = (guild_id, user_id)
        async with self.store.lock(key):
            session = WizardSession(guild_id=guild_id, user_id=user_id, draft=draft or TicketDraft())
            self.store.set(key, session)

        logger.tree("Ticket Wizard Started", [
            ("Guild ID", str(guild_id)),
            ("User ID", str(user_id)),
            ("Mode", "Edit" if session.draft.is_editing else "New"),
        ], emoji="🧙")
        return self._active(session)

    async def cancel(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """Discard the session. Cancelling a missing session is not an error."""
        key = (guild_id, user_id)
        async with self.store.lock(key):
            existed = self.store.delete(key)

        if existed:
            logger.tree("Ticket Wizard Cancelled", [
                ("Guild ID", str(guild_id)),
                ("User ID", str(user_id)),
            ], emoji="✖️")
        return WizardOutcome(render_cancelled(), CANCELLED)

    async def confirm(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """
        Validate and save the draft, then end the session.

        Only legal at REVIEW. Validation or save failures re-render REVIEW
        with a notice and keep the session.
        """
        key = (guild_id, user_id)
        async with self.store.lock(key):
            session = self.store.get(key)
            if session is None:
                return self._expired()

            if session.step != WizardStep.REVIEW:
                return self._keep(session, "Finish the remaining steps before confirming.")

            problem = validate_draft(session.draft)
            if problem:
                return self._keep(session, problem)

            try:
                system = self._persist(guild_id, session.draft.to_record())
            except Exception as e:
                logger.error("Ticket Wizard Save Failed", [
                    ("Guild ID", str(guild_id)),
                    ("User ID", str(user_id)),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
                return self._keep(session, "Saving failed. Your draft is kept, press **Confirm** to try again.")

            self.store.delete(key)

        logger.tree("Ticket Wizard Completed", [
            ("Guild ID", str(guild_id)),
            ("User ID", str(user_id)),
            ("Types", str(len(session.draft.types))),
        ], emoji="✅")
        return WizardOutcome(render_completed(session.draft), COMPLETED, session, system)

    # =========================================================================
    # Navigation
    # =========================================================================

    async def next(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """Advance one step if the current step is complete."""

        def apply(session: WizardSession) -> Optional[str]:
            if session.step == WizardStep.REVIEW:
                return None
            problem = step_requirement(session.step, session.draft)
            if problem:
                return problem
            session.history.append(session.step)
            session.step = STEP_ORDER[STEP_ORDER.index(session.step) + 1]
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def back(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """Return to the previous step on the breadcrumb stack."""

        def apply(session: WizardSession) -> Optional[str]:
            if session.history:
                session.step = session.history.pop()
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def jump(self, guild_id: Optional[int], user_id: int, step: WizardStep) -> WizardOutcome:
        """Go straight to ``step``; back() returns to where the jump started."""

        def apply(session: WizardSession) -> Optional[str]:
            if step != session.step:
                session.history.append(session.step)
                session.step = step
            return None

        return await self._mutate(guild_id, user_id, apply)

    # =========================================================================
    # Draft Edits
    # =========================================================================

    async def update_field(self, guild_id: Optional[int], user_id: int, name: str, value: Any) -> WizardOutcome:
        """
        Set one draft field without moving.

        Raises:
            ValueError: If ``name`` is not a draft field.
        """
        if name not in TicketDraft.field_names() or name in ("types", "is_editing", "edit_id"):
            raise ValueError(f"Unknown wizard field: {name}")

        def apply(session: WizardSession) -> Optional[str]:
            setattr(session.draft, name, value)
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def set_panel_text(
        self,
        guild_id: Optional[int],
        user_id: int,
        title: str,
        description: str,
    ) -> WizardOutcome:
        """Set the panel title and description together; blanks restore the defaults."""

        def apply(session: WizardSession) -> Optional[str]:
            session.draft.panel_title = title.strip() or DEFAULT_PANEL_TITLE
            session.draft.panel_description = description.strip() or DEFAULT_PANEL_DESCRIPTION
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def toggle_thread_mode(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        def apply(session: WizardSession) -> Optional[str]:
            session.draft.thread_mode = not session.draft.thread_mode
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def set_ticket_limit(self, guild_id: Optional[int], user_id: int, raw: str) -> WizardOutcome:
        """Parse and clamp the per-user open ticket limit (0 = unlimited)."""

        def apply(session: WizardSession) -> Optional[str]:
            try:
                limit = int(raw.strip())
            except ValueError:
                return f"The ticket limit must be a number between 0 and {MAX_TICKETS_PER_USER_LIMIT}."
            session.draft.max_tickets_per_user = max(0, min(limit, MAX_TICKETS_PER_USER_LIMIT))
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def add_type(
        self,
        guild_id: Optional[int],
        user_id: int,
        name: str,
        emoji: str = "",
        description: str = "",
    ) -> WizardOutcome:
        """Append a ticket type; duplicates and overflow become notices."""

        def apply(session: WizardSession) -> Optional[str]:
            clean_name = name.strip()[:TYPE_NAME_MAX_LENGTH]
            value = slugify(clean_name)
            if not value:
                return "Ticket type names need at least one letter or number."
            if len(session.draft.types) >= MAX_TICKET_TYPES:
                return f"A panel can hold at most {MAX_TICKET_TYPES} ticket types."
            if any(t.value == value for t in session.draft.types):
                return f"A ticket type named **{clean_name}** already exists."
            clean_emoji = emoji.strip()
            if clean_emoji and not is_valid_emoji(clean_emoji):
                return (
                    f"`{clean_emoji[:32]}` is not an emoji. Use a single emoji "
                    "or a server emoji like `<:name:id>`."
                )
            ticket_type = TicketType(
                name=clean_name,
                description=description.strip()[:TYPE_DESCRIPTION_MAX_LENGTH],
                value=value,
            )
            if clean_emoji:
                ticket_type.emoji = clean_emoji
            session.draft.types.append(ticket_type)
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def remove_type(self, guild_id: Optional[int], user_id: int, value: str) -> WizardOutcome:
        def apply(session: WizardSession) -> Optional[str]:
            session.draft.types = [t for t in session.draft.types if t.value != value]
            return None

        return await self._mutate(guild_id, user_id, apply)

    async def apply_quick_setup(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """Add the default ticket types that are not present yet."""

        def apply(session: WizardSession) -> Optional[str]:
            existing = {t.value for t in session.draft.types}
            for name, emoji, description in DEFAULT_TICKET_TYPES:
                if len(session.draft.types) >= MAX_TICKET_TYPES:
                    break
                ticket_type = TicketType(name=name, emoji=emoji, description=description)
                if ticket_type.value not in existing:
                    session.draft.types.append(ticket_type)
            return None

        return await self._mutate(guild_id, user_id, apply)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_session(self, guild_id: Optional[int], user_id: int) -> Optional[WizardSession]:
        return self.store.get((guild_id, user_id))

    async def refresh(self, guild_id: Optional[int], user_id: int) -> WizardOutcome:
        """Re-render the current step and clear any notice."""
        return await self._mutate(guild_id, user_id, lambda session: None)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _mutate(
        self,
        guild_id: Optional[int],
        user_id: int,
        apply: Callable[[WizardSession], Optional[str]],
    ) -> WizardOutcome:
        """Run ``apply`` on the locked session; a returned string is shown as a notice."""
        key = (guild_id, user_id)
        async with self.store.lock(key):
            session = self.store.get(key)
            if session is None:
                return self._expired()
            notice = apply(session)
            return self._keep(session, notice)

    def _keep(self, session: WizardSession, notice: Optional[str]) -> WizardOutcome:
        session.notice = notice
        session.touch()
        self.store.set(session.key, session)
        return self._active(session)

    @staticmethod
    def _active(session: WizardSession) -> WizardOutcome:
        return WizardOutcome(render_step(session.step, session.draft, session.notice), ACTIVE, session)

    @staticmethod
    def _expired() -> WizardOutcome:
        return WizardOutcome(render_expired(), EXPIRED)


__all__ = [
    "TicketSetupWizard",
    "WizardOutcome",
    "step_requirement",
    "validate_draft",
]
