"""
Ticket Setup Wizard Rendering
=============================

Pure rendering of wizard state into a platform-neutral ViewModel.

DESIGN:
    render_step() only reads the step and draft and returns plain
    dataclasses. Turning a ViewModel into discord.Embed / discord.ui.View
    happens in views.py, so every screen can be checked in tests without
    a gateway connection.

Author: حَـــــنَّـــــا
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.core.config import EmbedColors
from src.core.constants import MAX_TICKET_TYPES

from .constants import (
    ADD_TYPE,
    QUICK_SETUP,
    REMOVE_TYPE,
    SELECT_CATEGORY,
    SELECT_LOG_CHANNEL,
    SELECT_PANEL_CHANNEL,
    SET_FORMAT,
    SET_LIMITS,
    SET_PANEL,
    SET_ROLE,
    STEP_ORDER,
    STEP_TITLES,
    TOGGLE_MODE,
    WIZARD_BACK,
    WIZARD_CANCEL,
    WIZARD_CONFIRM,
    WIZARD_JUMP,
    WIZARD_NEXT,
    WizardStep,
)
from .models import TicketDraft


# =============================================================================
# View Model
# =============================================================================

@dataclass
class FieldModel:
    name: str
    value: str
    inline: bool = False


@dataclass
class OptionModel:
    label: str
    value: str
    emoji: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ControlModel:
    """
    One interactive component.

    kind is "button", "select", "channel_select" or "category_select".
    style is a discord.ButtonStyle member name.
    """

    kind: str
    custom_id: str
    label: str = ""
    style: str = "secondary"
    emoji: Optional[str] = None
    disabled: bool = False
    row: int = 4
    options: List[OptionModel] = field(default_factory=list)


@dataclass
class ViewModel:
    title: str
    description: str
    color: int = EmbedColors.WIZARD
    fields: List[FieldModel] = field(default_factory=list)
    controls: List[ControlModel] = field(default_factory=list)
    notice: Optional[str] = None
    footer: Optional[str] = None

    def control(self, custom_id: str) -> Optional[ControlModel]:
        return next((c for c in self.controls if c.custom_id == custom_id), None)


# =============================================================================
# Formatting Helpers
# =============================================================================

def _channel(channel_id: Optional[int]) -> str:
    return f"<#{channel_id}>" if channel_id else "Not set"


def _role(role_id: Optional[int]) -> str:
    return f"<@&{role_id}>" if role_id else "Everyone"


def _limit(limit: int) -> str:
    return "Unlimited" if limit == 0 else str(limit)


def _types_summary(draft: TicketDraft) -> str:
    if not draft.types:
        return "No ticket types yet"
    return "\n".join(f"{t.emoji} **{t.name}** (`{t.value}`)" for t in draft.types)


def _nav(step: WizardStep, next_enabled: bool = True) -> List[ControlModel]:
    first = step == STEP_ORDER[0]
    controls = [
        ControlModel("button", WIZARD_BACK, "Back", "secondary", "◀️", disabled=first),
    ]
    if step == WizardStep.REVIEW:
        controls.append(ControlModel("button", WIZARD_CONFIRM, "Confirm", "success", "✅"))
    else:
        label = "Start" if first else "Next"
        controls.append(ControlModel("button", WIZARD_NEXT, label, "primary", "▶️", disabled=not next_enabled))
    controls.append(ControlModel("button", WIZARD_CANCEL, "Cancel", "danger", "✖️"))
    return controls


# =============================================================================
# Step Renderers
# =============================================================================

def _render_welcome(draft: TicketDraft) -> ViewModel:
    verb = "edit your" if draft.is_editing else "set up a"
    return ViewModel(
        title="🎫 Ticket Setup",
        description=(
            f"This wizard will help you {verb} ticket system.\n\n"
            "**1. Channels** - where the panel lives and where tickets open\n"
            "**2. Ticket Types** - the buttons members can press\n"
            "**3. Advanced** - role requirement, naming and limits\n"
            "**4. Review** - check everything and confirm"
        ),
        controls=_nav(WizardStep.WELCOME),
    )


def _render_channels(draft: TicketDraft) -> ViewModel:
    mode = "Private threads in the panel channel" if draft.thread_mode else "Channels in a category"
    controls = [
        ControlModel("channel_select", SELECT_PANEL_CHANNEL, "Panel channel", row=0),
    ]
    if not draft.thread_mode:
        controls.append(ControlModel("category_select", SELECT_CATEGORY, "Ticket category", row=1))
    controls.append(ControlModel("channel_select", SELECT_LOG_CHANNEL, "Log channel (optional)", row=2))
    controls.append(ControlModel(
        "button", TOGGLE_MODE,
        "Use Channels" if draft.thread_mode else "Use Threads",
        "secondary", "🔀", row=3,
    ))
    controls.extend(_nav(WizardStep.CHANNELS))

    return ViewModel(
        title="🎫 Ticket Setup",
        description="Pick where the ticket panel is posted and where new tickets are opened.",
        fields=[
            FieldModel("Panel Channel", _channel(draft.channel_id), True),
            FieldModel("Category", "Not needed" if draft.thread_mode else _channel(draft.category_id), True),
            FieldModel("Log Channel", _channel(draft.log_channel_id), True),
            FieldModel("Mode", mode),
        ],
        controls=controls,
    )


def _render_ticket_types(draft: TicketDraft) -> ViewModel:
    full = len(draft.types) >= MAX_TICKET_TYPES
    controls = [
        ControlModel("button", ADD_TYPE, "Add Type", "success", "➕", disabled=full, row=0),
        ControlModel("button", QUICK_SETUP, "Quick Setup", "secondary", "⚡", disabled=full, row=0),
    ]
    if draft.types:
        controls.append(ControlModel(
            "select", REMOVE_TYPE, "Remove a ticket type", row=1,
            options=[
                OptionModel(t.name, t.value, t.emoji, (t.description or None))
                for t in draft.types
            ],
        ))
    controls.extend(_nav(WizardStep.TICKET_TYPES))

    return ViewModel(
        title="🎫 Ticket Setup",
        description=(
            "Each ticket type becomes a button on the panel. "
            "Quick Setup adds a standard set you can trim afterwards."
        ),
        fields=[FieldModel(f"Ticket Types ({len(draft.types)}/{MAX_TICKET_TYPES})", _types_summary(draft))],
        controls=controls,
    )


def _render_advanced(draft: TicketDraft) -> ViewModel:
    controls = [
        ControlModel("button", SET_ROLE, "Required Role", "secondary", "🛡️", row=0),
        ControlModel("button", SET_FORMAT, "Naming Format", "secondary", "🏷️", row=0),
        ControlModel("button", SET_PANEL, "Panel Text", "secondary", "📝", row=0),
        ControlModel("button", SET_LIMITS, "Ticket Limit", "secondary", "🔢", row=0),
    ]
    controls.extend(_nav(WizardStep.ADVANCED))

    return ViewModel(
        title="🎫 Ticket Setup",
        description="Optional settings. Defaults work for most servers.",
        fields=[
            FieldModel("Required Role", _role(draft.required_role_id), True),
            FieldModel("Naming Format", f"`{draft.naming_format}`", True),
            FieldModel("Open Tickets per User", _limit(draft.max_tickets_per_user), True),
            FieldModel("Panel Title", draft.panel_title),
            FieldModel("Panel Description", draft.panel_description),
        ],
        controls=controls,
    )


def _render_review(draft: TicketDraft) -> ViewModel:
    controls = [
        ControlModel("button", f"{WIZARD_JUMP}{WizardStep.CHANNELS.value}", "Edit Channels", "secondary", "📍", row=0),
        ControlModel("button", f"{WIZARD_JUMP}{WizardStep.TICKET_TYPES.value}", "Edit Types", "secondary", "🗂️", row=0),
        ControlModel("button", f"{WIZARD_JUMP}{WizardStep.ADVANCED.value}", "Edit Advanced", "secondary", "⚙️", row=0),
    ]
    controls.extend(_nav(WizardStep.REVIEW))

    return ViewModel(
        title="🎫 Ticket Setup",
        description="Check the settings below, then press **Confirm** to save and post the panel.",
        fields=[
            FieldModel("Panel Channel", _channel(draft.channel_id), True),
            FieldModel("Category", "Threads" if draft.thread_mode else _channel(draft.category_id), True),
            FieldModel("Log Channel", _channel(draft.log_channel_id), True),
            FieldModel("Ticket Types", _types_summary(draft)),
            FieldModel("Required Role", _role(draft.required_role_id), True),
            FieldModel("Naming Format", f"`{draft.naming_format}`", True),
            FieldModel("Open Tickets per User", _limit(draft.max_tickets_per_user), True),
            FieldModel("Panel", f"**{draft.panel_title}**\n{draft.panel_description}"),
        ],
        controls=controls,
    )


_RENDERERS = {
    WizardStep.WELCOME: _render_welcome,
    WizardStep.CHANNELS: _render_channels,
    WizardStep.TICKET_TYPES: _render_ticket_types,
    WizardStep.ADVANCED: _render_advanced,
    WizardStep.REVIEW: _render_review,
}


# =============================================================================
# Public API
# =============================================================================

def render_step(step: WizardStep, draft: TicketDraft, notice: Optional[str] = None) -> ViewModel:
    """
    Render one wizard step.

    Args:
        step: Step to show.
        draft: Current draft (never modified).
        notice: Validation or error message shown above the fields.
    """
    view = _RENDERERS[step](draft)
    position = STEP_ORDER.index(step) + 1
    view.title = f"{view.title} · Step {position}/{len(STEP_ORDER)}: {STEP_TITLES[step]}"
    view.footer = "Editing existing ticket system" if draft.is_editing else None
    if notice:
        view.notice = notice
        view.color = EmbedColors.WARNING
    return view


def render_expired() -> ViewModel:
    return ViewModel(
        title="⏱️ Session Expired",
        description="This setup session has expired. Run `/ticket setup` to start again.",
        color=EmbedColors.WARNING,
    )


def render_cancelled() -> ViewModel:
    return ViewModel(
        title="✖️ Setup Cancelled",
        description="Nothing was saved. Run `/ticket setup` whenever you are ready.",
        color=EmbedColors.GRAY,
    )


def render_completed(draft: TicketDraft) -> ViewModel:
    verb = "updated" if draft.is_editing else "created"
    return ViewModel(
        title="✅ Ticket System Saved",
        description=f"Your ticket system was {verb}. The panel is being posted in {_channel(draft.channel_id)}.",
        color=EmbedColors.SUCCESS,
        fields=[FieldModel("Ticket Types", _types_summary(draft))],
    )


__all__ = [
    "FieldModel",
    "OptionModel",
    "ControlModel",
    "ViewModel",
    "render_step",
    "render_expired",
    "render_cancelled",
    "render_completed",
]
