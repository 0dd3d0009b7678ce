"""
Ticket Setup Wizard Route Handlers
==================================

Dispatcher routes that translate wizard clicks, selects and modal
submits into TicketSetupWizard operations and show the resulting screen.

Every handler answers with exactly one initial response: either the
updated wizard message (safe_update) or a modal (safe_send_modal).

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, Awaitable, Callable, Optional

import discord

from src.core.logger import logger
from src.utils.interaction import modal_values, safe_respond, safe_send_modal, safe_update, selected_values

from .constants import (
    ADD_TYPE,
    FIELD_MAX_TICKETS,
    FIELD_NAMING_FORMAT,
    FIELD_PANEL_DESCRIPTION,
    FIELD_PANEL_TITLE,
    FIELD_REQUIRED_ROLE,
    FIELD_TYPE_DESCRIPTION,
    FIELD_TYPE_EMOJI,
    FIELD_TYPE_NAME,
    DEFAULT_NAMING_FORMAT,
    LIMITS_MODAL,
    NAMING_MODAL,
    PANEL_MODAL,
    QUICK_SETUP,
    REMOVE_TYPE,
    ROLE_MODAL,
    SELECT_CATEGORY,
    SELECT_LOG_CHANNEL,
    SELECT_PANEL_CHANNEL,
    SET_FORMAT,
    SET_LIMITS,
    SET_PANEL,
    SET_ROLE,
    TOGGLE_MODE,
    TYPE_MODAL,
    WIZARD_BACK,
    WIZARD_CANCEL,
    WIZARD_CONFIRM,
    WIZARD_JUMP,
    WIZARD_NEXT,
    WizardStep,
)
from .machine import TicketSetupWizard, WizardOutcome
from .render import render_expired
from .views import (
    build_embed,
    build_limits_modal,
    build_naming_modal,
    build_panel_modal,
    build_role_modal,
    build_type_modal,
    build_view,
)

if TYPE_CHECKING:
    from src.services.dispatcher import InteractionDispatcher
    from src.services.tickets import TicketService
    from .models import TicketDraft


def _key(interaction: discord.Interaction):
    return interaction.guild_id, interaction.user.id


async def show(interaction: discord.Interaction, outcome: WizardOutcome) -> None:
    """Replace the wizard message with the outcome's screen."""
    await safe_update(interaction, embed=build_embed(outcome.view), view=build_view(outcome.view))


class WizardRoutes:
    """
    Binds wizard custom ids to a TicketSetupWizard.

    Args:
        wizard: State machine.
        tickets: Posts the panel once a setup is confirmed.
    """

    def __init__(self, wizard: TicketSetupWizard, tickets: "TicketService") -> None:
        self.wizard = wizard
        self.tickets = tickets

    def register(self, dispatcher: "InteractionDispatcher") -> None:
        routes = {
            WIZARD_NEXT: self.on_next,
            WIZARD_BACK: self.on_back,
            WIZARD_CANCEL: self.on_cancel,
            WIZARD_CONFIRM: self.on_confirm,
            WIZARD_JUMP: self.on_jump,
            SELECT_PANEL_CHANNEL: self._channel_setter("channel_id"),
            SELECT_CATEGORY: self._channel_setter("category_id"),
            SELECT_LOG_CHANNEL: self._channel_setter("log_channel_id"),
            TOGGLE_MODE: self.on_toggle_mode,
            ADD_TYPE: self._modal_opener(lambda draft: build_type_modal()),
            QUICK_SETUP: self.on_quick_setup,
            REMOVE_TYPE: self.on_remove_type,
            SET_ROLE: self._modal_opener(build_role_modal),
            SET_FORMAT: self._modal_opener(build_naming_modal),
            SET_PANEL: self._modal_opener(build_panel_modal),
            SET_LIMITS: self._modal_opener(build_limits_modal),
            TYPE_MODAL: self.on_type_modal,
            ROLE_MODAL: self.on_role_modal,
            NAMING_MODAL: self.on_naming_modal,
            PANEL_MODAL: self.on_panel_modal,
            LIMITS_MODAL: self.on_limits_modal,
        }
        for prefix, handler in routes.items():
            dispatcher.register(prefix, handler, "Ticket Wizard")

    # =========================================================================
    # Navigation
    # =========================================================================

    async def on_next(self, interaction: discord.Interaction, _: str) -> None:
        await show(interaction, await self.wizard.next(*_key(interaction)))

    async def on_back(self, interaction: discord.Interaction, _: str) -> None:
        await show(interaction, await self.wizard.back(*_key(interaction)))

    async def on_cancel(self, interaction: discord.Interaction, _: str) -> None:
        await show(interaction, await self.wizard.cancel(*_key(interaction)))

    async def on_jump(self, interaction: discord.Interaction, step_value: str) -> None:
        try:
            step = WizardStep(step_value)
        except ValueError:
            await safe_respond(interaction, "❌ Unknown wizard step.")
            return
        await show(interaction, await self.wizard.jump(*_key(interaction), step))

    async def on_confirm(self, interaction: discord.Interaction, _: str) -> None:
        outcome = await self.wizard.confirm(*_key(interaction))
        await show(interaction, outcome)
        if not outcome.completed or interaction.guild is None:
            return

        message = await self.tickets.post_panel(interaction.guild, outcome.system)
        if message is None:
            await safe_respond(
                interaction,
                "⚠️ Your settings were saved, but the panel could not be posted. "
                "Check my permissions in the panel channel and run `/ticket panel`.",
            )
        else:
            await safe_respond(interaction, f"📋 Ticket panel posted: {message.jump_url}")

    # =========================================================================
    # Channels Step
    # =========================================================================

    def _channel_setter(self, field_name: str) -> Callable[[discord.Interaction, str], Awaitable[None]]:
        async def handler(interaction: discord.Interaction, _: str) -> None:
            values = selected_values(interaction)
            value = int(values[0]) if values else None
            await show(interaction, await self.wizard.update_field(*_key(interaction), field_name, value))

        return handler

    async def on_toggle_mode(self, interaction: discord.Interaction, _: str) -> None:
        await show(interaction, await self.wizard.toggle_thread_mode(*_key(interaction)))

    # =========================================================================
    # Ticket Types Step
    # =========================================================================

    async def on_quick_setup(self, interaction: discord.Interaction, _: str) -> None:
        await show(interaction, await self.wizard.apply_quick_setup(*_key(interaction)))

    async def on_remove_type(self, interaction: discord.Interaction, _: str) -> None:
        values = selected_values(interaction)
        if not values:
            await show(interaction, await self.wizard.refresh(*_key(interaction)))
            return
        await show(interaction, await self.wizard.remove_type(*_key(interaction), values[0]))

    async def on_type_modal(self, interaction: discord.Interaction, _: str) -> None:
        values = modal_values(interaction)
        outcome = await self.wizard.add_type(
            *_key(interaction),
            values.get(FIELD_TYPE_NAME, ""),
            values.get(FIELD_TYPE_EMOJI, ""),
            values.get(FIELD_TYPE_DESCRIPTION, ""),
        )
        await show(interaction, outcome)

    # =========================================================================
    # Advanced Step
    # =========================================================================

    def _modal_opener(
        self,
        factory: Callable[["TicketDraft"], discord.ui.Modal],
    ) -> Callable[[discord.Interaction, str], Awaitable[None]]:
        async def handler(interaction: discord.Interaction, _: str) -> None:
            session = self.wizard.get_session(*_key(interaction))
            if session is None:
                vm = render_expired()
                await safe_update(interaction, embed=build_embed(vm), view=None)
                return
            await safe_send_modal(interaction, factory(session.draft))

        return handler

    async def on_role_modal(self, interaction: discord.Interaction, _: str) -> None:
        raw = modal_values(interaction).get(FIELD_REQUIRED_ROLE, "").strip()
        role_id: Optional[int] = None
        if raw:
            digits = raw.strip("<@&>")
            if not digits.isdigit():
                await safe_respond(interaction, "❌ The role must be a role ID or mention.")
                return
            role_id = int(digits)
            if interaction.guild is not None and interaction.guild.get_role(role_id) is None:
                await safe_respond(interaction, "❌ That role does not exist in this server.")
                return
        await show(interaction, await self.wizard.update_field(*_key(interaction), "required_role_id", role_id))

    async def on_naming_modal(self, interaction: discord.Interaction, _: str) -> None:
        naming = modal_values(interaction).get(FIELD_NAMING_FORMAT, "").strip() or DEFAULT_NAMING_FORMAT
        await show(interaction, await self.wizard.update_field(*_key(interaction), "naming_format", naming))

    async def on_panel_modal(self, interaction: discord.Interaction, _: str) -> None:
        values = modal_values(interaction)
        outcome = await self.wizard.set_panel_text(
            *_key(interaction),
            values.get(FIELD_PANEL_TITLE, ""),
            values.get(FIELD_PANEL_DESCRIPTION, ""),
        )
        await show(interaction, outcome)

    async def on_limits_modal(self, interaction: discord.Interaction, _: str) -> None:
        raw = modal_values(interaction).get(FIELD_MAX_TICKETS, "")
        await show(interaction, await self.wizard.set_ticket_limit(*_key(interaction), raw))


async def open_wizard(
    interaction: discord.Interaction,
    wizard: TicketSetupWizard,
    draft: Optional["TicketDraft"] = None,
) -> None:
    """Start a session and show its first screen as an ephemeral reply."""
    outcome = await wizard.start(interaction.guild_id, interaction.user.id, draft)
    sent = await safe_respond(interaction, embed=build_embed(outcome.view), view=build_view(outcome.view))
    if sent is None:
        logger.warning("Ticket Wizard Not Shown", [
            ("Guild ID", str(interaction.guild_id)),
            ("User ID", str(interaction.user.id)),
        ])


__all__ = ["WizardRoutes", "open_wizard", "show"]
