"""
Community Bot - Route Handler Tests
===================================

Real custom ids dispatched through the registered routes: wizard
navigation, selects and modals, welcome panel, ticket and giveaway
buttons, and the background sweep.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.services.dispatcher import GENERIC_ERROR_MESSAGE, InteractionDispatcher, InteractionGuard
from src.services.giveaways.handlers import GiveawayRoutes
from src.services.sweeper import SweeperService
from src.services.tickets.handlers import TicketRoutes
from src.services.welcome.service import WelcomeService
from src.services.welcome.wizard import WelcomeWizardRoutes
from src.services.wizard import InMemorySessionStore, TicketSetupWizard, WizardRoutes, WizardStep
from src.services.wizard.constants import (
    ADD_TYPE,
    FIELD_PANEL_DESCRIPTION,
    FIELD_PANEL_TITLE,
    FIELD_TYPE_DESCRIPTION,
    FIELD_TYPE_EMOJI,
    FIELD_TYPE_NAME,
    PANEL_MODAL,
    SELECT_PANEL_CHANNEL,
    TYPE_MODAL,
    WIZARD_CONFIRM,
    WIZARD_NEXT,
)


GUILD = 987654321
USER = 123456789
PANEL_URL = "https://discord.com/channels/987654321/444555666/1"


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def modal_payload(custom_id: str, **fields: str) -> dict:
    return {
        "custom_id": custom_id,
        "components": [
            {"type": 1, "components": [{"type": 4, "custom_id": name, "value": value}]}
            for name, value in fields.items()
        ],
    }


@pytest.fixture
def dispatcher():
    return InteractionDispatcher(InteractionGuard(timeout=30))


# =============================================================================
# Ticket Setup Wizard
# =============================================================================

@pytest.fixture
def persist():
    return MagicMock(side_effect=lambda guild_id, fields: {"guild_id": guild_id, **fields})


@pytest.fixture
def wizard(persist):
    return TicketSetupWizard(InMemorySessionStore(ttl=1800), persist)


@pytest.fixture
def ticket_service():
    service = MagicMock()
    service.post_panel = AsyncMock(return_value=MagicMock(jump_url=PANEL_URL))
    return service


@pytest.fixture
def wizard_dispatcher(dispatcher, wizard, ticket_service):
    WizardRoutes(wizard, ticket_service).register(dispatcher)
    return dispatcher


async def walk_to(wizard: TicketSetupWizard, step: WizardStep) -> None:
    await wizard.start(GUILD, USER)
    if step == WizardStep.WELCOME:
        return
    await wizard.next(GUILD, USER)
    if step == WizardStep.CHANNELS:
        return
    await wizard.update_field(GUILD, USER, "channel_id", 444555666)
    await wizard.update_field(GUILD, USER, "category_id", 777)
    await wizard.next(GUILD, USER)
    if step == WizardStep.TICKET_TYPES:
        return
    await wizard.add_type(GUILD, USER, "Support", "🆘")
    await wizard.next(GUILD, USER)
    if step == WizardStep.ADVANCED:
        return
    await wizard.next(GUILD, USER)


class TestWizardRoutes:
    """Every wizard interaction gets exactly one initial response."""

    @pytest.mark.asyncio
    async def test_next_updates_message_in_place(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.WELCOME)
        interaction = interaction_factory(custom_id=WIZARD_NEXT)

        assert await wizard_dispatcher.dispatch(interaction) is True

        interaction.response.edit_message.assert_awaited_once()
        kwargs = interaction.response.edit_message.await_args.kwargs
        assert "Step 2/5" in kwargs["embed"].title
        assert isinstance(kwargs["view"], discord.ui.View)
        interaction.response.send_message.assert_not_awaited()
        interaction.followup.send.assert_not_awaited()
        assert wizard.get_session(GUILD, USER).step == WizardStep.CHANNELS

    @pytest.mark.asyncio
    async def test_rejected_edit_reaches_error_policy(
        self, wizard_dispatcher, wizard, interaction_factory, monkeypatch,
    ):
        from src.services.dispatcher import dispatcher as dispatcher_module

        log = MagicMock()
        monkeypatch.setattr(dispatcher_module, "logger", log)
        await walk_to(wizard, WizardStep.WELCOME)
        interaction = interaction_factory(custom_id=WIZARD_NEXT)
        interaction.response.edit_message.side_effect = discord.HTTPException(
            MagicMock(status=400, reason="Bad Request"),
            {"code": 50035, "message": "Invalid Form Body"},
        )

        assert await wizard_dispatcher.dispatch(interaction) is True

        log.error.assert_called_once()
        interaction.response.send_message.assert_awaited_once()
        assert interaction.response.send_message.await_args.kwargs["content"] == GENERIC_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_panel_channel_select(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.CHANNELS)
        interaction = interaction_factory(custom_id=SELECT_PANEL_CHANNEL)
        interaction.data = {"custom_id": SELECT_PANEL_CHANNEL, "values": ["444555666"]}

        await wizard_dispatcher.dispatch(interaction)

        assert wizard.get_session(GUILD, USER).draft.channel_id == 444555666
        interaction.response.edit_message.assert_awaited_once()
        embed = interaction.response.edit_message.await_args.kwargs["embed"]
        assert any(f.value == "<#444555666>" for f in embed.fields)

    @pytest.mark.asyncio
    async def test_add_type_button_opens_modal(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.TICKET_TYPES)
        interaction = interaction_factory(custom_id=ADD_TYPE)

        await wizard_dispatcher.dispatch(interaction)

        interaction.response.send_modal.assert_awaited_once()
        assert interaction.response.send_modal.await_args.args[0].custom_id == TYPE_MODAL
        interaction.response.edit_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_modal_button_without_session_shows_expired(self, wizard_dispatcher, interaction_factory):
        interaction = interaction_factory(custom_id=ADD_TYPE)

        await wizard_dispatcher.dispatch(interaction)

        interaction.response.send_modal.assert_not_awaited()
        kwargs = interaction.response.edit_message.await_args.kwargs
        assert "Expired" in kwargs["embed"].title
        assert kwargs["view"] is None

    @pytest.mark.asyncio
    async def test_type_modal_adds_type(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.TICKET_TYPES)
        interaction = interaction_factory(
            custom_id=TYPE_MODAL, interaction_type=discord.InteractionType.modal_submit,
        )
        interaction.data = modal_payload(
            TYPE_MODAL,
            **{FIELD_TYPE_NAME: "Billing", FIELD_TYPE_EMOJI: "💳", FIELD_TYPE_DESCRIPTION: "Payments"},
        )

        await wizard_dispatcher.dispatch(interaction)

        types = wizard.get_session(GUILD, USER).draft.types
        assert [(t.value, t.emoji) for t in types] == [("billing", "💳")]
        interaction.response.edit_message.assert_awaited_once()
        assert isinstance(interaction.response.edit_message.await_args.kwargs["view"], discord.ui.View)

    @pytest.mark.asyncio
    async def test_type_modal_bad_emoji_shows_notice(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.TICKET_TYPES)
        interaction = interaction_factory(
            custom_id=TYPE_MODAL, interaction_type=discord.InteractionType.modal_submit,
        )
        interaction.data = modal_payload(TYPE_MODAL, **{FIELD_TYPE_NAME: "Billing", FIELD_TYPE_EMOJI: "money"})

        await wizard_dispatcher.dispatch(interaction)

        assert wizard.get_session(GUILD, USER).draft.types == []
        embed = interaction.response.edit_message.await_args.kwargs["embed"]
        assert "not an emoji" in embed.description

    @pytest.mark.asyncio
    async def test_panel_modal_sets_title_and_description(self, wizard_dispatcher, wizard, interaction_factory):
        await walk_to(wizard, WizardStep.ADVANCED)
        interaction = interaction_factory(
            custom_id=PANEL_MODAL, interaction_type=discord.InteractionType.modal_submit,
        )
        interaction.data = modal_payload(
            PANEL_MODAL, **{FIELD_PANEL_TITLE: "Help Desk", FIELD_PANEL_DESCRIPTION: "Pick a topic"},
        )

        await wizard_dispatcher.dispatch(interaction)

        draft = wizard.get_session(GUILD, USER).draft
        assert (draft.panel_title, draft.panel_description) == ("Help Desk", "Pick a topic")
        interaction.response.edit_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_confirm_saves_then_follows_up_with_panel(
        self, wizard_dispatcher, wizard, persist, ticket_service, interaction_factory, mock_discord_guild,
    ):
        await walk_to(wizard, WizardStep.REVIEW)
        interaction = interaction_factory(custom_id=WIZARD_CONFIRM)

        await wizard_dispatcher.dispatch(interaction)

        persist.assert_called_once()
        kwargs = interaction.response.edit_message.await_args.kwargs
        assert "Saved" in kwargs["embed"].title
        assert kwargs["view"] is None
        ticket_service.post_panel.assert_awaited_once()
        assert ticket_service.post_panel.await_args.args[0] is mock_discord_guild
        interaction.response.send_message.assert_not_awaited()
        assert PANEL_URL in interaction.followup.send.await_args.kwargs["content"]
        assert wizard.get_session(GUILD, USER) is None

    @pytest.mark.asyncio
    async def test_confirm_panel_failure_warns(self, wizard_dispatcher, wizard, ticket_service, interaction_factory):
        ticket_service.post_panel = AsyncMock(return_value=None)
        await walk_to(wizard, WizardStep.REVIEW)
        interaction = interaction_factory(custom_id=WIZARD_CONFIRM)

        await wizard_dispatcher.dispatch(interaction)

        assert "/ticket panel" in interaction.followup.send.await_args.kwargs["content"]

    @pytest.mark.asyncio
    async def test_confirm_outside_review_keeps_session(
        self, wizard_dispatcher, wizard, persist, ticket_service, interaction_factory,
    ):
        await walk_to(wizard, WizardStep.ADVANCED)
        interaction = interaction_factory(custom_id=WIZARD_CONFIRM)

        await wizard_dispatcher.dispatch(interaction)

        persist.assert_not_called()
        ticket_service.post_panel.assert_not_awaited()
        assert wizard.get_session(GUILD, USER) is not None


# =============================================================================
# Welcome Wizard
# =============================================================================

@pytest.fixture
def welcome_dispatcher(dispatcher, test_db):
    WelcomeWizardRoutes(test_db, WelcomeService(test_db)).register(dispatcher)
    return dispatcher


class TestWelcomeWizardRoutes:
    """Settings panel redraws in place."""

    @pytest.mark.asyncio
    async def test_non_admin_refused(self, welcome_dispatcher, test_db, interaction_factory):
        interaction = interaction_factory(custom_id="welcome_wizard_toggle_embed")

        await welcome_dispatcher.dispatch(interaction)

        assert "Manage Server" in interaction.response.send_message.await_args.kwargs["content"]
        interaction.response.edit_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_toggle_embed(self, welcome_dispatcher, test_db, interaction_factory, mock_admin_member):
        before = test_db.get_guild_config(GUILD)["welcome_embed_enabled"]
        interaction = interaction_factory(custom_id="welcome_wizard_toggle_embed", user=mock_admin_member)

        await welcome_dispatcher.dispatch(interaction)

        assert bool(test_db.get_guild_config(GUILD)["welcome_embed_enabled"]) is not bool(before)
        interaction.response.edit_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_color_keeps_value(self, welcome_dispatcher, test_db, interaction_factory, mock_admin_member):
        interaction = interaction_factory(
            custom_id="welcome_wizard_modal_color",
            user=mock_admin_member,
            interaction_type=discord.InteractionType.modal_submit,
        )
        interaction.data = modal_payload("welcome_wizard_modal_color", val="purple")
        before = test_db.get_guild_config(GUILD)["welcome_color"]

        await welcome_dispatcher.dispatch(interaction)

        assert test_db.get_guild_config(GUILD)["welcome_color"] == before
        assert "hex color" in interaction.response.edit_message.await_args.kwargs["embed"].description

    @pytest.mark.asyncio
    async def test_preview_without_channel(self, welcome_dispatcher, interaction_factory, mock_admin_member):
        interaction = interaction_factory(custom_id="welcome_wizard_preview", user=mock_admin_member)

        await welcome_dispatcher.dispatch(interaction)

        assert "welcome channel" in interaction.response.edit_message.await_args.kwargs["embed"].description

    @pytest.mark.asyncio
    async def test_preview_without_member_profile_still_answers(
        self, welcome_dispatcher, test_db, interaction_factory, mock_admin_member,
    ):
        test_db.update_guild_config(GUILD, welcome_channel=444555666)
        interaction = interaction_factory(custom_id="welcome_wizard_preview", user=mock_admin_member)

        await welcome_dispatcher.dispatch(interaction)

        interaction.response.edit_message.assert_awaited_once()
        assert "server profile" in interaction.response.edit_message.await_args.kwargs["embed"].description


# =============================================================================
# Ticket and Giveaway Buttons
# =============================================================================

def guild_member(member) -> MagicMock:
    """Same identity as ``member`` but passes isinstance(discord.Member)."""
    real = MagicMock(spec=discord.Member)
    real.id = member.id
    real.guild = member.guild
    real.mention = member.mention
    return real


class TestTicketRoutes:
    """Panel, Claim and Close buttons."""

    @pytest.fixture
    def service(self):
        service = MagicMock()
        service.open_ticket = AsyncMock(return_value=(True, "Your ticket has been created: <#9001>"))
        service.claim_ticket = AsyncMock(return_value=(False, "This ticket is already claimed."))
        return service

    @pytest.fixture
    def ticket_dispatcher(self, dispatcher, service):
        TicketRoutes(service).register(dispatcher)
        return dispatcher

    @pytest.mark.asyncio
    async def test_panel_button_defers_then_follows_up(
        self, ticket_dispatcher, service, interaction_factory, mock_discord_member,
    ):
        member = guild_member(mock_discord_member)
        interaction = interaction_factory(custom_id="ticket_button_support", user=member)

        await ticket_dispatcher.dispatch(interaction)

        interaction.response.defer.assert_awaited_once_with(ephemeral=True, thinking=True)
        service.open_ticket.assert_awaited_once_with(member, "support")
        embed = interaction.followup.send.await_args.kwargs["embed"]
        assert embed.description.startswith("✅")
        interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_panel_button_outside_guild(self, ticket_dispatcher, service, interaction_factory):
        interaction = interaction_factory(custom_id="ticket_button_support", guild=None)

        await ticket_dispatcher.dispatch(interaction)

        service.open_ticket.assert_not_awaited()
        assert "server" in interaction.response.send_message.await_args.kwargs["content"]

    @pytest.mark.asyncio
    async def test_claim_with_bad_channel_id(self, ticket_dispatcher, service, interaction_factory):
        interaction = interaction_factory(custom_id="ticket_claim_abc")

        await ticket_dispatcher.dispatch(interaction)

        service.claim_ticket.assert_not_awaited()
        assert "invalid" in interaction.response.send_message.await_args.kwargs["content"]

    @pytest.mark.asyncio
    async def test_claim_result_reported(self, ticket_dispatcher, service, interaction_factory, mock_admin_member):
        member = guild_member(mock_admin_member)
        interaction = interaction_factory(custom_id="ticket_claim_9001", user=member)

        await ticket_dispatcher.dispatch(interaction)

        service.claim_ticket.assert_awaited_once_with(member, 9001)
        embed = interaction.response.send_message.await_args.kwargs["embed"]
        assert embed.description.startswith("❌")


class TestGiveawayRoutes:
    """Join and Participants buttons."""

    @pytest.fixture
    def service(self):
        service = MagicMock()
        service.join = AsyncMock(return_value=(True, "You joined the giveaway."))
        return service

    @pytest.fixture
    def giveaway_dispatcher(self, dispatcher, test_db, service):
        GiveawayRoutes(test_db, service).register(dispatcher)
        return dispatcher

    @pytest.mark.asyncio
    async def test_join(self, giveaway_dispatcher, service, interaction_factory, mock_discord_member):
        member = guild_member(mock_discord_member)
        interaction = interaction_factory(custom_id="giveaway_join", user=member)

        await giveaway_dispatcher.dispatch(interaction)

        service.join.assert_awaited_once_with(member, interaction.message)
        assert interaction.response.send_message.await_args.kwargs["embed"].description.startswith("🎉")

    @pytest.mark.asyncio
    async def test_join_requires_member(self, giveaway_dispatcher, service, interaction_factory):
        interaction = interaction_factory(custom_id="giveaway_join")

        await giveaway_dispatcher.dispatch(interaction)

        service.join.assert_not_awaited()
        interaction.response.send_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_participants_of_unknown_giveaway(self, giveaway_dispatcher, interaction_factory):
        interaction = interaction_factory(custom_id="giveaway_participants")

        await giveaway_dispatcher.dispatch(interaction)

        assert "no longer exists" in interaction.response.send_message.await_args.kwargs["content"]


# =============================================================================
# Sweeper
# =============================================================================

class TestSweeperService:
    """One sweep pass over sessions and guard entries."""

    def test_sweep_drops_stale_state(self):
        clock = FakeClock()
        store = InMemorySessionStore(ttl=60, clock=clock)
        guard = InteractionGuard(timeout=30, clock=clock)
        store.set((GUILD, 1), "old")
        guard.should_process(1)
        clock.now = 50
        store.set((GUILD, 2), "fresh")
        guard.should_process(2)
        clock.now = 70

        assert SweeperService(store, guard).sweep() == (1, 1)
        assert store.get((GUILD, 2)) == "fresh"
        assert 2 in guard
        assert 1 not in guard

    def test_sweep_with_nothing_stale(self):
        store = InMemorySessionStore(ttl=60)
        guard = InteractionGuard(timeout=30)
        store.set((GUILD, 1), "s")
        guard.should_process(1)

        assert SweeperService(store, guard).sweep() == (0, 0)
        assert len(store) == 1
        assert len(guard) == 1
