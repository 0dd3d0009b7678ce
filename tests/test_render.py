"""
Community Bot - Wizard Rendering Tests
======================================

render_step is pure: same input, same ViewModel, draft untouched.
"""

import discord
import pytest

from src.services.wizard import STEP_ORDER, TicketDraft, TicketType, WizardStep, render_step
from src.services.wizard.constants import (
    REMOVE_TYPE,
    SELECT_CATEGORY,
    WIZARD_BACK,
    WIZARD_CONFIRM,
    WIZARD_JUMP,
    WIZARD_NEXT,
)
from src.services.wizard.render import render_completed, render_expired
from src.services.wizard.views import build_embed, build_panel_modal, build_view


def _draft() -> TicketDraft:
    return TicketDraft(channel_id=10, category_id=20, types=[TicketType(name="Support", emoji="🆘")])


class TestRenderStep:
    """Per-step rendering."""

    @pytest.mark.parametrize("step", STEP_ORDER)
    def test_render_is_deterministic(self, step):
        draft = _draft()
        assert render_step(step, draft) == render_step(step, draft)

    @pytest.mark.parametrize("step", STEP_ORDER)
    def test_render_does_not_modify_draft(self, step):
        draft = _draft()
        snapshot = TicketDraft(**vars(draft))
        render_step(step, draft, "notice")
        assert draft == snapshot

    @pytest.mark.parametrize("step", STEP_ORDER)
    def test_title_shows_position(self, step):
        vm = render_step(step, _draft())
        assert f"Step {STEP_ORDER.index(step) + 1}/{len(STEP_ORDER)}" in vm.title

    def test_welcome_back_disabled(self):
        vm = render_step(WizardStep.WELCOME, TicketDraft())
        assert vm.control(WIZARD_BACK).disabled
        assert vm.control(WIZARD_NEXT).label == "Start"

    def test_review_has_confirm_not_next(self):
        vm = render_step(WizardStep.REVIEW, _draft())
        assert vm.control(WIZARD_CONFIRM) is not None
        assert vm.control(WIZARD_NEXT) is None
        assert vm.control(f"{WIZARD_JUMP}{WizardStep.CHANNELS.value}") is not None

    def test_channels_hides_category_in_thread_mode(self):
        draft = TicketDraft(thread_mode=True)
        assert render_step(WizardStep.CHANNELS, draft).control(SELECT_CATEGORY) is None
        draft.thread_mode = False
        assert render_step(WizardStep.CHANNELS, draft).control(SELECT_CATEGORY) is not None

    def test_remove_select_lists_types(self):
        vm = render_step(WizardStep.TICKET_TYPES, _draft())
        select = vm.control(REMOVE_TYPE)
        assert [o.value for o in select.options] == ["support"]

    def test_no_remove_select_without_types(self):
        vm = render_step(WizardStep.TICKET_TYPES, TicketDraft())
        assert vm.control(REMOVE_TYPE) is None

    def test_notice_is_carried(self):
        vm = render_step(WizardStep.CHANNELS, TicketDraft(), "Pick a channel")
        assert vm.notice == "Pick a channel"

    def test_editing_footer(self):
        draft = _draft()
        draft.is_editing = True
        assert render_step(WizardStep.REVIEW, draft).footer

    def test_review_summarizes_draft(self):
        vm = render_step(WizardStep.REVIEW, _draft())
        values = {f.name: f.value for f in vm.fields}
        assert values["Panel Channel"] == "<#10>"
        assert "Support" in values["Ticket Types"]
        assert values["Required Role"] == "Everyone"


class TestTerminalScreens:
    """Expired and completed screens."""

    def test_expired_has_no_controls(self):
        assert render_expired().controls == []

    def test_completed_mentions_channel(self):
        assert "<#10>" in render_completed(_draft()).description


class TestViewBuilders:
    """ViewModel -> discord.Embed / discord.ui.View."""

    def test_embed_carries_fields_and_footer(self):
        draft = _draft()
        draft.is_editing = True
        embed = build_embed(render_step(WizardStep.REVIEW, draft))
        assert "Step 5/5" in embed.title
        assert embed.footer.text == "Editing existing ticket system"
        assert any(f.name == "Ticket Types" for f in embed.fields)

    def test_embed_notice_shown_first(self):
        embed = build_embed(render_step(WizardStep.CHANNELS, TicketDraft(), "Select a panel channel"))
        assert embed.description.startswith("⚠️ Select a panel channel")

    @pytest.mark.asyncio
    async def test_terminal_screen_has_no_view(self):
        assert build_view(render_expired()) is None

    @pytest.mark.asyncio
    async def test_types_step_builds_remove_select(self):
        view = build_view(render_step(WizardStep.TICKET_TYPES, _draft()))
        select = next(item for item in view.children if getattr(item, "custom_id", None) == REMOVE_TYPE)
        assert isinstance(select, discord.ui.Select)
        assert select.options[0].value == "support"
        assert str(select.options[0].emoji) == "🆘"

    @pytest.mark.asyncio
    async def test_channels_step_builds_category_select(self):
        view = build_view(render_step(WizardStep.CHANNELS, TicketDraft()))
        category = next(item for item in view.children if getattr(item, "custom_id", None) == SELECT_CATEGORY)
        assert isinstance(category, discord.ui.ChannelSelect)
        assert category.channel_types == [discord.ChannelType.category]

    @pytest.mark.asyncio
    async def test_review_buttons(self):
        view = build_view(render_step(WizardStep.REVIEW, _draft()))
        ids = [item.custom_id for item in view.children]
        assert WIZARD_CONFIRM in ids
        assert f"{WIZARD_JUMP}channels" in ids

    @pytest.mark.asyncio
    async def test_panel_modal_prefilled(self):
        draft = TicketDraft(panel_title="Help Desk")
        modal = build_panel_modal(draft)
        assert modal.children[0].default == "Help Desk"
