"""
Community Bot - Bounded Confirmation Tests
==========================================
"""

import asyncio
from unittest.mock import MagicMock

import discord
import pytest

from src.services.confirmation import CONFIRM_PREFIX, ConfirmationService


async def _wait_for_prompt(service: ConfirmationService) -> str:
    for _ in range(50):
        if service._pending:
            return next(iter(service._pending))
        await asyncio.sleep(0)
    raise AssertionError("prompt was never registered")


class TestConfirmationService:
    """ask() / handle_click()."""

    @pytest.mark.asyncio
    async def test_confirm_returns_true(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        prompt = interaction_factory(interaction_id=1)
        task = asyncio.create_task(service.ask(prompt, "Close ticket?"))
        nonce = await _wait_for_prompt(service)

        click = interaction_factory(interaction_id=2, custom_id=f"{CONFIRM_PREFIX}yes:{nonce}")
        await service.handle_click(click, f"yes:{nonce}")

        assert await task is True
        assert service.pending_count == 0
        click.response.edit_message.assert_awaited_once()
        assert click.response.edit_message.call_args.kwargs["view"] is None

    @pytest.mark.asyncio
    async def test_cancel_returns_false(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        task = asyncio.create_task(service.ask(interaction_factory(interaction_id=1), "Close?"))
        nonce = await _wait_for_prompt(service)

        await service.handle_click(interaction_factory(interaction_id=2), f"no:{nonce}")

        assert await task is False

    @pytest.mark.asyncio
    async def test_timeout_returns_false_and_removes_buttons(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        prompt = interaction_factory(interaction_id=1)

        assert await service.ask(prompt, "Close?", timeout=0.01) is False

        prompt.edit_original_response.assert_awaited_once()
        assert prompt.edit_original_response.call_args.kwargs["view"] is None
        assert service.pending_count == 0

    @pytest.mark.asyncio
    async def test_prompt_is_buttoned(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        prompt = interaction_factory(interaction_id=1)
        task = asyncio.create_task(service.ask(prompt, "Close?"))
        nonce = await _wait_for_prompt(service)

        view = prompt.response.send_message.call_args.kwargs["view"]
        ids = sorted(item.custom_id for item in view.children)
        assert ids == [f"confirm:no:{nonce}", f"confirm:yes:{nonce}"]

        await service.handle_click(interaction_factory(interaction_id=2), f"no:{nonce}")
        await task

    @pytest.mark.asyncio
    async def test_other_user_cannot_answer(self, interaction_factory, mock_admin_member):
        service = ConfirmationService(timeout=5)
        task = asyncio.create_task(service.ask(interaction_factory(interaction_id=1), "Close?"))
        nonce = await _wait_for_prompt(service)

        stranger = interaction_factory(interaction_id=2, user=mock_admin_member)
        await service.handle_click(stranger, f"yes:{nonce}")

        assert not task.done()
        stranger.response.send_message.assert_awaited_once()

        await service.handle_click(interaction_factory(interaction_id=3), f"no:{nonce}")
        assert await task is False

    @pytest.mark.asyncio
    async def test_unknown_nonce_reports_expired(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        click = interaction_factory()
        await service.handle_click(click, "yes:deadbeef")
        assert click.response.edit_message.call_args.kwargs["content"] == "This confirmation has expired."

    @pytest.mark.asyncio
    async def test_prompt_not_delivered_returns_false(self, interaction_factory, unknown_interaction):
        service = ConfirmationService(timeout=5)
        prompt = interaction_factory()
        prompt.response.send_message.side_effect = unknown_interaction

        assert await service.ask(prompt, "Close?") is False
        assert service.pending_count == 0

    @pytest.mark.asyncio
    async def test_answer_kept_when_click_update_fails(self, interaction_factory):
        service = ConfirmationService(timeout=5)
        task = asyncio.create_task(service.ask(interaction_factory(interaction_id=1), "Close?"))
        nonce = await _wait_for_prompt(service)

        click = interaction_factory(interaction_id=2)
        click.response.edit_message.side_effect = discord.HTTPException(
            MagicMock(status=400, reason="Bad Request"),
            {"code": 50035, "message": "Invalid Form Body"},
        )
        with pytest.raises(discord.HTTPException):
            await service.handle_click(click, f"yes:{nonce}")

        assert await task is True
