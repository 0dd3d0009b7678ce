"""
Community Bot - Ticket System Tests
===================================

Ticket naming, permissions and the open -> claimed -> closed lifecycle.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.services.tickets import TicketService
from src.services.tickets.naming import format_ticket_name


GUILD = 987654321
PANEL_CHANNEL = 444555666
CATEGORY = 777


# =============================================================================
# Naming
# =============================================================================

class TestTicketNaming:
    """format_ticket_name()."""

    def test_placeholders(self):
        assert format_ticket_name("ticket-{type}-{user}", "support", "Alice", 3) == "ticket-support-alice"

    def test_number(self):
        assert format_ticket_name("{type}-{number}", "bug", "x", 12) == "bug-12"

    def test_invalid_characters_collapse(self):
        assert format_ticket_name("{user}!!", "support", "Mr. Cool Guy", 1) == "mr-cool-guy"

    def test_length_limit(self):
        assert len(format_ticket_name("{user}", "support", "a" * 300, 1)) <= 100

    def test_empty_result_falls_back(self):
        assert format_ticket_name("{user}", "support", "!!!", 9) == "ticket-9"

    def test_default_format(self):
        assert format_ticket_name("", "support", "bob", 1) == "ticket-support-bob"


# =============================================================================
# Service
# =============================================================================

SYSTEM = {
    "channel_id": PANEL_CHANNEL,
    "category_id": CATEGORY,
    "thread_mode": False,
    "types": [{"name": "Support", "emoji": "🆘", "description": "", "value": "support"}],
    "naming_format": "ticket-{type}-{user}",
    "max_tickets_per_user": 1,
}


@pytest.fixture
def ticket_channel():
    channel = MagicMock()
    channel.id = 9001
    channel.mention = "<#9001>"
    channel.send = AsyncMock(return_value=MagicMock(id=1))
    return channel


@pytest.fixture
def ticket_guild(mock_discord_guild, ticket_channel):
    category = MagicMock(spec=discord.CategoryChannel)
    mock_discord_guild.get_channel = MagicMock(return_value=category)
    mock_discord_guild.create_text_channel = AsyncMock(return_value=ticket_channel)
    return mock_discord_guild


@pytest.fixture
def ticket_bot(ticket_channel):
    bot = MagicMock()
    bot.get_channel = MagicMock(return_value=ticket_channel)
    return bot


@pytest.fixture
def confirmation():
    service = MagicMock()
    service.ask = AsyncMock(return_value=True)
    return service


@pytest.fixture
def service(ticket_bot, test_db, confirmation, monkeypatch):
    def run_later(coro, name):
        coro.close()

    monkeypatch.setattr("src.services.tickets.service.create_safe_task", run_later)
    return TicketService(ticket_bot, test_db, confirmation)


class TestIsStaff:

    def test_plain_member(self, service, mock_discord_member):
        assert service.is_staff(mock_discord_member) is False

    def test_admin(self, service, mock_admin_member):
        assert service.is_staff(mock_admin_member) is True

    def test_staff_role(self, service, test_db, mock_discord_member):
        test_db.update_guild_config(GUILD, ticket_staff_role=55)
        mock_discord_member.roles = [MagicMock(id=55)]
        assert service.is_staff(mock_discord_member) is True


class TestOpenTicket:

    @pytest.mark.asyncio
    async def test_not_configured(self, service, mock_discord_member):
        success, message = await service.open_ticket(mock_discord_member, "support")
        assert success is False
        assert "not configured" in message

    @pytest.mark.asyncio
    async def test_opens_channel(self, service, test_db, ticket_guild, mock_discord_member, ticket_channel):
        test_db.upsert_ticket_system(GUILD, SYSTEM)

        success, message = await service.open_ticket(mock_discord_member, "support")

        assert success is True
        assert ticket_channel.mention in message
        assert ticket_guild.create_text_channel.await_args.kwargs["name"] == "ticket-support-testuser"
        ticket = test_db.get_ticket_by_channel(ticket_channel.id)
        assert ticket["status"] == "open"
        assert ticket["user_id"] == mock_discord_member.id

    @pytest.mark.asyncio
    async def test_limit(self, service, test_db, ticket_guild, mock_discord_member):
        test_db.upsert_ticket_system(GUILD, SYSTEM)
        test_db.create_ticket(GUILD, 1, mock_discord_member.id, "support")

        success, message = await service.open_ticket(mock_discord_member, "support")

        assert success is False
        assert "1 open ticket" in message
        ticket_guild.create_text_channel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlimited(self, service, test_db, ticket_guild, mock_discord_member):
        test_db.upsert_ticket_system(GUILD, {**SYSTEM, "max_tickets_per_user": 0})
        test_db.create_ticket(GUILD, 1, mock_discord_member.id, "support")

        success, _ = await service.open_ticket(mock_discord_member, "support")

        assert success is True

    @pytest.mark.asyncio
    async def test_unknown_type(self, service, test_db, ticket_guild, mock_discord_member):
        test_db.upsert_ticket_system(GUILD, SYSTEM)
        success, message = await service.open_ticket(mock_discord_member, "billing")
        assert success is False
        assert "no longer available" in message

    @pytest.mark.asyncio
    async def test_required_role(self, service, test_db, ticket_guild, mock_discord_member):
        test_db.upsert_ticket_system(GUILD, {**SYSTEM, "required_role_id": 66})
        mock_discord_member.get_role = MagicMock(return_value=None)

        success, message = await service.open_ticket(mock_discord_member, "support")

        assert success is False
        assert "<@&66>" in message

    @pytest.mark.asyncio
    async def test_missing_category(self, service, test_db, ticket_guild, mock_discord_member):
        ticket_guild.get_channel = MagicMock(return_value=None)
        test_db.upsert_ticket_system(GUILD, SYSTEM)

        success, message = await service.open_ticket(mock_discord_member, "support")

        assert success is False
        assert "/ticket edit" in message

    @pytest.mark.asyncio
    async def test_double_click_respects_limit(
        self, service, test_db, ticket_guild, mock_discord_member, ticket_channel,
    ):
        """Two opens racing through channel creation still honour a limit of 1."""
        test_db.upsert_ticket_system(GUILD, SYSTEM)

        async def slow_create(**kwargs):
            await asyncio.sleep(0)
            return ticket_channel

        ticket_guild.create_text_channel = AsyncMock(side_effect=slow_create)

        results = await asyncio.gather(
            service.open_ticket(mock_discord_member, "support"),
            service.open_ticket(mock_discord_member, "support"),
        )

        assert sorted(success for success, _ in results) == [False, True]
        assert test_db.count_open_tickets(GUILD, mock_discord_member.id) == 1
        ticket_guild.create_text_channel.assert_awaited_once()


class TestClaimAndClose:

    @pytest.mark.asyncio
    async def test_member_cannot_claim(self, service, test_db, mock_discord_member, ticket_channel):
        test_db.create_ticket(GUILD, ticket_channel.id, 1, "support")
        success, _ = await service.claim_ticket(mock_discord_member, ticket_channel.id)
        assert success is False
        assert test_db.get_ticket_by_channel(ticket_channel.id)["status"] == "open"

    @pytest.mark.asyncio
    async def test_claim_once(self, service, test_db, mock_admin_member, ticket_channel):
        test_db.create_ticket(GUILD, ticket_channel.id, 1, "support")

        first, _ = await service.claim_ticket(mock_admin_member, ticket_channel.id)
        second, message = await service.claim_ticket(mock_admin_member, ticket_channel.id)

        assert first is True
        assert second is False
        assert "already" in message

    @pytest.mark.asyncio
    async def test_owner_closes_after_confirm(
        self, service, test_db, interaction_factory, mock_discord_member, ticket_channel, confirmation,
    ):
        test_db.create_ticket(GUILD, ticket_channel.id, mock_discord_member.id, "support")

        success, _ = await service.close_ticket(interaction_factory(), ticket_channel.id)

        assert success is True
        confirmation.ask.assert_awaited_once()
        assert test_db.get_ticket_by_channel(ticket_channel.id)["status"] == "closed"

    @pytest.mark.asyncio
    async def test_close_cancelled(self, service, test_db, interaction_factory, mock_discord_member, ticket_channel, confirmation):
        confirmation.ask = AsyncMock(return_value=False)
        test_db.create_ticket(GUILD, ticket_channel.id, mock_discord_member.id, "support")

        success, _ = await service.close_ticket(interaction_factory(), ticket_channel.id)

        assert success is False
        assert test_db.get_ticket_by_channel(ticket_channel.id)["status"] == "open"

    @pytest.mark.asyncio
    async def test_stranger_cannot_close(self, service, test_db, interaction_factory, ticket_channel, confirmation):
        test_db.create_ticket(GUILD, ticket_channel.id, 1, "support")

        success, _ = await service.close_ticket(interaction_factory(), ticket_channel.id)

        assert success is False
        confirmation.ask.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_closed_ticket_stays_closed(self, service, test_db, interaction_factory, mock_admin_member, ticket_channel):
        test_db.create_ticket(GUILD, ticket_channel.id, 1, "support")
        test_db.close_ticket(ticket_channel.id, 1)

        claimed, _ = await service.claim_ticket(mock_admin_member, ticket_channel.id)
        closed, message = await service.close_ticket(interaction_factory(user=mock_admin_member), ticket_channel.id)

        assert claimed is False
        assert closed is False
        assert "already closed" in message
