"""
Community Bot - Test Fixtures
=============================

Shared fixtures for all tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ["TESTING"] = "1"
os.environ.setdefault("DISCORD_TOKEN", "test-token")


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """Temporary database path."""
    return tmp_path / "test_community.db"


@pytest.fixture
def test_db(temp_db_path, monkeypatch):
    """Fresh DatabaseManager on a temporary file."""
    from src.core.database import manager as manager_module

    manager_module.DatabaseManager._instance = None
    monkeypatch.setattr(manager_module, "DB_PATH", temp_db_path)
    monkeypatch.setattr(manager_module, "DATA_DIR", temp_db_path.parent)

    db = manager_module.DatabaseManager()

    yield db

    db.close()
    manager_module.DatabaseManager._instance = None


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload config from the environment for every test."""
    from src.core.config import reset_config

    reset_config()
    yield
    reset_config()


# =============================================================================
# Discord Objects
# =============================================================================

@pytest.fixture
def mock_discord_guild():
    """Mock guild."""
    guild = MagicMock()
    guild.id = 987654321
    guild.name = "Test Server"
    guild.member_count = 42
    guild.me = MagicMock()
    guild.me.id = 999888777
    guild.default_role = MagicMock()
    guild.get_member = MagicMock(return_value=None)
    guild.get_role = MagicMock(return_value=None)
    guild.get_channel = MagicMock(return_value=None)
    return guild


@pytest.fixture
def mock_discord_member(mock_discord_guild):
    """Mock member without special permissions."""
    member = MagicMock()
    member.id = 123456789
    member.name = "testuser"
    member.display_name = "Test User"
    member.display_avatar.url = "https://example.com/avatar.png"
    member.mention = "<@123456789>"
    member.bot = False
    member.guild = mock_discord_guild
    member.roles = []
    member.guild_permissions = discord.Permissions.none()
    member.add_roles = AsyncMock()
    return member


@pytest.fixture
def mock_admin_member(mock_discord_guild):
    """Mock member with Manage Server."""
    member = MagicMock()
    member.id = 111222333
    member.name = "admin"
    member.mention = "<@111222333>"
    member.bot = False
    member.guild = mock_discord_guild
    member.roles = []
    member.guild_permissions = discord.Permissions(manage_guild=True, manage_channels=True)
    return member


@pytest.fixture
def mock_discord_text_channel(mock_discord_guild):
    """Mock text channel."""
    channel = MagicMock()
    channel.id = 444555666
    channel.name = "general"
    channel.guild = mock_discord_guild
    channel.mention = "<#444555666>"
    channel.send = AsyncMock(return_value=MagicMock(id=111000111))
    channel.fetch_message = AsyncMock()
    return channel


def make_interaction(
    user=None,
    guild=None,
    *,
    interaction_id: int = 1001,
    custom_id: str = "",
    interaction_type=discord.InteractionType.component,
    done: bool = False,
):
    """
    Build a mock interaction whose response tracks acknowledgement.

    ``response.is_done()`` flips to True after the first send_message,
    defer, edit_message or send_modal, the way discord.py does.
    """
    interaction = MagicMock()
    interaction.id = interaction_id
    interaction.type = interaction_type
    interaction.user = user or MagicMock(id=123456789)
    interaction.guild = guild
    interaction.guild_id = guild.id if guild is not None else None
    interaction.channel_id = 555666777
    interaction.data = {"custom_id": custom_id}
    interaction.message = MagicMock(id=222333444)

    state = {"done": done}

    def acknowledge(*args, **kwargs):
        state["done"] = True

    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(side_effect=lambda: state["done"])
    interaction.response.send_message = AsyncMock(side_effect=acknowledge)
    interaction.response.defer = AsyncMock(side_effect=acknowledge)
    interaction.response.edit_message = AsyncMock(side_effect=acknowledge)
    interaction.response.send_modal = AsyncMock(side_effect=acknowledge)
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock(return_value=MagicMock(id=333444555))
    interaction.edit_original_response = AsyncMock()
    interaction.original_response = AsyncMock(return_value=MagicMock(id=444555666))
    return interaction


@pytest.fixture
def interaction_factory(mock_discord_member, mock_discord_guild):
    """Factory for mock interactions in the test guild."""

    def factory(**kwargs):
        kwargs.setdefault("user", mock_discord_member)
        kwargs.setdefault("guild", mock_discord_guild)
        return make_interaction(**kwargs)

    return factory


@pytest.fixture
def mock_bot(mock_discord_text_channel):
    """Mock bot instance."""
    bot = MagicMock()
    bot.get_channel = MagicMock(return_value=mock_discord_text_channel)
    bot.fetch_channel = AsyncMock(return_value=mock_discord_text_channel)
    bot.get_guild = MagicMock(return_value=None)
    bot.wait_until_ready = AsyncMock()
    return bot


def unknown_interaction_error() -> discord.NotFound:
    """The 10062 error Discord returns for an expired interaction."""
    return discord.NotFound(
        MagicMock(status=404, reason="Not Found"),
        {"code": 10062, "message": "Unknown interaction"},
    )


def already_acknowledged_error() -> discord.HTTPException:
    """The 40060 error for a second acknowledgement."""
    return discord.HTTPException(
        MagicMock(status=400, reason="Bad Request"),
        {"code": 40060, "message": "Interaction has already been acknowledged."},
    )


@pytest.fixture
def unknown_interaction():
    return unknown_interaction_error()


@pytest.fixture
def already_acknowledged():
    return already_acknowledged_error()
