"""
Community Bot - Birthday Tests
==============================

Date validation, scheduling math and the once-a-day announcement.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config import NY_TZ
from src.services.birthdays import BirthdayScheduler, LAST_SENT_KEY
from src.services.birthdays.helpers import (
    build_announcement_embed,
    date_key,
    format_date,
    is_valid_date,
    seconds_until,
)


GUILD = 987654321
CHANNEL = 444555666


class TestDates:
    """is_valid_date / format_date / date_key."""

    @pytest.mark.parametrize("day,month", [(1, 1), (29, 2), (30, 4), (31, 12)])
    def test_valid(self, day, month):
        assert is_valid_date(day, month) is True

    @pytest.mark.parametrize("day,month", [(30, 2), (31, 4), (0, 5), (1, 13), (1, 0)])
    def test_invalid(self, day, month):
        assert is_valid_date(day, month) is False

    def test_format(self):
        assert format_date(29, 2) == "29 February"

    def test_date_key_uses_new_york(self):
        # 03:00 UTC is still the previous evening in New York
        moment = datetime.fromisoformat("2026-10-20T03:00:00+00:00")
        assert date_key(moment) == "2026-10-19"


class TestSecondsUntil:
    """Next announcement time."""

    def test_later_today(self):
        now = datetime(2026, 10, 19, 8, 30, tzinfo=NY_TZ)
        assert seconds_until(9, now) == 30 * 60

    def test_tomorrow_when_passed(self):
        now = datetime(2026, 10, 19, 10, 0, tzinfo=NY_TZ)
        assert seconds_until(9, now) == 23 * 3600

    def test_exact_hour_rolls_over(self):
        now = datetime(2026, 10, 19, 9, 0, tzinfo=NY_TZ)
        assert seconds_until(9, now) == 24 * 3600


class TestAnnouncementEmbed:

    def test_mentions_everyone(self, mock_discord_guild):
        embed = build_announcement_embed(mock_discord_guild, [1, 2], wish="Yay")
        assert "<@1>" in embed.description
        assert "<@2>" in embed.description
        assert embed.description.endswith("Yay")


@pytest.fixture
def birthday_guild():
    channel = MagicMock()
    channel.id = CHANNEL
    channel.send = AsyncMock(return_value=MagicMock(id=1))

    guild = MagicMock()
    guild.id = GUILD
    guild.name = "Test Server"
    guild.get_channel = MagicMock(return_value=channel)
    guild.get_member = MagicMock(return_value=None)
    return guild


@pytest.fixture
def birthday_bot(birthday_guild):
    bot = MagicMock()
    bot.get_guild = MagicMock(return_value=birthday_guild)
    bot.wait_until_ready = AsyncMock()
    return bot


class TestBirthdayScheduler:
    """check_birthdays()."""

    NOW = datetime(2026, 10, 19, 9, 0, tzinfo=NY_TZ)

    @pytest.mark.asyncio
    async def test_announces_today(self, birthday_bot, birthday_guild, test_db):
        test_db.update_guild_config(GUILD, birthday_channel=CHANNEL)
        test_db.set_birthday(7, GUILD, 19, 10)
        test_db.set_birthday(8, GUILD, 20, 10)
        scheduler = BirthdayScheduler(birthday_bot, test_db)

        assert await scheduler.check_birthdays(self.NOW) == 1

        channel = birthday_guild.get_channel.return_value
        embed = channel.send.await_args.kwargs["embed"]
        assert "<@7>" in embed.description
        assert "<@8>" not in embed.description
        assert test_db.get_bot_state(LAST_SENT_KEY) == "2026-10-19"

    @pytest.mark.asyncio
    async def test_same_day_runs_once(self, birthday_bot, birthday_guild, test_db):
        test_db.update_guild_config(GUILD, birthday_channel=CHANNEL)
        test_db.set_birthday(7, GUILD, 19, 10)
        scheduler = BirthdayScheduler(birthday_bot, test_db)

        await scheduler.check_birthdays(self.NOW)
        assert await scheduler.check_birthdays(self.NOW) == 0

        assert birthday_guild.get_channel.return_value.send.await_count == 1

    @pytest.mark.asyncio
    async def test_state_survives_restart(self, birthday_bot, test_db):
        test_db.set_bot_state(LAST_SENT_KEY, "2026-10-19")
        test_db.update_guild_config(GUILD, birthday_channel=CHANNEL)
        test_db.set_birthday(7, GUILD, 19, 10)

        assert await BirthdayScheduler(birthday_bot, test_db).check_birthdays(self.NOW) == 0

    @pytest.mark.asyncio
    async def test_no_birthdays_no_post(self, birthday_bot, birthday_guild, test_db):
        test_db.update_guild_config(GUILD, birthday_channel=CHANNEL)
        assert await BirthdayScheduler(birthday_bot, test_db).check_birthdays(self.NOW) == 0
        birthday_guild.get_channel.return_value.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_channel_skipped(self, birthday_bot, birthday_guild, test_db):
        birthday_guild.get_channel = MagicMock(return_value=None)
        test_db.update_guild_config(GUILD, birthday_channel=CHANNEL)
        test_db.set_birthday(7, GUILD, 19, 10)

        assert await BirthdayScheduler(birthday_bot, test_db).check_birthdays(self.NOW) == 0
        assert test_db.get_bot_state(LAST_SENT_KEY) == "2026-10-19"
