"""
Community Bot - Database Tests
==============================

Guild config, ticket systems, tickets, birthdays, giveaways and state.
"""

import sqlite3
import time

import pytest

from src.core.database import GUILD_CONFIG_COLUMNS, GUILD_CONFIG_DEFAULTS


GUILD = 987654321


class TestGuildConfig:
    """Lazy insert-or-ignore rows with defaults."""

    def test_first_read_creates_row_with_defaults(self, test_db):
        config = test_db.get_guild_config(GUILD)
        assert config["guild_id"] == GUILD
        for key, default in GUILD_CONFIG_DEFAULTS.items():
            assert config[key] == default
        assert config["welcome_channel"] is None

    def test_ensure_is_idempotent(self, test_db):
        test_db.ensure_guild_config(GUILD)
        test_db.update_guild_config(GUILD, welcome_channel=5)
        test_db.ensure_guild_config(GUILD)
        assert test_db.get_guild_config(GUILD)["welcome_channel"] == 5

    def test_update_without_existing_row(self, test_db):
        test_db.update_guild_config(GUILD, birthday_channel=77)
        assert test_db.get_guild_config(GUILD)["birthday_channel"] == 77

    def test_update_rejects_unknown_column(self, test_db):
        with pytest.raises(ValueError):
            test_db.update_guild_config(GUILD, economy_balance=5)

    def test_stored_value_overrides_default(self, test_db):
        test_db.update_guild_config(GUILD, welcome_title="Hi!")
        assert test_db.get_guild_config(GUILD)["welcome_title"] == "Hi!"

    def test_guilds_with_setting(self, test_db):
        test_db.update_guild_config(1, birthday_channel=10)
        test_db.update_guild_config(2, welcome_channel=20)
        assert test_db.get_guilds_with_setting("birthday_channel") == [(1, 10)]

    def test_guilds_with_unknown_setting(self, test_db):
        with pytest.raises(ValueError):
            test_db.get_guilds_with_setting("nope")


class TestMigrations:
    """Columns added to databases created by older versions."""

    def test_missing_columns_added(self, temp_db_path, monkeypatch):
        conn = sqlite3.connect(str(temp_db_path))
        conn.execute("CREATE TABLE guild_config (guild_id INTEGER PRIMARY KEY, created_at REAL, updated_at REAL, welcome_channel INTEGER)")
        conn.execute("INSERT INTO guild_config (guild_id, welcome_channel) VALUES (1, 99)")
        conn.commit()
        conn.close()

        from src.core.database import manager as manager_module
        manager_module.DatabaseManager._instance = None
        monkeypatch.setattr(manager_module, "DB_PATH", temp_db_path)
        db = manager_module.DatabaseManager()
        try:
            columns = {row["name"] for row in db.fetchall("PRAGMA table_info(guild_config)")}
            assert set(GUILD_CONFIG_COLUMNS) <= columns
            config = db.get_guild_config(1)
            assert config["welcome_channel"] == 99
            assert config["welcome_embed_enabled"] == 1
        finally:
            db.close()
            manager_module.DatabaseManager._instance = None

    def test_reinit_is_safe(self, test_db):
        test_db.update_guild_config(GUILD, welcome_channel=5)
        test_db._init_tables()
        assert test_db.get_guild_config(GUILD)["welcome_channel"] == 5


class TestTicketSystems:
    """One upsert per confirm."""

    FIELDS = {
        "channel_id": 10,
        "category_id": 20,
        "thread_mode": False,
        "types": [{"name": "Support", "emoji": "🆘", "description": "", "value": "support"}],
        "naming_format": "ticket-{user}",
        "max_tickets_per_user": 2,
    }

    def test_insert(self, test_db):
        system = test_db.upsert_ticket_system(GUILD, self.FIELDS)
        assert system["channel_id"] == 10
        assert system["types"][0]["value"] == "support"
        assert system["thread_mode"] is False

    def test_update_keeps_single_row(self, test_db):
        first = test_db.upsert_ticket_system(GUILD, self.FIELDS)
        second = test_db.upsert_ticket_system(GUILD, {**self.FIELDS, "channel_id": 11, "thread_mode": True})
        assert second["id"] == first["id"]
        assert second["channel_id"] == 11
        assert second["thread_mode"] is True
        assert len(test_db.fetchall("SELECT * FROM ticket_systems")) == 1

    def test_panel_message(self, test_db):
        test_db.upsert_ticket_system(GUILD, self.FIELDS)
        test_db.set_panel_message(GUILD, 555)
        assert test_db.get_ticket_system(GUILD)["panel_message_id"] == 555

    def test_missing_system(self, test_db):
        assert test_db.get_ticket_system(GUILD) is None


class TestTickets:
    """Monotonic status open -> claimed -> closed."""

    def test_create_is_open(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        assert test_db.get_ticket_by_channel(100)["status"] == "open"

    def test_claim_then_close(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        assert test_db.claim_ticket(100, 2) is True
        assert test_db.get_ticket_by_channel(100)["claimed_by"] == 2
        assert test_db.close_ticket(100, 2) is True
        assert test_db.get_ticket_by_channel(100)["status"] == "closed"

    def test_claim_twice_fails(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        assert test_db.claim_ticket(100, 2) is True
        assert test_db.claim_ticket(100, 3) is False
        assert test_db.get_ticket_by_channel(100)["claimed_by"] == 2

    def test_no_claim_after_close(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        test_db.close_ticket(100, 1)
        assert test_db.claim_ticket(100, 2) is False
        assert test_db.get_ticket_by_channel(100)["status"] == "closed"

    def test_double_close_fails(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        assert test_db.close_ticket(100, 1) is True
        assert test_db.close_ticket(100, 1) is False

    def test_open_counts(self, test_db):
        test_db.create_ticket(GUILD, 100, 1, "support")
        test_db.create_ticket(GUILD, 101, 1, "support")
        test_db.create_ticket(GUILD, 102, 2, "support")
        test_db.claim_ticket(101, 9)
        test_db.close_ticket(102, 9)
        assert test_db.count_open_tickets(GUILD, 1) == 2
        assert test_db.count_open_tickets(GUILD, 2) == 0
        assert len(test_db.get_open_tickets(GUILD)) == 2
        assert test_db.next_ticket_number(GUILD) == 4


class TestBirthdays:
    """Birthday storage."""

    def test_set_and_replace(self, test_db):
        test_db.set_birthday(1, GUILD, 5, 6)
        test_db.set_birthday(1, GUILD, 7, 8)
        record = test_db.get_birthday(1, GUILD)
        assert (record["day"], record["month"]) == (7, 8)

    def test_remove(self, test_db):
        test_db.set_birthday(1, GUILD, 5, 6)
        assert test_db.remove_birthday(1, GUILD) is True
        assert test_db.remove_birthday(1, GUILD) is False

    def test_calendar_order(self, test_db):
        test_db.set_birthday(1, GUILD, 20, 12)
        test_db.set_birthday(2, GUILD, 1, 1)
        test_db.set_birthday(3, GUILD, 15, 6)
        assert [b["user_id"] for b in test_db.get_guild_birthdays(GUILD)] == [2, 3, 1]

    def test_birthdays_on(self, test_db):
        test_db.set_birthday(1, GUILD, 29, 2)
        test_db.set_birthday(2, GUILD, 1, 3)
        test_db.set_birthday(3, 1, 29, 2)
        assert [b["user_id"] for b in test_db.get_birthdays_on(GUILD, 29, 2)] == [1]


class TestGiveaways:
    """Giveaway storage."""

    def _create(self, db, end_time=None, **kwargs):
        return db.create_giveaway(
            guild_id=GUILD,
            channel_id=10,
            title="Nitro",
            end_time=end_time if end_time is not None else time.time() + 60,
            winners=1,
            created_by=1,
            **kwargs,
        )

    def test_create_and_lookup_by_message(self, test_db):
        giveaway_id = self._create(test_db, bonus_roles=[{"role_id": 5, "entries": 2}])
        test_db.set_giveaway_message(giveaway_id, 999)
        giveaway = test_db.get_giveaway_by_message(999)
        assert giveaway["id"] == giveaway_id
        assert giveaway["participants"] == {}
        assert giveaway["bonus_roles"] == [{"role_id": 5, "entries": 2}]
        assert giveaway["ended"] is False

    def test_join_once(self, test_db):
        giveaway_id = self._create(test_db)
        assert test_db.add_giveaway_participant(giveaway_id, 7, 3) == {7: 3}
        assert test_db.add_giveaway_participant(giveaway_id, 7, 3) is None
        assert test_db.get_giveaway(giveaway_id)["participants"] == {7: 3}

    def test_join_after_end_rejected(self, test_db):
        giveaway_id = self._create(test_db)
        test_db.mark_giveaway_ended(giveaway_id, [])
        assert test_db.add_giveaway_participant(giveaway_id, 7, 1) is None

    def test_end_only_once(self, test_db):
        giveaway_id = self._create(test_db)
        assert test_db.mark_giveaway_ended(giveaway_id, [7]) is True
        assert test_db.mark_giveaway_ended(giveaway_id, [8]) is False
        assert test_db.get_giveaway(giveaway_id)["winner_ids"] == [7]

    def test_reroll_replaces_winners(self, test_db):
        giveaway_id = self._create(test_db)
        test_db.mark_giveaway_ended(giveaway_id, [7])
        test_db.set_giveaway_winners(giveaway_id, [8])
        assert test_db.get_giveaway(giveaway_id)["winner_ids"] == [8]

    def test_expired_limited_and_ordered(self, test_db):
        now = time.time()
        late = self._create(test_db, end_time=now - 10)
        early = self._create(test_db, end_time=now - 100)
        self._create(test_db, end_time=now - 50)
        self._create(test_db, end_time=now + 100)

        expired = test_db.get_expired_giveaways(now, 2)

        assert [g["id"] for g in expired][0] == early
        assert len(expired) == 2
        assert late not in [g["id"] for g in expired]

    def test_active_excludes_ended(self, test_db):
        running = self._create(test_db)
        ended = self._create(test_db)
        test_db.mark_giveaway_ended(ended, [])
        assert [g["id"] for g in test_db.get_active_giveaways(GUILD)] == [running]

    def test_purge_only_old_ended(self, test_db):
        now = time.time()
        old = self._create(test_db, end_time=now - 40 * 86400)
        recent = self._create(test_db, end_time=now - 86400)
        unfinished_old = self._create(test_db, end_time=now - 40 * 86400)
        test_db.mark_giveaway_ended(old, [])
        test_db.mark_giveaway_ended(recent, [])

        assert test_db.purge_old_giveaways(now - 30 * 86400) == 1
        assert test_db.get_giveaway(old) is None
        assert test_db.get_giveaway(recent) is not None
        assert test_db.get_giveaway(unfinished_old) is not None


class TestBotState:
    """Key/value state."""

    def test_default(self, test_db):
        assert test_db.get_bot_state("missing", "x") == "x"

    def test_round_trip_json(self, test_db):
        test_db.set_bot_state("birthday_last_sent_date", "2026-10-19")
        assert test_db.get_bot_state("birthday_last_sent_date") == "2026-10-19"
