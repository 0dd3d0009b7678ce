"""
Community Bot - Database Module
===============================

SQLite persistence split into per-feature mixins.

Author: حَـــــنَّـــــا
"""

from src.core.database.manager import (
    DatabaseManager,
    get_db,
    DATA_DIR,
    DB_PATH,
)
from src.core.database.guild_config import GUILD_CONFIG_DEFAULTS
from src.core.database.schema import GUILD_CONFIG_COLUMNS
from src.core.database.tickets import TICKET_OPEN, TICKET_CLAIMED, TICKET_CLOSED
from src.core.database.models import (
    GuildConfigRecord,
    TicketTypeRecord,
    TicketSystemRecord,
    TicketRecord,
    BirthdayRecord,
    BonusRoleRecord,
    GiveawayRecord,
)

__all__ = [
    "DatabaseManager",
    "get_db",
    "DATA_DIR",
    "DB_PATH",
    "GUILD_CONFIG_COLUMNS",
    "GUILD_CONFIG_DEFAULTS",
    "TICKET_OPEN",
    "TICKET_CLAIMED",
    "TICKET_CLOSED",
    "GuildConfigRecord",
    "TicketTypeRecord",
    "TicketSystemRecord",
    "TicketRecord",
    "BirthdayRecord",
    "BonusRoleRecord",
    "GiveawayRecord",
]
