"""
Community Bot - Configuration Module
====================================

Environment-driven configuration with validation.

DESIGN:
    All settings are read once from the environment (python-dotenv loads
    .env in main.py) into a dataclass. Required values fail fast with
    ConfigValidationError; optional numeric values are range-checked and
    fall back to their defaults with a warning.

Author: حَـــــنَّـــــا
"""

import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

import discord


# =============================================================================
# Timezone
# =============================================================================

NY_TZ = ZoneInfo("America/New_York")
"""
Timezone for log timestamps and daily schedules.

America/New_York instead of a fixed offset so EST/EDT switch automatically.
"""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Bot authentication token.
        developer_id: User allowed to run owner-only actions.
        dev_guild_id: When set, commands sync to this guild only.
        error_webhook_url: Webhook receiving error alerts.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Identity
    # -------------------------------------------------------------------------

    developer_id: Optional[int] = None
    dev_guild_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    # -------------------------------------------------------------------------
    # Optional: Wizard & Interaction Timing
    # -------------------------------------------------------------------------

    wizard_session_ttl_minutes: int = 30    # Idle wizard sessions are swept after this
    interaction_guard_timeout: int = 30     # Seconds a guard entry may live
    confirmation_timeout: int = 30          # Seconds to wait for Confirm/Cancel

    # -------------------------------------------------------------------------
    # Optional: Schedulers
    # -------------------------------------------------------------------------

    birthday_announce_hour: int = 9         # Local hour (NY_TZ) for birthday posts
    giveaway_check_interval: int = 60       # Seconds between giveaway expiry checks


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Shared embed palette."""

    GREEN = 0x1F5E2E
    GOLD = 0xE6B84A
    RED = 0xDC3545
    BLUE = 0x3498DB
    BLURPLE = 0x5865F2
    PINK = 0xFF69B4
    GRAY = 0x95A5A6

    SUCCESS = GREEN
    ERROR = RED
    WARNING = GOLD
    INFO = BLURPLE

    WIZARD = BLURPLE
    TICKET = BLUE
    WELCOME = GREEN
    BIRTHDAY = PINK
    GIVEAWAY = GOLD
    ENDED = GRAY


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""


def _parse_int_optional(value: Optional[str], name: str) -> Optional[int]:
    """Parse an optional snowflake; warn and return None when malformed."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' is not an integer, ignoring")
        return None


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse an optional integer, clamping to [min_val, max_val].

    Returns:
        The parsed value, a clamped bound, or ``default`` when unset/invalid.
    """
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default

    if min_val is not None and parsed < min_val:
        from src.core.logger import logger
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        from src.core.logger import logger
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL when it looks like http(s), otherwise None."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Loading
# =============================================================================

def load_config() -> Config:
    """
    Build a Config from the current environment.

    Raises:
        ConfigValidationError: If DISCORD_TOKEN is missing.
    """
    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigValidationError("Missing required environment variables: DISCORD_TOKEN")

    return Config(
        discord_token=discord_token,
        developer_id=_parse_int_optional(os.getenv("DEVELOPER_ID"), "DEVELOPER_ID"),
        dev_guild_id=_parse_int_optional(os.getenv("DEV_GUILD_ID"), "DEV_GUILD_ID"),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
        wizard_session_ttl_minutes=_parse_int_with_default(
            os.getenv("WIZARD_SESSION_TTL_MINUTES"), 30, "WIZARD_SESSION_TTL_MINUTES", min_val=5, max_val=240
        ),
        interaction_guard_timeout=_parse_int_with_default(
            os.getenv("INTERACTION_GUARD_TIMEOUT"), 30, "INTERACTION_GUARD_TIMEOUT", min_val=5, max_val=300
        ),
        confirmation_timeout=_parse_int_with_default(
            os.getenv("CONFIRMATION_TIMEOUT"), 30, "CONFIRMATION_TIMEOUT", min_val=5, max_val=300
        ),
        birthday_announce_hour=_parse_int_with_default(
            os.getenv("BIRTHDAY_ANNOUNCE_HOUR"), 9, "BIRTHDAY_ANNOUNCE_HOUR", min_val=0, max_val=23
        ),
        giveaway_check_interval=_parse_int_with_default(
            os.getenv("GIVEAWAY_CHECK_INTERVAL"), 60, "GIVEAWAY_CHECK_INTERVAL", min_val=15, max_val=3600
        ),
    )


_config: Optional[Config] = None


def get_config() -> Config:
    """Return the process-wide Config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached Config so the next get_config() reloads it."""
    global _config
    _config = None


def validate_and_log_config() -> None:
    """
    Load the config (raising on missing values) and log a summary.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    if not config.error_webhook_url:
        logger.info("Optional config not set: ERROR_WEBHOOK_URL")

    logger.tree("Configuration Validated", [
        ("Required", "✅ All required variables set"),
        ("Command Sync", f"Guild {config.dev_guild_id}" if config.dev_guild_id else "Global"),
        ("Wizard TTL", f"{config.wizard_session_ttl_minutes}m"),
        ("Guard Timeout", f"{config.interaction_guard_timeout}s"),
        ("Birthday Hour", f"{config.birthday_announce_hour:02d}:00"),
    ], emoji="⚙️")


# =============================================================================
# Permission Helpers
# =============================================================================

def is_developer(user_id: int) -> bool:
    """True when ``user_id`` is the configured developer."""
    developer_id = get_config().developer_id
    return developer_id is not None and user_id == developer_id


def has_manage_guild(member) -> bool:
    """True for the developer, administrators, and Manage Server holders."""
    if member is None:
        return False
    if is_developer(member.id):
        return True
    perms = getattr(member, "guild_permissions", None)
    if perms is None:
        return False
    return bool(perms.administrator or perms.manage_guild)


async def check_manage_permission(interaction: discord.Interaction) -> bool:
    """
    Check Manage Server permission, replying with an error when missing.

    Returns:
        True if authorized, False if not (error already sent).
    """
    if not has_manage_guild(interaction.user):
        await interaction.response.send_message(
            "❌ You need the **Manage Server** permission to use this command.",
            ephemeral=True,
        )
        return False
    return True


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "load_config",
    "reset_config",
    "validate_and_log_config",
    "is_developer",
    "has_manage_guild",
    "check_manage_permission",
]
