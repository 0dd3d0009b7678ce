"""
Community Bot - Error Handler
=============================

Categorized handling for errors that escape to the top level.

Features:
- Error categorization (Discord, Database, Network)
- Recovery suggestions in the log
- Critical error reports written to logs/errors/

Author: حَـــــنَّـــــا
"""

import json
import sqlite3
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import aiohttp
import discord

from src.core.logger import logger


ERROR_DIR = Path("logs/errors")


class ErrorContext:
    """Captures error context for reports."""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs) -> Dict[str, Any]:
        context = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": kwargs,
        }

        interaction = kwargs.get("interaction")
        if isinstance(interaction, discord.Interaction):
            context["discord_context"] = {
                "guild_id": interaction.guild_id,
                "channel_id": interaction.channel_id,
                "user": str(interaction.user),
                "user_id": interaction.user.id if interaction.user else None,
            }

        return context


class ErrorHandler:
    """Top-level error handling with categories and recovery hints."""

    # Order matters: discord.HTTPException is checked before OSError
    ERROR_CATEGORIES = {
        "discord": (discord.DiscordException,),
        "database": (sqlite3.Error,),
        "network": (aiohttp.ClientError, ConnectionError, TimeoutError, OSError),
    }

    RECOVERY_SUGGESTIONS = (
        (discord.LoginFailure, "Invalid DISCORD_TOKEN - check the .env file"),
        (discord.PrivilegedIntentsRequired, "Enable the Server Members intent in the developer portal"),
        (discord.Forbidden, "Check bot permissions in server settings"),
        (discord.NotFound, "Resource not found - check IDs and channels"),
        (discord.HTTPException, "Discord API issue - retry later"),
        (sqlite3.OperationalError, "Database locked or unreadable - check the data directory"),
        (sqlite3.IntegrityError, "Database constraint violation - check data validity"),
        (sqlite3.Error, "General database error - check database file"),
        (aiohttp.ClientError, "Network request failed - check connectivity"),
        (ConnectionError, "Network connection issue - check internet connection"),
        (TimeoutError, "Request timed out - retry later"),
        (OSError, "System resource issue - check disk space and permissions"),
    )

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: BaseException) -> str:
        for error_type, suggestion in cls.RECOVERY_SUGGESTIONS:
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context) -> str:
        """
        Log an error with its category and recovery hint.

        Critical errors also get a JSON report under logs/errors/.

        Returns:
            The error category.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        details = [
            ("Category", category.upper()),
            ("Location", location),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:200]),
            ("Recovery", suggestion),
        ]

        if critical:
            logger.critical("Critical Error", details)
            cls._store_critical_error(ErrorContext.get_full_context(e, location, **context))
        else:
            logger.warning("Error Handled", details)

        return category

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        try:
            ERROR_DIR.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            error_file = ERROR_DIR / f"error_{timestamp}.json"
            with open(error_file, "w") as f:
                json.dump(context, f, indent=2, default=str)
            logger.info("Critical Error Saved", [("File", str(error_file))])
        except OSError as save_error:
            logger.warning("Failed to Save Error Details", [("Error", str(save_error))])


__all__ = ["ErrorContext", "ErrorHandler"]
