"""
Community Bot - Core Package
============================

Configuration, logging, constants and the database layer.

DESIGN:
    Core modules expose process-wide singletons:
    - get_config() returns the same Config instance
    - get_db() returns the same DatabaseManager instance
    - logger is the shared TreeLogger

Author: حَـــــنَّـــــا
"""

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    NY_TZ,
    get_config,
    is_developer,
    has_manage_guild,
)
from .database import DatabaseManager, get_db
from .logger import logger, TreeLogger


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "is_developer",
    "has_manage_guild",
    "DatabaseManager",
    "get_db",
    "logger",
    "TreeLogger",
]
