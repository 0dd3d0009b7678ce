#!/usr/bin/env python3
"""
Community Bot - Entry Point
===========================

Loads the environment, validates configuration and runs the bot.

Author: حَـــــنَّـــــا
"""

import asyncio
import sys

from dotenv import load_dotenv

from src.core.config import ConfigValidationError, get_config, validate_and_log_config
from src.core.logger import logger
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Run the bot until it disconnects.

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start.
    """
    load_dotenv()

    try:
        validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        sys.exit(1)

    from src.bot import CommunityBot

    bot = CommunityBot()
    try:
        async with bot:
            await bot.start(get_config().discord_token)
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot Stopped by User")
