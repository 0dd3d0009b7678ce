"""
Community Bot - Retry Utilities
===============================

Retry logic for Discord REST calls made outside an interaction
(schedulers posting announcements, giveaway message edits).

Only transient failures are retried: Discord 5xx responses, rate-limit
responses that slipped past discord.py, timeouts and dropped connections.
NotFound and Forbidden are answers, not failures, and return None.

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import Any, Callable, Optional

import discord

from src.core.logger import logger


def is_transient(error: BaseException) -> bool:
    if isinstance(error, (asyncio.TimeoutError, ConnectionError)):
        return True
    if isinstance(error, (discord.NotFound, discord.Forbidden)):
        return False
    if isinstance(error, discord.HTTPException):
        return error.status >= 500 or error.status == 429
    return False


async def retry_async(
    coro_func: Callable[..., Any],
    *args,
    max_retries: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    **kwargs,
) -> Any:
    """
    Call ``coro_func`` and retry transient failures with exponential backoff.

    Raises:
        The last exception once retries are exhausted, or immediately for
        non-transient errors.
    """
    for attempt in range(max_retries + 1):
        try:
            return await coro_func(*args, **kwargs)
        except Exception as e:
            if not is_transient(e) or attempt >= max_retries:
                raise
            delay = min(base_delay * (2 ** attempt), max_delay)
            logger.warning("Retrying Discord Call", [
                ("Call", getattr(coro_func, "__name__", "call")),
                ("Attempt", f"{attempt + 1}/{max_retries}"),
                ("Error Type", type(e).__name__),
                ("Delay", f"{delay:.1f}s"),
            ])
            await asyncio.sleep(delay)


async def fetch_channel(bot: discord.Client, channel_id: Optional[int]) -> Optional[Any]:
    """Cached channel, else fetched; None if gone or hidden."""
    if not channel_id:
        return None

    channel = bot.get_channel(channel_id)
    if channel is not None:
        return channel

    try:
        return await retry_async(bot.fetch_channel, channel_id)
    except (discord.NotFound, discord.Forbidden):
        return None
    except discord.HTTPException as e:
        logger.warning("Channel Fetch Failed", [
            ("Channel ID", str(channel_id)),
            ("Error", str(e)[:80]),
        ])
        return None


async def fetch_message(channel: Any, message_id: Optional[int]) -> Optional[discord.Message]:
    if channel is None or not message_id:
        return None
    try:
        return await retry_async(channel.fetch_message, message_id)
    except (discord.NotFound, discord.Forbidden):
        return None
    except discord.HTTPException as e:
        logger.warning("Message Fetch Failed", [
            ("Message ID", str(message_id)),
            ("Error", str(e)[:80]),
        ])
        return None


async def safe_send(channel: Any, content: Optional[str] = None, **kwargs) -> Optional[discord.Message]:
    """Send to a channel; returns None (and logs) when Discord refuses."""
    if channel is None:
        return None
    try:
        return await retry_async(channel.send, content, **kwargs)
    except discord.HTTPException as e:
        logger.warning("Message Send Failed", [
            ("Channel ID", str(getattr(channel, "id", "?"))),
            ("Status", str(e.status)),
            ("Error", str(e)[:80]),
        ])
        return None


__all__ = [
    "is_transient",
    "retry_async",
    "fetch_channel",
    "fetch_message",
    "safe_send",
]
