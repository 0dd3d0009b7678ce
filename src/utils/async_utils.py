"""
Community Bot - Async Utilities
===============================

Helpers for async work whose failures must be logged, not lost.

Usage:
    from src.utils.async_utils import create_safe_task, gather_with_logging

    create_safe_task(self._loop(), "Giveaway Scheduler")

    await gather_with_logging(
        ("Sweeper", sweeper.stop()),
        ("Giveaway Scheduler", giveaways.stop()),
    )

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import Any, Coroutine, List, Optional, Tuple

from src.core.logger import logger


async def gather_with_logging(
    *operations: Tuple[str, Coroutine[Any, Any, Any]],
    context: Optional[str] = None,
) -> List[Any]:
    """
    Run operations concurrently and log each one that raised.

    Args:
        *operations: Tuples of (operation_name, coroutine).
        context: Optional context string for error logs.

    Returns:
        List of results (exceptions included as values, not raised).
    """
    names = [name for name, _ in operations]
    coros = [coro for _, coro in operations]

    results = await asyncio.gather(*coros, return_exceptions=True)

    for name, result in zip(names, results):
        if isinstance(result, Exception):
            error_details = [
                ("Operation", name),
                ("Error Type", type(result).__name__),
                ("Error", str(result)[:100]),
            ]
            if context:
                error_details.insert(0, ("Context", context))
            logger.warning("Async Operation Failed", error_details)

    return results


def create_safe_task(
    coro: Coroutine[Any, Any, Any],
    name: str = "Background Task",
) -> asyncio.Task:
    """
    Create a background task that logs its exception instead of dropping it.

    Args:
        coro: The coroutine to run.
        name: Name for logging purposes.
    """
    async def wrapped():
        try:
            await coro
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Background Task Failed", [
                ("Task", name),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:200]),
            ])

    return asyncio.create_task(wrapped())


__all__ = [
    "gather_with_logging",
    "create_safe_task",
]
