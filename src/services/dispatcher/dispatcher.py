"""
Interaction Dispatcher
======================

Single entry point for component clicks and modal submits.

DESIGN:
    dispatch() runs guard -> route -> handler for every component and
    modal interaction. The guard claim is released in a finally block so
    a failing handler never leaves its id stuck in flight.

    The dispatcher is the only place that decides between silent logging
    and a user-visible error:
    - 10062 / 40060 are races with Discord and are logged at debug
    - unrouted custom ids get a short "not recognized" notice
    - anything else is logged with context and the user sees a generic
      failure message through safe_respond (reply or follow-up)

Author: حَـــــنَّـــــا
"""

from typing import Optional

import discord

from src.core.logger import logger
from src.utils.interaction import custom_id_of, is_benign_interaction_error, safe_respond

from .guard import InteractionGuard
from .router import PrefixRouter, RouteHandler


UNRECOGNIZED_MESSAGE = "This interaction is not recognized or has expired."
GENERIC_ERROR_MESSAGE = "❌ Something went wrong while handling that interaction."

_DISPATCHED_TYPES = (
    discord.InteractionType.component,
    discord.InteractionType.modal_submit,
)


class InteractionDispatcher:
    """Deduplicating custom id dispatcher."""

    def __init__(self, guard: InteractionGuard, router: Optional[PrefixRouter] = None) -> None:
        self.guard = guard
        self.router = router or PrefixRouter()

    def register(self, prefix: str, handler: RouteHandler, name: str = "") -> None:
        self.router.register(prefix, handler, name)

    async def dispatch(self, interaction: discord.Interaction) -> bool:
        """
        Handle one interaction.

        Returns:
            True if a handler ran (successfully or not), False if the
            interaction was skipped, duplicated, or unrouted.
        """
        if interaction.type not in _DISPATCHED_TYPES:
            return False

        custom_id = custom_id_of(interaction)
        user_id = interaction.user.id if interaction.user else 0

        if not self.guard.should_process(interaction.id, custom_id, user_id):
            return False

        try:
            route = self.router.resolve(custom_id)
            if route is None:
                logger.info("Unrouted Interaction", [
                    ("Custom ID", custom_id[:80] or "-"),
                    ("User ID", str(user_id)),
                ])
                await safe_respond(interaction, UNRECOGNIZED_MESSAGE)
                return False

            await route.handler(interaction, route.suffix(custom_id))
            return True

        except Exception as e:
            await self.handle_error(interaction, e, custom_id)
            return True

        finally:
            self.guard.mark_complete(interaction.id)

    async def handle_error(
        self,
        interaction: discord.Interaction,
        error: BaseException,
        context: str = "",
    ) -> None:
        """Apply the error policy. Also used by the command tree's on_error."""
        if is_benign_interaction_error(error):
            logger.debug("Benign Interaction Error", [
                ("Context", context[:80] or "-"),
                ("Error", str(error)[:80]),
            ])
            return

        original = getattr(error, "original", None) or error
        logger.error("Interaction Handler Failed", [
            ("Interaction ID", str(interaction.id)),
            ("Context", context[:80] or "-"),
            ("User", f"{interaction.user} ({interaction.user.id})" if interaction.user else "-"),
            ("Guild ID", str(interaction.guild_id)),
            ("Error Type", type(original).__name__),
            ("Error", str(original)[:200]),
        ])
        try:
            await safe_respond(interaction, GENERIC_ERROR_MESSAGE)
        except discord.HTTPException as e:
            logger.warning("Error Reply Failed", [
                ("Interaction ID", str(interaction.id)),
                ("Code", str(e.code)),
                ("Error", str(e)[:80]),
            ])


__all__ = [
    "InteractionDispatcher",
    "UNRECOGNIZED_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
]
