"""
Community Bot - Bounded Confirmation
====================================

Ask a Confirm/Cancel question and wait a bounded time for the answer.

DESIGN:
    ask() posts an ephemeral prompt whose buttons carry
    ``confirm:yes:<nonce>`` / ``confirm:no:<nonce>`` and waits on a
    future. The click reaches handle_click() through the interaction
    dispatcher, which removes the buttons and resolves the future. On
    timeout the prompt is edited to drop the buttons and the answer is
    treated as "no".

Author: حَـــــنَّـــــا
"""

import asyncio
import secrets
from typing import Dict, Optional, Tuple

import discord

from src.core.config import EmbedColors
from src.core.logger import logger
from src.utils.interaction import safe_edit, safe_respond, safe_update


CONFIRM_PREFIX = "confirm:"


class ConfirmationService:
    """
    Pending Confirm/Cancel prompts keyed by nonce.

    Args:
        timeout: Default seconds to wait for an answer.
    """

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        self._pending: Dict[str, Tuple[asyncio.Future, int]] = {}

    @staticmethod
    def build_view(nonce: str) -> discord.ui.View:
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            style=discord.ButtonStyle.danger,
            label="Confirm",
            emoji="✅",
            custom_id=f"{CONFIRM_PREFIX}yes:{nonce}",
        ))
        view.add_item(discord.ui.Button(
            style=discord.ButtonStyle.secondary,
            label="Cancel",
            emoji="✖️",
            custom_id=f"{CONFIRM_PREFIX}no:{nonce}",
        ))
        return view

    async def ask(
        self,
        interaction: discord.Interaction,
        prompt: str,
        *,
        title: str = "Are you sure?",
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Prompt the interaction's user and wait for an answer.

        Returns:
            True only if the user pressed Confirm in time.
        """
        timeout = self.timeout if timeout is None else timeout
        nonce = secrets.token_hex(8)
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[nonce] = (future, interaction.user.id)

        embed = discord.Embed(title=title, description=prompt, color=EmbedColors.WARNING)
        embed.set_footer(text=f"This prompt expires in {int(timeout)} seconds")

        try:
            sent = await safe_respond(interaction, embed=embed, view=self.build_view(nonce))
            if sent is None:
                return False
            try:
                return await asyncio.wait_for(future, timeout)
            except asyncio.TimeoutError:
                logger.debug("Confirmation Timed Out", [
                    ("User ID", str(interaction.user.id)),
                    ("Timeout", f"{timeout}s"),
                ])
                embed.description = f"{prompt}\n\n⏱️ No answer, nothing was changed."
                embed.color = EmbedColors.GRAY
                embed.remove_footer()
                await safe_edit(interaction, embed=embed, view=None)
                return False
        finally:
            self._pending.pop(nonce, None)

    async def handle_click(self, interaction: discord.Interaction, suffix: str) -> None:
        """Route handler for ``confirm:`` custom ids."""
        answer, _, nonce = suffix.partition(":")
        pending = self._pending.get(nonce)

        if pending is None:
            await safe_update(interaction, content="This confirmation has expired.", embed=None, view=None)
            return

        future, owner_id = pending
        if interaction.user.id != owner_id:
            await safe_respond(interaction, "❌ This confirmation is not for you.")
            return

        confirmed = answer == "yes"
        embed = discord.Embed(
            description="✅ Confirmed." if confirmed else "✖️ Cancelled.",
            color=EmbedColors.SUCCESS if confirmed else EmbedColors.GRAY,
        )
        if not future.done():
            future.set_result(confirmed)
        await safe_update(interaction, embed=embed, view=None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)


__all__ = ["ConfirmationService", "CONFIRM_PREFIX"]
