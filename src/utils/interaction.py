"""
Community Bot - Interaction Utilities
=====================================

Single-acknowledgement helpers for Discord interactions.

Every interaction gets exactly one initial response: send_message, defer,
edit_message or send_modal. Anything after that must go through the
follow-up webhook or edit the original response. These helpers check
``interaction.response.is_done()`` and pick the right primitive so
handlers never call an initial response twice.

Only the benign races (10062, 40060) are swallowed here. Any other
HTTPException propagates so the dispatcher or command tree error handler
logs it and tells the user.

Author: حَـــــنَّـــــا
"""

from typing import Any, Dict, Iterable, Optional, Union

import discord

from src.core.constants import ALREADY_ACKNOWLEDGED, UNKNOWN_INTERACTION
from src.core.logger import logger


BENIGN_ERROR_CODES = frozenset({UNKNOWN_INTERACTION, ALREADY_ACKNOWLEDGED})


def is_benign_interaction_error(error: BaseException) -> bool:
    """
    True for races we expect and ignore.

    10062 (unknown interaction) means the user waited past the response
    window; 40060 (already acknowledged) means another code path answered
    first. Neither deserves an error message.
    """
    original = getattr(error, "original", None)
    if original is not None and original is not error:
        return is_benign_interaction_error(original)
    return isinstance(error, discord.HTTPException) and error.code in BENIGN_ERROR_CODES


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    embeds: Optional[list] = None,
    view: Optional[discord.ui.View] = None,
    ephemeral: bool = True,
) -> Optional[Union[discord.InteractionMessage, discord.WebhookMessage]]:
    """
    Reply if nothing has answered yet, otherwise follow up.

    Returns:
        The sent message, or None if Discord rejected it.
    """
    kwargs: Dict[str, Any] = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if embeds is not None:
        kwargs["embeds"] = embeds
    if view is not None:
        kwargs["view"] = view

    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(**kwargs)
            return await interaction.original_response()
        return await interaction.followup.send(wait=True, **kwargs)
    except discord.HTTPException as e:
        if not is_benign_interaction_error(e):
            raise
        logger.debug("safe_respond failed", [
            ("Status", str(e.status)),
            ("Code", str(e.code)),
            ("Error", str(e)[:50]),
        ])
        return None


async def safe_defer(
    interaction: discord.Interaction,
    *,
    ephemeral: bool = True,
    thinking: bool = False,
) -> bool:
    """
    Defer if nothing has answered yet.

    Returns:
        True if this call acknowledged the interaction.
    """
    if interaction.response.is_done():
        return False
    try:
        await interaction.response.defer(ephemeral=ephemeral, thinking=thinking)
        return True
    except discord.HTTPException as e:
        if not is_benign_interaction_error(e):
            raise
        logger.debug("safe_defer failed", [("Code", str(e.code))])
        return False


async def safe_edit(
    interaction: discord.Interaction,
    *,
    content: Optional[str] = discord.utils.MISSING,
    embed: Optional[discord.Embed] = discord.utils.MISSING,
    view: Optional[discord.ui.View] = discord.utils.MISSING,
) -> bool:
    """Edit the original response. Only valid after an initial response."""
    kwargs: Dict[str, Any] = {}
    if content is not discord.utils.MISSING:
        kwargs["content"] = content
    if embed is not discord.utils.MISSING:
        kwargs["embed"] = embed
    if view is not discord.utils.MISSING:
        kwargs["view"] = view

    try:
        await interaction.edit_original_response(**kwargs)
        return True
    except discord.HTTPException as e:
        if not is_benign_interaction_error(e):
            raise
        logger.debug("safe_edit failed", [("Code", str(e.code)), ("Error", str(e)[:50])])
        return False


async def safe_update(
    interaction: discord.Interaction,
    *,
    content: Optional[str] = discord.utils.MISSING,
    embed: Optional[discord.Embed] = discord.utils.MISSING,
    view: Optional[discord.ui.View] = discord.utils.MISSING,
) -> bool:
    """
    Update the message a component lives on.

    Uses ``response.edit_message`` as the initial acknowledgement when
    possible; once acknowledged, edits the original response instead.
    Modal submits from a non-component context fall back to a reply.
    """
    kwargs: Dict[str, Any] = {}
    if content is not discord.utils.MISSING:
        kwargs["content"] = content
    if embed is not discord.utils.MISSING:
        kwargs["embed"] = embed
    if view is not discord.utils.MISSING:
        kwargs["view"] = view

    if interaction.response.is_done():
        return await safe_edit(interaction, **kwargs)

    if interaction.message is None:
        sent = await safe_respond(
            interaction,
            content=kwargs.get("content"),
            embed=kwargs.get("embed"),
            view=kwargs.get("view"),
        )
        return sent is not None

    try:
        await interaction.response.edit_message(**kwargs)
        return True
    except discord.HTTPException as e:
        if not is_benign_interaction_error(e):
            raise
        logger.debug("safe_update failed", [("Code", str(e.code)), ("Error", str(e)[:50])])
        return False


async def safe_send_modal(interaction: discord.Interaction, modal: discord.ui.Modal) -> bool:
    """
    Show a modal. A modal can only be the initial response.

    Returns:
        False when the interaction was already acknowledged or Discord refused.
    """
    if interaction.response.is_done():
        logger.debug("Modal skipped, interaction already acknowledged", [
            ("Modal", type(modal).__name__),
        ])
        return False
    try:
        await interaction.response.send_modal(modal)
        return True
    except discord.HTTPException as e:
        if not is_benign_interaction_error(e):
            raise
        logger.debug("safe_send_modal failed", [("Code", str(e.code))])
        return False


# =============================================================================
# Payload Helpers
# =============================================================================

def _walk_components(components: Iterable[dict]) -> Iterable[dict]:
    for component in components or ():
        yield component
        # Action rows nest under "components", labels under "component"
        yield from _walk_components(component.get("components", ()))
        inner = component.get("component")
        if inner:
            yield from _walk_components((inner,))


def modal_values(interaction: discord.Interaction) -> Dict[str, str]:
    """Map each submitted text input's custom_id to its value."""
    data = interaction.data or {}
    values: Dict[str, str] = {}
    for component in _walk_components(data.get("components", ())):
        custom_id = component.get("custom_id")
        if custom_id and "value" in component:
            values[custom_id] = component["value"] or ""
    return values


def selected_values(interaction: discord.Interaction) -> list:
    """Values picked in a select menu (ids as strings for entity selects)."""
    data = interaction.data or {}
    return list(data.get("values", []))


def custom_id_of(interaction: discord.Interaction) -> str:
    data = interaction.data or {}
    return data.get("custom_id", "") or ""


__all__ = [
    "BENIGN_ERROR_CODES",
    "is_benign_interaction_error",
    "safe_respond",
    "safe_defer",
    "safe_edit",
    "safe_update",
    "safe_send_modal",
    "modal_values",
    "selected_values",
    "custom_id_of",
]
