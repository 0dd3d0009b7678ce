"""
Community Bot - Commands Package
================================

Slash command cogs.

DESIGN:
    Each command package exposes ``async def setup(bot)`` and is loaded by
    the bot with load_extension(). Buttons, selects and modals opened by
    these commands are not handled here; their custom ids are routed by
    the interaction dispatcher.

    To add a new command group:
    1. Create a package with cog.py and an __init__.py setup()
    2. Add it to COMMAND_COGS below

Available Commands:
    /ticket setup | edit | panel (Manage Server)
    /welcome setup | test (Manage Server)
    /birthday set | remove | view | list | channel
    /giveaway create | end | list | reroll (Manage Server)

Author: حَـــــنَّـــــا
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.tickets",
    "src.commands.welcome",
    "src.commands.birthday",
    "src.commands.giveaway",
]
"""List of command cog module paths for dynamic loading."""


__all__ = [
    "COMMAND_COGS",
]
