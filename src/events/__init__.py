"""
Community Bot - Events Package
==============================

Event handler cogs.

DESIGN:
    Each event module contains a Cog with @commands.Cog.listener methods
    and an ``async def setup(bot)``. Cogs are loaded dynamically by the
    bot using load_extension().

    Event routing:
    - interactions.py: Buttons, selects and modal submits to the dispatcher
    - members.py: Member join (welcome message and role)

Author: حَـــــنَّـــــا
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "src.events.interactions",
    "src.events.members",
]
"""List of event cog module paths for dynamic loading."""


__all__ = [
    "EVENT_COGS",
]
