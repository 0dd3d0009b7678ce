"""
Community Bot - Source Package
==============================

Discord bot for community management: a ticket system configured through
a setup wizard, welcome messages, birthday announcements and giveaways.

Package Structure:
- bot.py: Main Discord bot class and lifecycle
- commands/: Slash command cogs (/ticket, /welcome, /birthday, /giveaway)
- core/: Configuration, logging, constants and the database layer
- events/: Event listener cogs (interactions, member joins)
- services/: Feature services and the interaction dispatcher
- utils/: Interaction, retry and async helpers

Author: حَـــــنَّـــــا
"""
