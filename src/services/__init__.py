"""
Community Bot - Services Package
================================

Feature services and the interaction plumbing they share.

DESIGN:
    Services are plain classes constructed once in CommunityBot.__init__
    and reached through the bot instance. Component and modal
    interactions reach them through the InteractionDispatcher, which
    each feature registers its routes with.

Available Services:
    dispatcher: InteractionGuard, PrefixRouter, InteractionDispatcher
    wizard: Ticket setup wizard (session store, state machine, render)
    confirmation: Bounded Confirm/Cancel prompts
    tickets: Ticket panels and ticket lifecycle
    welcome: Welcome messages and the welcome wizard
    birthdays: Birthday validation and daily announcer
    giveaways: Giveaway entries, draws and expiry scheduler
    sweeper: Periodic cleanup of wizard sessions and guard entries

Author: حَـــــنَّـــــا
"""
