"""
Community Bot - Main Bot Class
==============================

Discord client for community management: ticket system with a setup
wizard, welcome messages, birthday announcements and giveaways.

Author: حَـــــنَّـــــا
"""

from datetime import datetime

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import get_config
from src.core.constants import SECONDS_PER_MINUTE
from src.core.database import get_db
from src.core.logger import logger
from src.services.birthdays import BirthdayScheduler
from src.services.confirmation import CONFIRM_PREFIX, ConfirmationService
from src.services.dispatcher import InteractionDispatcher, InteractionGuard
from src.services.giveaways import GiveawayRoutes, GiveawayScheduler, GiveawayService
from src.services.sweeper import SweeperService
from src.services.tickets import TicketRoutes, TicketService
from src.services.welcome import WelcomeService, WelcomeWizardRoutes
from src.services.wizard import InMemorySessionStore, TicketSetupWizard, WizardRoutes
from src.utils.async_utils import gather_with_logging
from src.utils.footer import init_footer
from src.utils.interaction import safe_respond


# =============================================================================
# CommunityBot Class
# =============================================================================

class CommunityBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Central orchestrator that:
    - Holds references to all services for cross-service communication
    - Routes component and modal interactions through one dispatcher
    - Manages bot lifecycle (startup, shutdown)

    SERVICE INITIALIZATION ORDER:
    1. __init__:
       - Session store, guard, dispatcher, confirmation
       - Feature services and their dispatcher routes
    2. setup_hook (before on_ready):
       - Command and event cog loading
       - Command tree syncing
    3. on_ready:
       - Footer avatar, error webhook
       - Birthday and giveaway schedulers, session sweeper
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.members = True

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.db = get_db()
        self.start_time: datetime = datetime.now()

        # Interaction plumbing
        self.wizard_store = InMemorySessionStore(self.config.wizard_session_ttl_minutes * SECONDS_PER_MINUTE)
        self.guard = InteractionGuard(self.config.interaction_guard_timeout)
        self.dispatcher = InteractionDispatcher(self.guard)
        self.confirmation = ConfirmationService(self.config.confirmation_timeout)

        # Features
        self.wizard = TicketSetupWizard(self.wizard_store, self.db.upsert_ticket_system)
        self.ticket_service = TicketService(self, self.db, self.confirmation)
        self.welcome_service = WelcomeService(self.db)
        self.welcome_routes = WelcomeWizardRoutes(self.db, self.welcome_service)
        self.giveaway_service = GiveawayService(self, self.db)

        # Background loops
        self.birthday_scheduler = BirthdayScheduler(self, self.db)
        self.giveaway_scheduler = GiveawayScheduler(self, self.db, self.giveaway_service)
        self.sweeper = SweeperService(self.wizard_store, self.guard)

        self._register_routes()
        self.tree.on_error = self.on_app_command_error

        # Ready state guard
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    def _register_routes(self) -> None:
        self.dispatcher.register(CONFIRM_PREFIX, self.confirmation.handle_click, "Confirmation")
        WizardRoutes(self.wizard, self.ticket_service).register(self.dispatcher)
        TicketRoutes(self.ticket_service).register(self.dispatcher)
        self.welcome_routes.register(self.dispatcher)
        GiveawayRoutes(self.db, self.giveaway_service).register(self.dispatcher)

        logger.tree("Interaction Routes Registered", [
            ("Routes", str(len(self.dispatcher.router))),
        ], emoji="🧭")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs and sync commands before on_ready."""
        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        from src.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

        try:
            if self.config.dev_guild_id:
                guild = discord.Object(id=self.config.dev_guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                scope = f"Guild {self.config.dev_guild_id}"
            else:
                synced = await self.tree.sync()
                scope = "Global"
            logger.tree("Commands Synced", [
                ("Count", str(len(synced))),
                ("Scope", scope),
            ], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Start background services once connected."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

        init_footer(self)

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        await self.birthday_scheduler.start()
        await self.giveaway_scheduler.start()
        await self.sweeper.start()

    # =========================================================================
    # Slash Command Errors
    # =========================================================================

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Command tree error handler; shares the dispatcher's error policy."""
        if isinstance(error, app_commands.NoPrivateMessage):
            await safe_respond(interaction, "❌ This command can only be used in a server.")
            return
        if isinstance(error, app_commands.MissingPermissions):
            await safe_respond(interaction, "❌ You don't have permission to use this command.")
            return

        command = interaction.command.qualified_name if interaction.command else "unknown"
        await self.dispatcher.handle_error(interaction, error, f"/{command}")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Graceful shutdown with proper cleanup."""
        logger.info("Initiating Graceful Shutdown")

        await gather_with_logging(
            ("Session Sweeper", self.sweeper.stop()),
            ("Giveaway Scheduler", self.giveaway_scheduler.stop()),
            ("Birthday Scheduler", self.birthday_scheduler.stop()),
            context="Shutdown",
        )

        self.db.close()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["CommunityBot"]
