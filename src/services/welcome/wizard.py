"""
Welcome Wizard
==============

Single-screen settings panel for welcome messages.

Every control writes straight to guild_config (ensure row, then update)
and redraws the panel, so there is no draft to lose. Text settings are
edited through one-field modals whose input is always named ``val``.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, Optional

import discord

from src.core.config import EmbedColors, has_manage_guild
from src.core.constants import WIZARD_VIEW_TIMEOUT
from src.core.database import DatabaseManager
from src.utils.interaction import modal_values, safe_respond, safe_send_modal, safe_update, selected_values

from .formatting import USER_AVATAR, is_valid_color, normalize_color
from .service import WelcomeService

if TYPE_CHECKING:
    from src.services.dispatcher import InteractionDispatcher


PREFIX = "welcome_wizard_"
TOGGLE_EMBED = f"{PREFIX}toggle_embed"
EDIT_PREFIX = f"{PREFIX}edit_"
MODAL_PREFIX = f"{PREFIX}modal_"
SELECT_CHANNEL = f"{PREFIX}channel"
SELECT_ROLE = f"{PREFIX}role"
PREVIEW = f"{PREFIX}preview"
DONE = f"{PREFIX}done"
CLOSE = f"{PREFIX}close"

MODAL_FIELD = "val"

# suffix -> (column, modal title, input label, paragraph, max length)
TEXT_SETTINGS = {
    "title": ("welcome_title", "Edit Title", "Title", False, 256),
    "message": ("welcome_message", "Edit Message", "Message ({user} {guild} {member_count})", True, 2000),
    "color": ("welcome_color", "Edit Color", "Hex color, e.g. #00ff00", False, 7),
    "image": ("welcome_image", "Edit Image", f'Image URL or "{USER_AVATAR}"', False, 500),
    "footer": ("welcome_footer", "Edit Footer", "Footer text", False, 2048),
}


def _shorten(value: Optional[str], limit: int = 200) -> str:
    if not value:
        return "-"
    return value if len(value) <= limit else value[:limit] + "…"


def build_panel(config: dict, notice: Optional[str] = None) -> discord.Embed:
    embed = discord.Embed(
        title="👋 Welcome Wizard",
        description=notice or "Configure the welcome message with the buttons and menus below.",
        color=EmbedColors.WARNING if notice and notice.startswith("❌") else EmbedColors.WELCOME,
    )
    channel = config.get("welcome_channel")
    role = config.get("welcome_role")
    embed.add_field(name="Channel", value=f"<#{channel}>" if channel else "Not set", inline=True)
    embed.add_field(name="Role", value=f"<@&{role}>" if role else "None", inline=True)
    embed.add_field(name="Embed", value="On" if config.get("welcome_embed_enabled") else "Off", inline=True)
    embed.add_field(name="Title", value=_shorten(config.get("welcome_title")), inline=False)
    embed.add_field(name="Message", value=_shorten(config.get("welcome_message")), inline=False)
    embed.add_field(name="Color", value=config.get("welcome_color") or "-", inline=True)
    embed.add_field(name="Image", value=_shorten(config.get("welcome_image"), 100), inline=True)
    embed.add_field(name="Footer", value=_shorten(config.get("welcome_footer")), inline=False)
    return embed


def build_panel_view(config: dict) -> discord.ui.View:
    view = discord.ui.View(timeout=WIZARD_VIEW_TIMEOUT)
    enabled = bool(config.get("welcome_embed_enabled"))
    view.add_item(discord.ui.Button(
        style=discord.ButtonStyle.success if enabled else discord.ButtonStyle.secondary,
        label=f"Embed: {'On' if enabled else 'Off'}",
        custom_id=TOGGLE_EMBED,
        row=0,
    ))
    for suffix, style, row in (
        ("title", discord.ButtonStyle.primary, 0),
        ("message", discord.ButtonStyle.primary, 0),
        ("color", discord.ButtonStyle.secondary, 1),
        ("image", discord.ButtonStyle.secondary, 1),
        ("footer", discord.ButtonStyle.secondary, 1),
    ):
        view.add_item(discord.ui.Button(style=style, label=suffix.title(), custom_id=f"{EDIT_PREFIX}{suffix}", row=row))

    view.add_item(discord.ui.ChannelSelect(
        custom_id=SELECT_CHANNEL,
        placeholder="Choose the welcome channel",
        channel_types=[discord.ChannelType.text],
        row=2,
    ))
    view.add_item(discord.ui.RoleSelect(custom_id=SELECT_ROLE, placeholder="Choose an optional join role", row=3))
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.secondary, label="Send Preview", custom_id=PREVIEW, row=4))
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.success, label="Done", custom_id=DONE, row=4))
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.danger, label="Close", custom_id=CLOSE, row=4))
    return view


def build_text_modal(suffix: str, current: Optional[str]) -> discord.ui.Modal:
    column, title, label, paragraph, max_length = TEXT_SETTINGS[suffix]
    modal = discord.ui.Modal(title=title, custom_id=f"{MODAL_PREFIX}{suffix}")
    modal.add_item(discord.ui.TextInput(
        label=label,
        custom_id=MODAL_FIELD,
        style=discord.TextStyle.paragraph if paragraph else discord.TextStyle.short,
        default=(current or "")[:max_length] or None,
        required=False,
        max_length=max_length,
    ))
    return modal


class WelcomeWizardRoutes:
    """Dispatcher routes for the welcome wizard panel."""

    def __init__(self, db: DatabaseManager, service: WelcomeService) -> None:
        self.db = db
        self.service = service

    def register(self, dispatcher: "InteractionDispatcher") -> None:
        dispatcher.register(TOGGLE_EMBED, self.on_toggle_embed, "Welcome Wizard")
        dispatcher.register(EDIT_PREFIX, self.on_edit, "Welcome Wizard")
        dispatcher.register(MODAL_PREFIX, self.on_modal, "Welcome Wizard")
        dispatcher.register(SELECT_CHANNEL, self.on_channel, "Welcome Wizard")
        dispatcher.register(SELECT_ROLE, self.on_role, "Welcome Wizard")
        dispatcher.register(PREVIEW, self.on_preview, "Welcome Wizard")
        dispatcher.register(DONE, self.on_done, "Welcome Wizard")
        dispatcher.register(CLOSE, self.on_close, "Welcome Wizard")

    async def open(self, interaction: discord.Interaction) -> None:
        config = self.db.get_guild_config(interaction.guild_id)
        await safe_respond(interaction, embed=build_panel(config), view=build_panel_view(config))

    async def _authorized(self, interaction: discord.Interaction) -> bool:
        if interaction.guild_id is None or not has_manage_guild(interaction.user):
            await safe_respond(interaction, "❌ You need the **Manage Server** permission to change welcome settings.")
            return False
        return True

    async def _redraw(self, interaction: discord.Interaction, notice: Optional[str] = None) -> None:
        config = self.db.get_guild_config(interaction.guild_id)
        await safe_update(interaction, embed=build_panel(config, notice), view=build_panel_view(config))

    # =========================================================================
    # Handlers
    # =========================================================================

    async def on_toggle_embed(self, interaction: discord.Interaction, _: str) -> None:
        if not await self._authorized(interaction):
            return
        config = self.db.get_guild_config(interaction.guild_id)
        enabled = 0 if config.get("welcome_embed_enabled") else 1
        self.db.update_guild_config(interaction.guild_id, welcome_embed_enabled=enabled)
        await self._redraw(interaction)

    async def on_edit(self, interaction: discord.Interaction, suffix: str) -> None:
        if suffix not in TEXT_SETTINGS:
            await safe_respond(interaction, "❌ Unknown welcome setting.")
            return
        if not await self._authorized(interaction):
            return
        column = TEXT_SETTINGS[suffix][0]
        config = self.db.get_guild_config(interaction.guild_id)
        await safe_send_modal(interaction, build_text_modal(suffix, config.get(column)))

    async def on_modal(self, interaction: discord.Interaction, suffix: str) -> None:
        if suffix not in TEXT_SETTINGS:
            await safe_respond(interaction, "❌ Unknown welcome setting.")
            return
        if not await self._authorized(interaction):
            return

        value = modal_values(interaction).get(MODAL_FIELD, "").strip() or None
        if suffix == "color" and value is not None:
            if not is_valid_color(value):
                await self._redraw(interaction, "❌ Use a valid hex color, for example `#00ff00`.")
                return
            value = normalize_color(value)

        self.db.update_guild_config(interaction.guild_id, **{TEXT_SETTINGS[suffix][0]: value})
        await self._redraw(interaction, "✅ Saved.")

    async def on_channel(self, interaction: discord.Interaction, _: str) -> None:
        if not await self._authorized(interaction):
            return
        values = selected_values(interaction)
        self.db.update_guild_config(interaction.guild_id, welcome_channel=int(values[0]) if values else None)
        await self._redraw(interaction)

    async def on_role(self, interaction: discord.Interaction, _: str) -> None:
        if not await self._authorized(interaction):
            return
        values = selected_values(interaction)
        self.db.update_guild_config(interaction.guild_id, welcome_role=int(values[0]) if values else None)
        await self._redraw(interaction)

    async def on_preview(self, interaction: discord.Interaction, _: str) -> None:
        if not await self._authorized(interaction):
            return
        config = self.db.get_guild_config(interaction.guild_id)
        if not config.get("welcome_channel"):
            await self._redraw(interaction, "❌ Choose a welcome channel first.")
            return
        if not isinstance(interaction.user, discord.Member):
            await self._redraw(interaction, "❌ The preview needs your server profile. Try again in a moment.")
            return
        message = await self.service.send_welcome(interaction.user, config)
        if message is None:
            await self._redraw(interaction, "❌ The preview could not be sent. Check the channel and my permissions.")
        else:
            await self._redraw(interaction, f"✅ Preview sent: {message.jump_url}")

    async def on_done(self, interaction: discord.Interaction, _: str) -> None:
        config = self.db.get_guild_config(interaction.guild_id)
        embed = build_panel(config, "✅ Welcome settings saved.")
        await safe_update(interaction, embed=embed, view=None)

    async def on_close(self, interaction: discord.Interaction, _: str) -> None:
        embed = discord.Embed(description="Welcome wizard closed.", color=EmbedColors.GRAY)
        await safe_update(interaction, embed=embed, view=None)


__all__ = [
    "WelcomeWizardRoutes",
    "build_panel",
    "build_panel_view",
    "build_text_modal",
    "TEXT_SETTINGS",
    "MODAL_FIELD",
]
