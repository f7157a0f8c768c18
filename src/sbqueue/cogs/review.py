from __future__ import annotations

import discord
from discord import app_commands

from ..base_cog import BaseCog
from ..permissions import intake_channel_check, require_review_thread
from ..review.extractor import find_public_id
from ..ui.review_modals import ApproveModal, FastTrackModal, RelayModal


class ReviewCog(BaseCog):
    """Reviewer commands: approve or message a requester, fast-track an ID."""

    def __init__(self, bot) -> None:
        super().__init__(bot)
        self.fast_track_menu = app_commands.ContextMenu(name="Fast-track approve", callback=self.fast_track)
        self.fast_track_menu.add_check(intake_channel_check)
        self.fast_track_menu.guild_only = True

    async def cog_load(self) -> None:
        self.bot.tree.add_command(self.fast_track_menu)
        await super().cog_load()

    async def cog_unload(self) -> None:
        self.bot.tree.remove_command(self.fast_track_menu.name, type=self.fast_track_menu.type)
        await super().cog_unload()

    @app_commands.command(name="approve", description="Approve the request linked to this review thread.")
    @app_commands.guild_only()
    @require_review_thread()
    async def approve(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_modal(ApproveModal(self.lifecycle))

    @app_commands.command(name="relay", description="Send a message to the requester's thread.")
    @app_commands.guild_only()
    @require_review_thread()
    async def relay(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_modal(RelayModal(self.lifecycle))

    async def fast_track(self, interaction: discord.Interaction, message: discord.Message) -> None:
        default = find_public_id(message.content) or ""
        await interaction.response.send_modal(FastTrackModal(self.lifecycle, message, default))
