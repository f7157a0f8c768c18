from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .constants import ERROR_MESSAGES
from .errors import ContextRejected, PlatformOperationFailed, ValidationFailed
from .utils import error_embed, safe_send

log = logging.getLogger("sbqueue.error_handlers")


class ErrorHandler(commands.Cog):
    """Centralized app command error handling.

    Every answer is ephemeral and nothing is retried.
    """

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self._previous_handler = None

    async def cog_load(self) -> None:
        tree = self.bot.tree
        self._previous_handler = tree.on_error
        tree.on_error = self.on_app_command_error

    async def cog_unload(self) -> None:
        if self._previous_handler is not None:
            self.bot.tree.on_error = self._previous_handler

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Handle application command errors."""
        if isinstance(error, ContextRejected):
            await safe_send(interaction, embed=error_embed(str(error)))
            return

        if isinstance(error, app_commands.CommandInvokeError) and isinstance(error.original, ValidationFailed):
            await safe_send(interaction, embed=error_embed(str(error.original)))
            return

        if isinstance(error, app_commands.CommandInvokeError) and isinstance(error.original, PlatformOperationFailed):
            log.warning("Discord call failed during app command: %s", error.original)
            await safe_send(interaction, embed=error_embed(ERROR_MESSAGES["platform_unavailable"]))
            return

        if isinstance(error, app_commands.CheckFailure):
            await safe_send(interaction, embed=error_embed("You can't use this command here."))
            return

        command = interaction.command.name if interaction.command else "?"
        log.error("Unexpected error in app command %s: %s", command, error, exc_info=error)
        await safe_send(interaction, embed=error_embed(ERROR_MESSAGES["unexpected"]))


async def setup_error_handlers(bot: commands.Bot) -> None:
    """Setup error handlers for the bot."""
    await bot.add_cog(ErrorHandler(bot))
