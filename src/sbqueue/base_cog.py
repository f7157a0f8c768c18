from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord.ext import commands

if TYPE_CHECKING:
    from .bot import QueueBot
    from .config import Settings
    from .review.lifecycle import ReviewLifecycle


class BaseCog(commands.Cog):
    """Base class for all cogs with common functionality."""

    def __init__(self, bot: "QueueBot") -> None:
        self.bot = bot
        self.log = logging.getLogger(f"sbqueue.cog.{self.__class__.__name__.lower()}")

    @property
    def settings(self) -> "Settings":
        return self.bot.settings

    @property
    def lifecycle(self) -> "ReviewLifecycle":
        return self.bot.lifecycle

    async def cog_load(self) -> None:
        """Called when the cog is loaded."""
        self.log.info("Loaded %s", self.__class__.__name__)

    async def cog_unload(self) -> None:
        """Called when the cog is unloaded."""
        self.log.info("Unloaded %s", self.__class__.__name__)
