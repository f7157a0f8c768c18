from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from .config import Settings
from .error_handlers import setup_error_handlers
from .observability import ActionType, LogLevel, log_structured
from .review.lifecycle import ReviewLifecycle
from .services.reputation_client import ReputationClient

log = logging.getLogger("sbqueue.bot")


class _CommandSyncManager:
    def __init__(self, bot: "QueueBot") -> None:
        self.bot = bot
        self._lock = asyncio.Lock()

    async def sync_startup(self) -> None:
        if self.bot.settings.sync_guild_id:
            await self.sync_guild(self.bot.settings.sync_guild_id)
        else:
            await self.sync_global()

    async def sync_global(self) -> None:
        async with self._lock:
            await self.bot.tree.sync()
            log.info("Commands synced globally")
            self._log_tree()

    async def sync_guild(self, guild_id: int) -> None:
        async with self._lock:
            guild = discord.Object(id=guild_id)
            self.bot.tree.copy_global_to(guild=guild)
            await self.bot.tree.sync(guild=guild)
            log.info("Commands synced to guild %d", guild_id)
            self._log_tree()

    def _log_tree(self) -> None:
        cmds = self.bot.tree.get_commands()
        log.info("Tree commands loaded: %d", len(cmds))
        for c in cmds:
            log.info(" - %s", c.name)


class QueueBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        # Thread member removals need the members intent; request text needs content.
        intents.members = True
        intents.message_content = True

        log.info("INTENTS: guilds=%s members=%s message_content=%s", intents.guilds, intents.members, intents.message_content)

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            allowed_mentions=discord.AllowedMentions(everyone=False, roles=False, users=True),
            help_command=None,
        )

        self.settings = settings
        self.reputation = ReputationClient(settings.reputation_url, timeout_seconds=settings.lookup_timeout_seconds)
        self.lifecycle = ReviewLifecycle(self, settings, self.reputation)
        self._sync_mgr = _CommandSyncManager(self)

    async def setup_hook(self) -> None:
        await self.reputation.start()
        await setup_error_handlers(self)

        loaded: list[str] = []
        failed: list[str] = []

        async def _load_cog(import_path: str, class_name: str) -> None:
            try:
                log.info("Loading cog: %s.%s", import_path, class_name)
                mod = __import__(import_path, fromlist=[class_name])
                cls = getattr(mod, class_name)
                await self.add_cog(cls(self))
                loaded.append(f"{import_path}.{class_name}")
            except (ModuleNotFoundError, AttributeError) as e:
                log.error("Cog %s.%s could not be found: %s", import_path, class_name, e)
                failed.append(f"{import_path}.{class_name} ({type(e).__name__})")
            except Exception as e:
                log.exception("Failed to load cog: %s.%s", import_path, class_name)
                failed.append(f"{import_path}.{class_name} ({type(e).__name__})")

        await _load_cog("sbqueue.cogs.intake", "IntakeCog")
        await _load_cog("sbqueue.cogs.review", "ReviewCog")

        log_structured(
            LogLevel.INFO if not failed else LogLevel.ERROR,
            ActionType.STARTUP,
            f"Cog load summary: loaded={len(loaded)} failed={len(failed)}",
            details={"loaded": loaded, "failed": failed},
            success=not failed,
        )
        await self._sync_mgr.sync_startup()
        log.info("Command sync complete")

    async def on_ready(self) -> None:
        log.info("SB queue started as %s", self.user)

    async def close(self) -> None:
        try:
            await self.reputation.close()
        finally:
            await super().close()
