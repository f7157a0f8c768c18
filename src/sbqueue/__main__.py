from __future__ import annotations

import asyncio
import logging
import signal

import discord
from dotenv import load_dotenv

from .bot import QueueBot
from .config import load_settings
from .logging_setup import setup_logging

log = logging.getLogger("sbqueue.main")


async def main_async() -> None:
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level)

    log.info("starting the bot...")
    log.info("discord.py version: %s", discord.__version__)

    bot = QueueBot(settings)

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows / limited environments
            pass

    async with bot:
        bot_task = asyncio.create_task(bot.start(settings.token), name="sbqueue-bot")
        stop_task = asyncio.create_task(stop_event.wait(), name="sbqueue-stop")
        done, pending = await asyncio.wait({bot_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

        if stop_event.is_set():
            log.info("Shutdown signal received; closing bot...")
            await bot.close()

        for t in pending:
            t.cancel()

        if bot_task in done:
            # Re-raises a crash from the gateway task.
            bot_task.result()


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
