from __future__ import annotations

import logging
from typing import Any

import discord
from discord import app_commands

from .config import Settings
from .constants import ERROR_MESSAGES
from .errors import ContextRejected
from .review.naming import parse_review_thread_name

log = logging.getLogger("sbqueue.permissions")


def is_review_thread(channel: Any, settings: Settings) -> bool:
    """True for a thread under a review channel whose name encodes a thread pair."""
    if getattr(channel, "parent_id", None) not in settings.review_channel_ids:
        return False
    return parse_review_thread_name(getattr(channel, "name", None)) is not None


def is_intake_channel(channel_id: int | None, settings: Settings) -> bool:
    return channel_id is not None and channel_id == settings.intake_channel_id


async def review_thread_check(interaction: discord.Interaction) -> bool:
    settings: Settings = interaction.client.settings  # type: ignore[attr-defined]
    if not is_review_thread(interaction.channel, settings):
        log.info("Rejected /%s from %s outside a review thread", _command_name(interaction), interaction.user.id)
        raise ContextRejected(ERROR_MESSAGES["review_thread_only"])
    return True


async def intake_channel_check(interaction: discord.Interaction) -> bool:
    settings: Settings = interaction.client.settings  # type: ignore[attr-defined]
    if not is_intake_channel(interaction.channel_id, settings):
        log.info("Rejected %s from %s outside the request channel", _command_name(interaction), interaction.user.id)
        raise ContextRejected(ERROR_MESSAGES["intake_channel_only"])
    return True


def _command_name(interaction: discord.Interaction) -> str:
    command = interaction.command
    return command.name if command is not None else "?"


def require_review_thread():
    """Restrict an app command to review threads."""
    return app_commands.check(review_thread_check)
