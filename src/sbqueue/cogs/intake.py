from __future__ import annotations

import discord
from discord.ext import commands

from ..base_cog import BaseCog
from ..observability import ActionType, log_lifecycle


class IntakeCog(BaseCog):
    """Watches the request channel and the requester threads opened from it."""

    def __init__(self, bot) -> None:
        super().__init__(bot)
        self._last_raw_removal: discord.RawThreadMembersUpdate | None = None

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        result = await self.lifecycle.handle_submission(message)
        if result is not None:
            log_lifecycle(ActionType.SUBMISSION, result, user_id=message.author.id)

    @commands.Cog.listener()
    async def on_thread_member_remove(self, member: discord.ThreadMember) -> None:
        await self._departure(member.thread_id, member.id)

    @commands.Cog.listener()
    async def on_raw_thread_member_remove(self, payload: discord.RawThreadMembersUpdate) -> None:
        """Handle uncached members leaving a thread.

        discord.py dispatches the same payload once per uncached member, back to
        back, so only the first dispatch of a payload walks its member list.
        """
        if payload is self._last_raw_removal:
            return
        self._last_raw_removal = payload
        for user_id in payload.data.get("removed_member_ids", []):
            await self._departure(payload.thread_id, int(user_id))

    async def _departure(self, thread_id: int, user_id: int) -> None:
        result = await self.lifecycle.handle_departure(thread_id, user_id)
        if result is not None:
            log_lifecycle(ActionType.DEPARTURE, result, user_id=user_id)
