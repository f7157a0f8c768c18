from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Optional

import discord

from ..config import Settings
from ..constants import (
    APPROVED_TEXT,
    AUTO_ARCHIVE_MINUTES,
    ERROR_MESSAGES,
    SUCCESS_EMOJI,
)
from ..errors import LookupFailed, PlatformOperationFailed, ValidationFailed
from ..services.reputation_client import ReputationClient
from .extractor import find_public_id, is_public_id
from .messages import JumpView, approval_record_text, audit_embed, comment_text
from .models import (
    ApprovalRecord,
    LifecycleResult,
    LifecycleState,
    StepOutcome,
    Submission,
    ThreadPair,
    Track,
)
from .naming import parse_review_thread_name, review_thread_name
from .routing import classify, guidance_text

log = logging.getLogger("sbqueue.lifecycle")

_PLATFORM_ERRORS = (discord.HTTPException, discord.ClientException, asyncio.TimeoutError)


class ReviewLifecycle:
    """Moves a request from intake message to approval.

    Every side effect is a separate step: a failed step is recorded in the
    LifecycleResult and the following steps still run. The only step that
    halts routing is creating the requester thread, since the review thread
    name embeds its ID.

    Nothing is cached between events. Threads are fetched again whenever an
    operation needs their name, parent or archived flag.
    """

    def __init__(self, bot: discord.Client, settings: Settings, reputation: ReputationClient) -> None:
        self.bot = bot
        self.settings = settings
        self.reputation = reputation

    # -- platform access -------------------------------------------------

    async def _call(self, operation: str, coro: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(coro, timeout=self.settings.platform_timeout_seconds)
        except _PLATFORM_ERRORS as e:
            raise PlatformOperationFailed(operation, e) from e

    async def _step(self, result: LifecycleResult, step: str, coro: Awaitable[Any]) -> Any:
        """Run one side effect, recording its outcome instead of raising."""
        try:
            value = await self._call(step, coro)
        except PlatformOperationFailed as e:
            log.warning("Step %s failed for %s: %s", step, result.public_id or "-", e)
            result.outcomes.append(StepOutcome(step, False, str(e)))
            return None
        result.outcomes.append(StepOutcome(step, True))
        return value

    @staticmethod
    def _skip(result: LifecycleResult, step: str, reason: str) -> None:
        result.outcomes.append(StepOutcome(step, False, f"skipped: {reason}"))

    async def _configured_channel(self, channel_id: int) -> Any:
        # Configured channels are static; the gateway cache is fine for them.
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            channel = await self.bot.fetch_channel(channel_id)
        return channel

    async def _send_to(self, channel_id: int, *args: Any, **kwargs: Any) -> discord.Message:
        channel = await self._configured_channel(channel_id)
        return await channel.send(*args, **kwargs)

    async def _react_on(self, channel_id: int, message_id: int, emoji: str) -> None:
        channel = await self._configured_channel(channel_id)
        await channel.get_partial_message(message_id).add_reaction(emoji)

    async def _delete_anchor(self, review_thread: Any) -> None:
        # The review thread shares its ID with the anchor message it was started from.
        parent = await self._configured_channel(review_thread.parent_id)
        await parent.get_partial_message(review_thread.id).delete()

    def _track_targets(self, track: Track) -> tuple[int, int]:
        if track is Track.NEEDS_CONTENT:
            return self.settings.review_channel_needs_content_id, self.settings.reviewer_role_needs_content_id
        return self.settings.review_channel_meets_minimum_id, self.settings.reviewer_role_meets_minimum_id

    # -- intake ----------------------------------------------------------

    def is_candidate(self, message: discord.Message) -> bool:
        if message.channel.id != self.settings.intake_channel_id:
            return False
        # Bridged (webhook) posts carry a bot author but come from real people.
        if message.author.bot and message.webhook_id is None:
            return False
        return message.id > self.settings.starting_message_id

    async def handle_submission(self, message: discord.Message) -> Optional[LifecycleResult]:
        """Observe an intake message and route it. Returns None when it is not a request."""
        if not self.is_candidate(message):
            return None
        public_id = find_public_id(message.content)
        if public_id is None:
            return None

        result = LifecycleResult(action="submission", state=LifecycleState.OBSERVED, public_id=public_id)
        try:
            profile = await self.reputation.lookup(public_id)
        except LookupFailed as e:
            # Upstream trouble is not the requester's fault; stay quiet.
            log.warning("Dropping request in message %s: %s", message.id, e)
            result.outcomes.append(StepOutcome("lookup", False, str(e)))
            return result
        result.outcomes.append(StepOutcome("lookup", True))

        submission = Submission(
            public_id=public_id,
            requester_id=message.author.id,
            channel_id=message.channel.id,
            message_id=message.id,
            profile=profile,
            track=classify(profile),
        )
        result.track = submission.track
        result.state = LifecycleState.CLASSIFIED

        if submission.track is Track.ALREADY_APPROVED:
            await self._step(
                result,
                "preapproved_reply",
                message.reply(guidance_text(submission.track, message.author.mention), mention_author=False),
            )
            result.state = LifecycleState.CLOSED_PREAPPROVED
            return result

        await self._route(message, submission, result)
        return result

    async def _route(self, message: discord.Message, submission: Submission, result: LifecycleResult) -> None:
        def embed() -> discord.Embed:
            return audit_embed(
                public_id=submission.public_id,
                profile=submission.profile,
                profile_url=self.settings.profile_url,
                avatar_url=message.author.display_avatar.url,
                excerpt=message.content,
            )

        jump_url = self.settings.jump_url(submission.channel_id, submission.message_id)

        await self._step(
            result,
            "audit_log",
            self._send_to(self.settings.audit_channel_id, embed=embed(), view=JumpView(jump_url)),
        )

        body = guidance_text(submission.track, message.author.mention)

        if message.webhook_id is not None:
            # Bridged identities cannot own threads: answer in place. The review
            # thread still pairs with the source message ID, which is where a
            # requester thread would have been.
            await self._step(result, "guidance", message.reply(body))
            requester_thread_id = message.id
            result.state = LifecycleState.ROUTED
            log.info("Request %s came through a bridge; no requester thread", submission.public_id)
        else:
            thread = await self._step(
                result,
                "requester_thread",
                message.create_thread(name=submission.public_id, auto_archive_duration=AUTO_ARCHIVE_MINUTES),
            )
            if not result.succeeded("requester_thread"):
                log.error("Could not open a thread for request %s; routing halted", submission.public_id)
                return
            requester_thread_id = thread.id
            result.state = LifecycleState.ROUTED

            await self._step(result, "guidance", thread.send(body))

        review_channel_id, role_id = self._track_targets(submission.track)
        anchor = await self._step(
            result,
            "review_anchor",
            self._send_to(review_channel_id, embed=embed(), view=JumpView(jump_url)),
        )
        if not result.succeeded("review_anchor"):
            log.error("Request %s is routed without a review thread (anchor failed)", submission.public_id)
            return

        review_thread = await self._step(
            result,
            "review_thread",
            anchor.create_thread(
                name=review_thread_name(requester_thread_id, submission.public_id),
                auto_archive_duration=AUTO_ARCHIVE_MINUTES,
            ),
        )
        if not result.succeeded("review_thread"):
            log.error("Request %s is routed without a review thread", submission.public_id)
            return

        await self._step(
            result,
            "review_ping",
            review_thread.send(f"<@&{role_id}>", allowed_mentions=discord.AllowedMentions(roles=True)),
        )

    # -- review ----------------------------------------------------------

    async def read_pair(self, result: LifecycleResult, review_thread_id: int) -> tuple[Any, ThreadPair]:
        """Fetch the review thread and decode the pair from its current name.

        Raises ValidationFailed when the thread is gone or not paired, and
        PlatformOperationFailed when Discord could not be reached.
        """
        try:
            review_thread = await self._call("read_review_thread", self.bot.fetch_channel(review_thread_id))
        except PlatformOperationFailed as e:
            result.outcomes.append(StepOutcome("read_review_thread", False, str(e)))
            if isinstance(e.cause, discord.NotFound):
                raise ValidationFailed(ERROR_MESSAGES["unpaired_thread"]) from e
            raise
        result.outcomes.append(StepOutcome("read_review_thread", True))
        pair = parse_review_thread_name(getattr(review_thread, "name", None), review_thread.id)
        if pair is None or review_thread.parent_id not in self.settings.review_channel_ids:
            raise ValidationFailed(ERROR_MESSAGES["unpaired_thread"])
        result.public_id = pair.public_id
        return review_thread, pair

    async def relay_comment(self, review_thread_id: int, author: discord.abc.User, text: str) -> LifecycleResult:
        """Post a reviewer comment into the requester thread without approving."""
        result = LifecycleResult(action="relay", state=LifecycleState.ROUTED)
        _review_thread, pair = await self.read_pair(result, review_thread_id)

        requester_thread = await self._step(
            result, "read_requester_thread", self.bot.fetch_channel(pair.requester_thread_id)
        )
        if requester_thread is None:
            self._skip(result, "relay_comment", "requester thread unavailable")
            return result

        await self._step(result, "relay_comment", requester_thread.send(comment_text(author.mention, text)))
        if result.succeeded("relay_comment"):
            result.state = LifecycleState.REVIEWED
        return result

    async def finalize_approval(
        self,
        review_thread_id: int,
        approver: discord.abc.User,
        comment: Optional[str] = None,
    ) -> LifecycleResult:
        """Approve the request paired with a review thread.

        Not transactional: each step is attempted once and failures are only
        recorded. Submitting twice repeats every step.
        """
        result = LifecycleResult(action="approval", state=LifecycleState.ROUTED)
        review_thread, pair = await self.read_pair(result, review_thread_id)

        requester_thread = await self._step(
            result, "read_requester_thread", self.bot.fetch_channel(pair.requester_thread_id)
        )

        comment = (comment or "").strip()
        if comment:
            if requester_thread is not None:
                await self._step(result, "relay_comment", requester_thread.send(comment_text(approver.mention, comment)))
            else:
                self._skip(result, "relay_comment", "requester thread unavailable")
            result.state = LifecycleState.REVIEWED

        if requester_thread is not None:
            await self._step(result, "approval_message", requester_thread.send(APPROVED_TEXT))
        else:
            self._skip(result, "approval_message", "requester thread unavailable")

        await self._step(
            result,
            "approval_reaction",
            self._react_on(self.settings.intake_channel_id, pair.requester_thread_id, SUCCESS_EMOJI),
        )
        await self._step(result, "archive_review_thread", review_thread.edit(archived=True))
        await self._step(result, "delete_review_anchor", self._delete_anchor(review_thread))

        record = ApprovalRecord(public_id=pair.public_id, approver_id=approver.id, timestamp_unix=int(time.time()))
        await self._step(result, "approval_record", self._post_record(record))

        result.state = LifecycleState.APPROVED
        return result

    async def _post_record(self, record: ApprovalRecord) -> discord.Message:
        return await self._send_to(
            self.settings.approvals_channel_id,
            approval_record_text(record),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    async def fast_track_approve(
        self,
        message: discord.Message,
        approver: discord.abc.User,
        public_id: str,
    ) -> LifecycleResult:
        """Approve an arbitrary public ID from the intake channel, skipping the thread pair."""
        public_id = public_id.strip()
        if not is_public_id(public_id):
            raise ValidationFailed(ERROR_MESSAGES["invalid_public_id"])

        result = LifecycleResult(action="fast_track", state=LifecycleState.OBSERVED, public_id=public_id)
        record = ApprovalRecord(public_id=public_id, approver_id=approver.id, timestamp_unix=int(time.time()))
        await self._step(result, "approval_record", self._post_record(record))
        await self._step(result, "approval_reaction", message.add_reaction(SUCCESS_EMOJI))
        result.state = LifecycleState.APPROVED
        return result

    # -- departure -------------------------------------------------------

    async def handle_departure(self, thread_id: int, user_id: int) -> Optional[LifecycleResult]:
        """Archive a requester thread its requester walked out of.

        Returns None when the thread is not an open, bot-owned requester thread
        or the departing member is not the one who asked.
        """
        intake_id = self.settings.intake_channel_id
        try:
            thread = await self._call("read_thread", self.bot.fetch_channel(thread_id))
        except PlatformOperationFailed as e:
            log.warning("Ignoring departure from %s: %s", thread_id, e)
            return None

        if getattr(thread, "parent_id", None) != intake_id or thread.archived:
            return None
        if thread.id <= self.settings.starting_message_id:
            return None
        me = self.bot.user
        if me is None or thread.owner_id != me.id:
            return None

        try:
            intake = await self._configured_channel(intake_id)
            starter = await self._call("read_starter_message", intake.fetch_message(thread.id))
        except (PlatformOperationFailed, *_PLATFORM_ERRORS) as e:
            log.warning("Ignoring departure from %s: starter message unavailable: %s", thread_id, e)
            return None
        if starter.author.id != user_id:
            return None

        result = LifecycleResult(
            action="departure",
            state=LifecycleState.ROUTED,
            public_id=thread.name if is_public_id(thread.name or "") else None,
        )
        await self._step(result, "archive_requester_thread", thread.edit(archived=True))
        if result.succeeded("archive_requester_thread"):
            result.state = LifecycleState.ABANDONED
        return result
