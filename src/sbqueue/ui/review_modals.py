from __future__ import annotations

import logging
from typing import Any

import discord
from discord import ui

from ..constants import ERROR_MESSAGES, MAX_COMMENT_LENGTH, PUBLIC_ID_LENGTH
from ..errors import PlatformOperationFailed, ValidationFailed
from ..observability import ActionType, log_lifecycle
from ..review.lifecycle import ReviewLifecycle
from ..review.models import ApproveCommand, FastTrackCommand, LifecycleResult, RelayCommand, ReviewCommand
from ..utils import error_embed, safe_defer, safe_send, success_embed

log = logging.getLogger("sbqueue.ui.review_modals")


class _LifecycleModal(ui.Modal):
    """Decodes its fields into a command and hands it to the lifecycle."""

    action: ActionType
    done_text: str

    def __init__(self, lifecycle: ReviewLifecycle) -> None:
        super().__init__(timeout=300)
        self.lifecycle = lifecycle

    def decode(self) -> ReviewCommand:
        raise NotImplementedError

    async def run(self, interaction: discord.Interaction, command: Any) -> LifecycleResult:
        raise NotImplementedError

    async def on_submit(self, interaction: discord.Interaction) -> None:
        """Handle modal submission."""
        command = self.decode()
        await safe_defer(interaction, ephemeral=True, thinking=True)
        try:
            result = await self.run(interaction, command)
        except ValidationFailed as e:
            await safe_send(interaction, embed=error_embed(str(e)))
            return
        except PlatformOperationFailed as e:
            log.warning("%s could not read its thread: %s", type(self).__name__, e)
            await safe_send(interaction, embed=error_embed(ERROR_MESSAGES["platform_unavailable"]))
            return

        log_lifecycle(self.action, result, user_id=interaction.user.id)
        if result.ok:
            await safe_send(interaction, embed=success_embed(self.done_text))
        else:
            await safe_send(
                interaction,
                embed=error_embed(f"{self.done_text}\nSome steps failed: {', '.join(result.failed_steps)}"),
            )

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        log.error("Modal %s failed: %s", type(self).__name__, error, exc_info=error)
        await safe_send(interaction, embed=error_embed("Something went wrong handling that form."))


class ApproveModal(_LifecycleModal, title="Approve request"):
    """Approval form opened from a review thread."""

    action = ActionType.APPROVAL
    done_text = "Request approved."

    def __init__(self, lifecycle: ReviewLifecycle) -> None:
        super().__init__(lifecycle)
        self.comment = ui.TextInput(
            label="Comment for the requester (optional)",
            style=discord.TextStyle.paragraph,
            placeholder="Leave empty to only send the approval message",
            required=False,
            max_length=MAX_COMMENT_LENGTH,
        )
        self.add_item(self.comment)

    def decode(self) -> ApproveCommand:
        return ApproveCommand(comment=(self.comment.value or "").strip() or None)

    async def run(self, interaction: discord.Interaction, command: ApproveCommand) -> LifecycleResult:
        return await self.lifecycle.finalize_approval(interaction.channel_id, interaction.user, command.comment)


class RelayModal(_LifecycleModal, title="Message the requester"):
    """Relays a reviewer comment into the requester thread."""

    action = ActionType.RELAY
    done_text = "Comment relayed."

    def __init__(self, lifecycle: ReviewLifecycle) -> None:
        super().__init__(lifecycle)
        self.text = ui.TextInput(
            label="Message",
            style=discord.TextStyle.paragraph,
            required=True,
            min_length=1,
            max_length=MAX_COMMENT_LENGTH,
        )
        self.add_item(self.text)

    def decode(self) -> RelayCommand:
        return RelayCommand(text=(self.text.value or "").strip())

    async def run(self, interaction: discord.Interaction, command: RelayCommand) -> LifecycleResult:
        if not command.text:
            raise ValidationFailed("The message can't be empty.")
        return await self.lifecycle.relay_comment(interaction.channel_id, interaction.user, command.text)


class FastTrackModal(_LifecycleModal, title="Fast-track approval"):
    """Approves a public ID directly, without a thread pair."""

    action = ActionType.FAST_TRACK
    done_text = "User approved."

    def __init__(self, lifecycle: ReviewLifecycle, message: discord.Message, default_public_id: str = "") -> None:
        super().__init__(lifecycle)
        self.target_message = message
        self.public_id = ui.TextInput(
            label="Public user ID",
            placeholder="64 character public user ID",
            default=default_public_id or None,
            required=True,
            min_length=PUBLIC_ID_LENGTH,
            max_length=PUBLIC_ID_LENGTH,
        )
        self.add_item(self.public_id)

    def decode(self) -> FastTrackCommand:
        return FastTrackCommand(public_id=(self.public_id.value or "").strip())

    async def run(self, interaction: discord.Interaction, command: FastTrackCommand) -> LifecycleResult:
        return await self.lifecycle.fast_track_approve(self.target_message, interaction.user, command.public_id)
