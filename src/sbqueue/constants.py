from __future__ import annotations

from typing import Final

# Discord limits
MAX_MESSAGE_LENGTH: Final[int] = 2000
MAX_EMBED_DESCRIPTION: Final[int] = 4096
MAX_EMBED_TITLE: Final[int] = 256
MAX_FIELD_VALUE: Final[int] = 1024
MAX_THREAD_NAME: Final[int] = 100

# Thread auto-archive duration in minutes (3 days)
AUTO_ARCHIVE_MINUTES: Final[int] = 4320

# Modal limits
MAX_COMMENT_LENGTH: Final[int] = 1000
PUBLIC_ID_LENGTH: Final[int] = 64

SUCCESS_EMOJI: Final[str] = "✅"

COLORS = {
    "default": 0x5865F2,
    "success": 0x57F287,
    "error": 0xED4245,
    "info": 0x3498DB,
}

# Requester-facing texts
ALREADY_APPROVED_TEXT: Final[str] = "You already have permission to submit."
GREETING_TEXT: Final[str] = "Hi {mention}. Thank you for your interest in contributing to SponsorBlock!"
NEEDS_CONTENT_TEXT: Final[str] = (
    "You have no submissions on record. If your message doesn't contain a link to a video and timings you want to submit, "
    "make sure you post the information **into this thread**/**edit your message if you're on Matrix!**"
)
MEETS_MINIMUM_TEXT: Final[str] = "It looks like you already meet the minimum requirements for permission to submit."
WAIT_FOR_REVIEW_TEXT: Final[str] = (
    "All you need to do now is **wait for our review** and we will get back to you **as soon as possible!**"
)
APPROVED_TEXT: Final[str] = (
    "Your request has been **approved**! You can now submit segments. Thank you for contributing to SponsorBlock!"
)

ERROR_MESSAGES = {
    "review_thread_only": "This command can only be used inside a review thread.",
    "intake_channel_only": "This command can only be used in the request channel.",
    "invalid_public_id": "That is not a valid public user ID (64 lowercase hex characters).",
    "unpaired_thread": "This thread is not linked to a request thread.",
    "platform_unavailable": "Discord did not respond. Nothing was changed, please try again.",
    "unexpected": "Something went wrong running that command.",
}
