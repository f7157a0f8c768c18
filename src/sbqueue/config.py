from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


@dataclass(frozen=True)
class Settings:
    token: str
    guild_id: int
    # 0 syncs app commands globally
    sync_guild_id: int

    # Channels
    intake_channel_id: int
    audit_channel_id: int
    review_channel_needs_content_id: int
    review_channel_meets_minimum_id: int
    approvals_channel_id: int

    # Reviewer roles pinged inside new review threads
    reviewer_role_needs_content_id: int
    reviewer_role_meets_minimum_id: int

    # Messages at or before this snowflake predate the queue and are ignored.
    starting_message_id: int

    reputation_url: str = "https://sponsor.ajay.app/api/userInfo"
    profile_url: str = "https://sb.ltn.fi/userid/"
    lookup_timeout_seconds: float = 10.0
    platform_timeout_seconds: float = 15.0
    log_level: str = "INFO"

    @property
    def review_channel_ids(self) -> frozenset[int]:
        return frozenset({self.review_channel_needs_content_id, self.review_channel_meets_minimum_id})

    def jump_url(self, channel_id: int, message_id: int) -> str:
        return f"https://discord.com/channels/{self.guild_id}/{channel_id}/{message_id}"


_REQUIRED = (
    "REVIEW_CHANNEL_NEEDS_CONTENT_ID",
    "REVIEW_CHANNEL_MEETS_MINIMUM_ID",
    "APPROVALS_CHANNEL_ID",
    "REVIEWER_ROLE_NEEDS_CONTENT_ID",
    "REVIEWER_ROLE_MEETS_MINIMUM_ID",
)


def load_settings() -> Settings:
    token = os.getenv("SB_QUEUE_TOKEN", "").strip()
    if not token:
        raise RuntimeError("SB_QUEUE_TOKEN is required")

    missing = [name for name in _REQUIRED if _get_int(name, 0) == 0]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        token=token,
        guild_id=_get_int("GUILD_ID", 1005818127474491405),
        sync_guild_id=_get_int("SYNC_GUILD_ID", 0),
        intake_channel_id=_get_int("INTAKE_CHANNEL_ID", 1005818150664806480),
        audit_channel_id=_get_int("AUDIT_CHANNEL_ID", 1005863396874399864),
        review_channel_needs_content_id=_get_int("REVIEW_CHANNEL_NEEDS_CONTENT_ID", 0),
        review_channel_meets_minimum_id=_get_int("REVIEW_CHANNEL_MEETS_MINIMUM_ID", 0),
        approvals_channel_id=_get_int("APPROVALS_CHANNEL_ID", 0),
        reviewer_role_needs_content_id=_get_int("REVIEWER_ROLE_NEEDS_CONTENT_ID", 0),
        reviewer_role_meets_minimum_id=_get_int("REVIEWER_ROLE_MEETS_MINIMUM_ID", 0),
        starting_message_id=_get_int("STARTING_MESSAGE_ID", 1005225604066574458),
        reputation_url=_get_str("REPUTATION_URL", "https://sponsor.ajay.app/api/userInfo"),
        profile_url=_get_str("PROFILE_URL", "https://sb.ltn.fi/userid/"),
        lookup_timeout_seconds=_get_float("LOOKUP_TIMEOUT_SECONDS", 10.0),
        platform_timeout_seconds=_get_float("PLATFORM_TIMEOUT_SECONDS", 15.0),
        log_level=_get_str("LOG_LEVEL", "INFO"),
    )
