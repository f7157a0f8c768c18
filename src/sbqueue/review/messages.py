from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import discord

from ..constants import COLORS, MAX_EMBED_DESCRIPTION, MAX_FIELD_VALUE, SUCCESS_EMOJI
from ..utils import truncate_text
from .models import ApprovalRecord, Profile


def audit_embed(
    *,
    public_id: str,
    profile: Profile,
    profile_url: str,
    avatar_url: Optional[str],
    excerpt: str,
    timestamp: Optional[datetime] = None,
) -> discord.Embed:
    """Embed describing a request, posted to the audit and review channels."""
    description = (
        f"**Username**: {profile.username}\n"
        f"**Segment Count**: {profile.submission_count}\n"
        f"**Ignored Segment Count**: {profile.ignored_submission_count}"
    )
    embed = discord.Embed(
        description=truncate_text(description, MAX_EMBED_DESCRIPTION),
        color=COLORS["info"],
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    embed.set_author(name=f"Request {public_id}", url=f"{profile_url}{public_id}", icon_url=avatar_url)
    if excerpt:
        embed.add_field(name="Message", value=truncate_text(excerpt, MAX_FIELD_VALUE), inline=False)
    return embed


class JumpView(discord.ui.View):
    """Single link button pointing back at the source message."""

    def __init__(self, url: str) -> None:
        super().__init__(timeout=None)
        self.add_item(discord.ui.Button(label="Jump to message", style=discord.ButtonStyle.link, url=url))


def comment_text(author_mention: str, comment: str) -> str:
    return f"**Reviewer comment from {author_mention}:**\n{comment}"


def approval_record_text(record: ApprovalRecord) -> str:
    return (
        f"{SUCCESS_EMOJI} `{record.public_id}` was approved by <@{record.approver_id}> "
        f"<t:{record.timestamp_unix}:f>"
    )
