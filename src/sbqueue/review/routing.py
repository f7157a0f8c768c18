from __future__ import annotations

from ..constants import (
    ALREADY_APPROVED_TEXT,
    GREETING_TEXT,
    MEETS_MINIMUM_TEXT,
    NEEDS_CONTENT_TEXT,
    WAIT_FOR_REVIEW_TEXT,
)
from .models import Profile, Track


def classify(profile: Profile) -> Track:
    """Pick the review track for a profile.

    Rules are evaluated in priority order; existing permission always wins.
    """
    if profile.has_permission:
        return Track.ALREADY_APPROVED
    if profile.submission_count == 0 or profile.submission_count == profile.ignored_submission_count:
        return Track.NEEDS_CONTENT
    return Track.MEETS_MINIMUM


def guidance_text(track: Track, mention: str) -> str:
    """Requester-facing body for a track."""
    if track is Track.ALREADY_APPROVED:
        return ALREADY_APPROVED_TEXT

    body = NEEDS_CONTENT_TEXT if track is Track.NEEDS_CONTENT else MEETS_MINIMUM_TEXT
    return "\n\n".join((GREETING_TEXT.format(mention=mention), body, WAIT_FOR_REVIEW_TEXT))
