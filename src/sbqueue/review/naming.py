from __future__ import annotations

from typing import Optional

from .extractor import is_public_id
from .models import ThreadPair


def review_thread_name(requester_thread_id: int, public_id: str) -> str:
    return f"{requester_thread_id}-{public_id}"


def parse_review_thread_name(name: Optional[str], review_thread_id: Optional[int] = None) -> Optional[ThreadPair]:
    """Recover the thread pair encoded in a review thread name.

    Returns None for names that were not produced by ``review_thread_name``.
    """
    if not name:
        return None
    head, sep, public_id = name.partition("-")
    if not sep or not (head.isascii() and head.isdigit()) or not is_public_id(public_id):
        return None
    return ThreadPair(requester_thread_id=int(head), public_id=public_id, review_thread_id=review_thread_id)
