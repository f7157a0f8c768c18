from __future__ import annotations

import re
from typing import Optional

PUBLIC_ID_RE = re.compile(r"\b[a-f0-9]{64}\b", re.ASCII)
_FULL_PUBLIC_ID_RE = re.compile(r"[a-f0-9]{64}", re.ASCII)


def find_public_id(text: Optional[str]) -> Optional[str]:
    """Return the first public user ID in ``text``, or None.

    Only the first match is used even if the text carries several IDs.
    """
    if not text:
        return None
    match = PUBLIC_ID_RE.search(text)
    return match.group(0) if match else None


def is_public_id(value: str) -> bool:
    return _FULL_PUBLIC_ID_RE.fullmatch(value) is not None
