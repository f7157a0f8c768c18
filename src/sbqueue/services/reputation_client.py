from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import aiohttp

from ..errors import LookupFailed
from ..review.models import Profile

log = logging.getLogger("sbqueue.reputation")

PROFILE_FIELDS = '["userName","segmentCount","ignoredSegmentCount","permissions"]'


class ReputationClient:
    """Read-only client for the userInfo endpoint of the reputation service.

    A single attempt is made per lookup; any failure surfaces as LookupFailed
    and the caller decides what to do with the submission.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def lookup(self, public_id: str) -> Profile:
        if self._session is None:
            await self.start()
        session = self._session
        if session is None:
            raise LookupFailed(public_id, "client is closed")

        params = {"publicUserID": public_id, "values": PROFILE_FIELDS}
        try:
            async with session.get(self.base_url, params=params, timeout=self.timeout) as resp:
                if resp.status != 200:
                    raise LookupFailed(public_id, f"status {resp.status}")
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LookupFailed(public_id, f"{type(e).__name__}: {e}") from e

        try:
            profile = Profile.from_payload(json.loads(body))
        except (ValueError, KeyError, TypeError) as e:
            raise LookupFailed(public_id, f"malformed body: {e}") from e

        log.debug("Looked up %s: %s", public_id, profile)
        return profile
