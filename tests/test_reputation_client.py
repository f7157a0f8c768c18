import asyncio
import json

import aiohttp
import pytest

from sbqueue.errors import LookupFailed
from sbqueue.services.reputation_client import PROFILE_FIELDS, ReputationClient

from tests.conftest import PUBLIC_ID

URL = "https://sponsor.example/api/userInfo"


class FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict] = []
        self.closed = False

    def get(self, url, *, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


def _body(**overrides) -> str:
    payload = {"userName": "alice", "segmentCount": 4, "ignoredSegmentCount": 1, "permissions": {"sponsor": False}}
    payload.update(overrides)
    return json.dumps(payload)


async def test_lookup_decodes_profile_and_sends_field_selection():
    session = FakeSession(FakeResponse(200, _body()))
    client = ReputationClient(URL, timeout_seconds=3, session=session)

    profile = await client.lookup(PUBLIC_ID)

    assert profile.username == "alice"
    assert profile.submission_count == 4
    assert profile.ignored_submission_count == 1
    assert profile.has_permission is False
    [request] = session.requests
    assert request["url"] == URL
    assert request["params"] == {"publicUserID": PUBLIC_ID, "values": PROFILE_FIELDS}
    assert request["timeout"].total == 3


@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
async def test_non_200_status_is_a_lookup_failure(status):
    client = ReputationClient(URL, session=FakeSession(FakeResponse(status, _body())))
    with pytest.raises(LookupFailed) as info:
        await client.lookup(PUBLIC_ID)
    assert info.value.public_id == PUBLIC_ID
    assert str(status) in info.value.reason


@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
async def test_transport_errors_are_lookup_failures(error):
    session = FakeSession(error=error)
    client = ReputationClient(URL, session=session)
    with pytest.raises(LookupFailed):
        await client.lookup(PUBLIC_ID)
    assert len(session.requests) == 1


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[]",
        json.dumps({"userName": "alice"}),
        json.dumps({"userName": "alice", "segmentCount": "4", "ignoredSegmentCount": 1, "permissions": {}}),
    ],
)
async def test_malformed_body_is_a_lookup_failure(body):
    client = ReputationClient(URL, session=FakeSession(FakeResponse(200, body)))
    with pytest.raises(LookupFailed) as info:
        await client.lookup(PUBLIC_ID)
    assert "malformed" in info.value.reason


async def test_injected_session_is_not_closed():
    session = FakeSession(FakeResponse(200, _body()))
    client = ReputationClient(URL, session=session)
    await client.close()
    assert session.closed is False
