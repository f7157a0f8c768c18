from __future__ import annotations

import pytest

from sbqueue.config import Settings
from sbqueue.errors import LookupFailed
from sbqueue.review.lifecycle import ReviewLifecycle
from sbqueue.review.models import Profile
from sbqueue.testing.fakes import FakeBot, FakeMessage, FakeUser

PUBLIC_ID = "a" * 32 + "0123456789abcdef" * 2

INTAKE = 100
AUDIT = 200
REVIEW_NEEDS_CONTENT = 300
REVIEW_MEETS_MINIMUM = 400
APPROVALS = 500
ROLE_NEEDS_CONTENT = 600
ROLE_MEETS_MINIMUM = 700


class StubReputation:
    def __init__(self, profile: Profile | None = None, error: Exception | None = None) -> None:
        self.profile = profile
        self.error = error
        self.calls: list[str] = []

    async def lookup(self, public_id: str) -> Profile:
        self.calls.append(public_id)
        if self.error is not None:
            raise self.error
        assert self.profile is not None
        return self.profile


@pytest.fixture
def settings() -> Settings:
    return Settings(
        token="token",
        guild_id=1,
        sync_guild_id=0,
        intake_channel_id=INTAKE,
        audit_channel_id=AUDIT,
        review_channel_needs_content_id=REVIEW_NEEDS_CONTENT,
        review_channel_meets_minimum_id=REVIEW_MEETS_MINIMUM,
        approvals_channel_id=APPROVALS,
        reviewer_role_needs_content_id=ROLE_NEEDS_CONTENT,
        reviewer_role_meets_minimum_id=ROLE_MEETS_MINIMUM,
        starting_message_id=1005225604066574458,
        platform_timeout_seconds=1.0,
    )


@pytest.fixture
def bot(settings) -> FakeBot:
    fake = FakeBot(settings)
    fake.text_channel(INTAKE, "requests")
    fake.text_channel(AUDIT, "request-logs")
    fake.text_channel(REVIEW_NEEDS_CONTENT, "review-needs-content")
    fake.text_channel(REVIEW_MEETS_MINIMUM, "review-meets-minimum")
    fake.text_channel(APPROVALS, "approvals")
    return fake


@pytest.fixture
def meets_minimum_profile() -> Profile:
    return Profile(username="alice", submission_count=5, ignored_submission_count=2, has_permission=False)


@pytest.fixture
def reputation(meets_minimum_profile) -> StubReputation:
    return StubReputation(profile=meets_minimum_profile)


@pytest.fixture
def lifecycle(bot, settings, reputation) -> ReviewLifecycle:
    return ReviewLifecycle(bot, settings, reputation)  # type: ignore[arg-type]


@pytest.fixture
def requester() -> FakeUser:
    return FakeUser(name="requester")


@pytest.fixture
def post_request(bot, requester):
    """Post a message into the intake channel and return it."""

    def _post(content: str = f"please approve {PUBLIC_ID} thanks", **kwargs) -> FakeMessage:
        intake = bot.channels[INTAKE]
        return intake.add_message(FakeMessage(content=content, author=kwargs.pop("author", requester), **kwargs))

    return _post
