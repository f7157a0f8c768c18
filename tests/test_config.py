import pytest

from sbqueue.config import load_settings

_VARS = (
    "SB_QUEUE_TOKEN",
    "GUILD_ID",
    "SYNC_GUILD_ID",
    "INTAKE_CHANNEL_ID",
    "AUDIT_CHANNEL_ID",
    "REVIEW_CHANNEL_NEEDS_CONTENT_ID",
    "REVIEW_CHANNEL_MEETS_MINIMUM_ID",
    "APPROVALS_CHANNEL_ID",
    "REVIEWER_ROLE_NEEDS_CONTENT_ID",
    "REVIEWER_ROLE_MEETS_MINIMUM_ID",
    "STARTING_MESSAGE_ID",
    "REPUTATION_URL",
    "PROFILE_URL",
    "LOOKUP_TIMEOUT_SECONDS",
    "PLATFORM_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture
def env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SB_QUEUE_TOKEN", "secret")
    monkeypatch.setenv("REVIEW_CHANNEL_NEEDS_CONTENT_ID", "301")
    monkeypatch.setenv("REVIEW_CHANNEL_MEETS_MINIMUM_ID", "302")
    monkeypatch.setenv("APPROVALS_CHANNEL_ID", "303")
    monkeypatch.setenv("REVIEWER_ROLE_NEEDS_CONTENT_ID", "401")
    monkeypatch.setenv("REVIEWER_ROLE_MEETS_MINIMUM_ID", "402")
    return monkeypatch


def test_defaults(env):
    settings = load_settings()

    assert settings.token == "secret"
    assert settings.guild_id == 1005818127474491405
    assert settings.intake_channel_id == 1005818150664806480
    assert settings.audit_channel_id == 1005863396874399864
    assert settings.starting_message_id == 1005225604066574458
    assert settings.sync_guild_id == 0
    assert settings.lookup_timeout_seconds == 10.0
    assert settings.review_channel_ids == frozenset({301, 302})


def test_overrides_and_bad_numbers(env):
    env.setenv("INTAKE_CHANNEL_ID", "12345")
    env.setenv("PLATFORM_TIMEOUT_SECONDS", "2.5")
    env.setenv("STARTING_MESSAGE_ID", "not-a-number")
    env.setenv("PROFILE_URL", "  ")

    settings = load_settings()

    assert settings.intake_channel_id == 12345
    assert settings.platform_timeout_seconds == 2.5
    assert settings.starting_message_id == 1005225604066574458
    assert settings.profile_url == "https://sb.ltn.fi/userid/"


def test_missing_token(env):
    env.delenv("SB_QUEUE_TOKEN")
    with pytest.raises(RuntimeError, match="SB_QUEUE_TOKEN"):
        load_settings()


def test_missing_required_ids_are_listed(env):
    env.delenv("APPROVALS_CHANNEL_ID")
    env.setenv("REVIEWER_ROLE_MEETS_MINIMUM_ID", "abc")
    with pytest.raises(RuntimeError) as info:
        load_settings()
    assert "APPROVALS_CHANNEL_ID" in str(info.value)
    assert "REVIEWER_ROLE_MEETS_MINIMUM_ID" in str(info.value)
    assert "REVIEW_CHANNEL_NEEDS_CONTENT_ID" not in str(info.value)


def test_jump_url(env):
    settings = load_settings()
    assert settings.jump_url(10, 20) == "https://discord.com/channels/1005818127474491405/10/20"
