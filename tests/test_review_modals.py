import pytest

from sbqueue.constants import APPROVED_TEXT, ERROR_MESSAGES, PUBLIC_ID_LENGTH, SUCCESS_EMOJI
from sbqueue.review.models import ApproveCommand, FastTrackCommand, RelayCommand
from sbqueue.testing.fakes import FakeInteraction, FakeUser
from sbqueue.ui.review_modals import ApproveModal, FastTrackModal, RelayModal

from tests.conftest import APPROVALS, INTAKE, PUBLIC_ID, REVIEW_MEETS_MINIMUM


@pytest.fixture
async def review_thread(bot, lifecycle, post_request):
    message = post_request()
    await lifecycle.handle_submission(message)
    [anchor] = bot.channels[REVIEW_MEETS_MINIMUM].sent
    return anchor.thread


async def test_approve_modal_finalizes_and_confirms(bot, lifecycle, review_thread):
    interaction = FakeInteraction(bot, review_thread, FakeUser(name="reviewer"))
    modal = ApproveModal(lifecycle)
    modal.decode = lambda: ApproveCommand(comment="Looks good")

    await modal.on_submit(interaction)

    assert interaction.response.deferred
    [sent] = interaction.followup.get_messages()
    assert sent["ephemeral"] is True
    assert sent["embed"].title == "Success"
    assert review_thread.archived is True
    assert len(bot.channels[APPROVALS].sent) == 1


async def test_approve_modal_reports_failed_steps(bot, lifecycle, review_thread):
    bot.channels[APPROVALS].fail.add("send")
    interaction = FakeInteraction(bot, review_thread)
    modal = ApproveModal(lifecycle)
    modal.decode = lambda: ApproveCommand(comment=None)

    await modal.on_submit(interaction)

    [sent] = interaction.followup.get_messages()
    assert sent["embed"].title == "Error"
    assert "approval_record" in sent["embed"].description


async def test_relay_modal_rejects_blank_text(bot, lifecycle, review_thread):
    interaction = FakeInteraction(bot, review_thread)
    modal = RelayModal(lifecycle)
    modal.decode = lambda: RelayCommand(text="")

    await modal.on_submit(interaction)

    [sent] = interaction.followup.get_messages()
    assert sent["embed"].description == "The message can't be empty."


async def test_relay_modal_posts_comment(bot, lifecycle, review_thread):
    reviewer = FakeUser(name="reviewer")
    interaction = FakeInteraction(bot, review_thread, reviewer)
    modal = RelayModal(lifecycle)
    modal.decode = lambda: RelayCommand(text="Could you add a bit more detail?")

    await modal.on_submit(interaction)

    requester_thread = bot.channels[INTAKE].messages[int(review_thread.name.partition("-")[0])].thread
    last = requester_thread.sent[-1]
    assert "Could you add a bit more detail?" in last.content
    assert reviewer.mention in last.content
    assert APPROVED_TEXT not in [m.content for m in requester_thread.sent]


async def test_modal_outside_review_thread_answers_with_validation_error(bot, lifecycle):
    interaction = FakeInteraction(bot, bot.channels[INTAKE])
    modal = ApproveModal(lifecycle)
    modal.decode = lambda: ApproveCommand(comment=None)

    await modal.on_submit(interaction)

    [sent] = interaction.followup.get_messages()
    assert sent["embed"].title == "Error"
    assert bot.channels[APPROVALS].sent == []


async def test_fast_track_modal_is_prefilled(lifecycle, post_request):
    modal = FastTrackModal(lifecycle, post_request(), PUBLIC_ID)

    assert modal.public_id.default == PUBLIC_ID
    assert modal.public_id.required is True
    assert modal.public_id.min_length == PUBLIC_ID_LENGTH
    assert modal.public_id.max_length == PUBLIC_ID_LENGTH


async def test_fast_track_modal_approves_target_message(bot, lifecycle, post_request):
    message = post_request("no id in here")
    interaction = FakeInteraction(bot, bot.channels[INTAKE])
    modal = FastTrackModal(lifecycle, message)
    modal.decode = lambda: FastTrackCommand(public_id=PUBLIC_ID)

    await modal.on_submit(interaction)

    assert message.reactions == [SUCCESS_EMOJI]
    [record] = bot.channels[APPROVALS].sent
    assert PUBLIC_ID in record.content
    [sent] = interaction.followup.get_messages()
    assert sent["embed"].title == "Success"


async def test_fast_track_modal_rejects_malformed_id(bot, lifecycle, post_request):
    message = post_request()
    interaction = FakeInteraction(bot, bot.channels[INTAKE])
    modal = FastTrackModal(lifecycle, message)
    modal.decode = lambda: FastTrackCommand(public_id=PUBLIC_ID.upper())

    await modal.on_submit(interaction)

    assert message.reactions == []
    assert bot.channels[APPROVALS].sent == []
    [sent] = interaction.followup.get_messages()
    assert sent["embed"].title == "Error"


async def test_discord_outage_is_not_reported_as_unpaired(bot, lifecycle, review_thread):
    bot.fail.add("fetch_channel")
    interaction = FakeInteraction(bot, review_thread)
    modal = ApproveModal(lifecycle)
    modal.decode = lambda: ApproveCommand(comment=None)

    await modal.on_submit(interaction)

    [sent] = interaction.followup.get_messages()
    assert sent["embed"].description == ERROR_MESSAGES["platform_unavailable"]
    assert review_thread.archived is False
