from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class Track(Enum):
    """Review track a requester is routed to."""

    ALREADY_APPROVED = "already_approved"
    NEEDS_CONTENT = "needs_content"
    MEETS_MINIMUM = "meets_minimum"


class LifecycleState(Enum):
    OBSERVED = "observed"
    CLASSIFIED = "classified"
    CLOSED_PREAPPROVED = "closed_preapproved"
    ROUTED = "routed"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class Profile:
    """Reputation profile of a public user ID, as returned by the userInfo API."""

    username: str
    submission_count: int
    ignored_submission_count: int
    has_permission: bool

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Profile":
        """Decode the fixed userInfo shape.

        Raises KeyError, TypeError or ValueError when the payload does not match.
        """
        if not isinstance(payload, dict):
            raise TypeError(f"expected object, got {type(payload).__name__}")
        permissions = payload["permissions"]
        if not isinstance(permissions, dict):
            raise TypeError("permissions must be an object")
        sponsor = permissions.get("sponsor", False)
        if not isinstance(sponsor, bool):
            raise TypeError("permissions.sponsor must be a boolean")
        username = payload["userName"]
        return cls(
            username=str(username) if username is not None else "",
            submission_count=_count(payload, "segmentCount"),
            ignored_submission_count=_count(payload, "ignoredSegmentCount"),
            has_permission=sponsor,
        )


def _count(payload: dict[str, Any], key: str) -> int:
    value = payload[key]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class Submission:
    public_id: str
    requester_id: int
    channel_id: int
    message_id: int
    profile: Profile
    track: Track


@dataclass(frozen=True)
class ThreadPair:
    """Requester thread plus the public ID it was opened for.

    The requester thread shares its ID with the source message it was started
    from, so ``requester_thread_id`` also locates the original request.
    """

    requester_thread_id: int
    public_id: str
    review_thread_id: Optional[int] = None


@dataclass(frozen=True)
class ApprovalRecord:
    public_id: str
    approver_id: int
    timestamp_unix: int


@dataclass(frozen=True)
class StepOutcome:
    step: str
    ok: bool
    error: Optional[str] = None


@dataclass
class LifecycleResult:
    """Per-step outcome list of one orchestrator operation."""

    action: str
    state: LifecycleState
    public_id: Optional[str] = None
    track: Optional[Track] = None
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def failed_steps(self) -> list[str]:
        return [o.step for o in self.outcomes if not o.ok]

    def succeeded(self, step: str) -> bool:
        return any(o.step == step and o.ok for o in self.outcomes)

    def attempted(self, step: str) -> bool:
        return any(o.step == step for o in self.outcomes)


# Modal payloads, decoded once at the interaction boundary.

@dataclass(frozen=True)
class ApproveCommand:
    comment: Optional[str] = None


@dataclass(frozen=True)
class RelayCommand:
    text: str


@dataclass(frozen=True)
class FastTrackCommand:
    public_id: str


ReviewCommand = Union[ApproveCommand, RelayCommand, FastTrackCommand]
