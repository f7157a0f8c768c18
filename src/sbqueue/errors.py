from __future__ import annotations

from discord import app_commands


class QueueError(Exception):
    """Base class for request queue failures."""


class LookupFailed(QueueError):
    """The reputation service could not produce a profile."""

    def __init__(self, public_id: str, reason: str) -> None:
        super().__init__(f"lookup for {public_id} failed: {reason}")
        self.public_id = public_id
        self.reason = reason


class PlatformOperationFailed(QueueError):
    """An outbound Discord call failed or timed out."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {type(cause).__name__}: {cause}")
        self.operation = operation
        self.cause = cause


class ValidationFailed(QueueError):
    """Command input was malformed."""


class ContextRejected(app_commands.CheckFailure):
    """A command was used outside the channel or thread it belongs to."""
