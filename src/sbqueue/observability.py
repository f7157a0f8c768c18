from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .review.models import LifecycleResult

log = logging.getLogger("sbqueue.observability")


class LogLevel(Enum):
    """Structured log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ActionType(Enum):
    """Action types for structured logging."""
    SUBMISSION = "submission"
    APPROVAL = "approval"
    RELAY = "relay"
    FAST_TRACK = "fast_track"
    DEPARTURE = "departure"
    STARTUP = "startup"


@dataclass
class StructuredLogEntry:
    """Structured log entry with context."""
    timestamp: datetime
    level: LogLevel
    action: ActionType
    message: str
    details: dict[str, Any]
    user_id: int | None = None
    success: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["level"] = self.level.value
        data["action"] = self.action.value
        return data


_LOG_METHODS = {
    LogLevel.DEBUG: log.debug,
    LogLevel.INFO: log.info,
    LogLevel.WARNING: log.warning,
    LogLevel.ERROR: log.error,
}


def log_structured(
    level: LogLevel,
    action: ActionType,
    message: str,
    *,
    details: dict[str, Any] | None = None,
    user_id: int | None = None,
    success: bool | None = None,
) -> StructuredLogEntry:
    """Log a structured event."""
    entry = StructuredLogEntry(
        timestamp=datetime.now(timezone.utc),
        level=level,
        action=action,
        message=message,
        details=details or {},
        user_id=user_id,
        success=success,
    )
    _LOG_METHODS[level](
        "[%s] %s | %s",
        action.value,
        message,
        json.dumps(entry.to_dict(), separators=(",", ":"), default=str),
    )
    return entry


def log_lifecycle(action: ActionType, result: LifecycleResult, *, user_id: int | None = None) -> StructuredLogEntry:
    """Emit the per-step outcome list of an orchestrator operation."""
    ok = result.ok
    return log_structured(
        LogLevel.INFO if ok else LogLevel.WARNING,
        action,
        f"{action.value} {result.public_id or '-'} -> {result.state.value}"
        + ("" if ok else f" (failed: {', '.join(result.failed_steps)})"),
        details={
            "public_id": result.public_id,
            "state": result.state.value,
            "track": result.track.value if result.track else None,
            "steps": [{"step": o.step, "ok": o.ok, "error": o.error} for o in result.outcomes],
        },
        user_id=user_id,
        success=ok,
    )
