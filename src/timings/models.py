"""Timing record models and operation state tags."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .levels import LogLevel


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


class CompletionBehaviour(Enum):
    """What releasing an operation does when no terminal call was made."""

    COMPLETE = "complete"
    ABANDON = "abandon"
    SILENT = "silent"


class OperationProperty(str, Enum):
    """Property names attached to records by operations."""

    # The timing, in milliseconds.
    ELAPSED = "Elapsed"

    # Either "completed" or "abandoned".
    OUTCOME = "Outcome"

    # Unique id added to the scope for the lifetime of the operation.
    OPERATION_ID = "OperationId"


OUTCOME_COMPLETED = "completed"
OUTCOME_ABANDONED = "abandoned"


class LogEvent(BaseModel):
    """A record captured by `InMemoryLogSink`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    level: LogLevel
    message_template: str
    message: str
    args: tuple[Any, ...] = ()
    exception: BaseException | None = None

    # Placeholder name -> argument value, matched positionally.
    properties: dict[str, Any] = Field(default_factory=dict)

    # Scope frames held at the time of logging, outermost first.
    scopes: list[dict[str, Any]] = Field(default_factory=list)

    logged_at: datetime = Field(default_factory=utc_now)

    def scope_properties(self) -> dict[str, Any]:
        """Merge the captured scope frames; inner frames win on conflicts."""
        merged: dict[str, Any] = {}
        for frame in self.scopes:
            merged.update(frame)
        return merged
