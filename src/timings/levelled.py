"""Launch operations with non-default completion and abandonment levels."""

from __future__ import annotations

from typing import Any, ClassVar

from .levels import LogLevel
from .models import CompletionBehaviour
from .operation import Operation
from .sinks import NULL_SINK, LogSink


class LevelledOperation:
    """Starts `Operation`s at configured levels.

    When level gating has suppressed both levels, every call returns the same
    shared, silent operation instead of allocating a new one.
    """

    NONE: ClassVar[LevelledOperation]

    def __init__(
        self,
        sink: LogSink | None,
        completion: LogLevel,
        abandonment: LogLevel,
        *,
        cached_result: Operation | None = None,
    ) -> None:
        if cached_result is None and sink is None:
            raise ValueError("sink is required.")
        self._sink = sink
        self._completion = completion
        self._abandonment = abandonment
        self._cached_result = cached_result

    @property
    def is_enabled(self) -> bool:
        """False for the shared no-op launcher."""
        return self._cached_result is None

    def begin_time(self, message_template: str, *args: Any) -> Operation:
        """Begin an operation that must be completed with `Operation.complete`.

        Releasing it without completion records abandonment.
        """
        if self._cached_result is not None:
            return self._cached_result
        return Operation(
            self._sink, message_template, args, CompletionBehaviour.ABANDON, self._completion, self._abandonment
        )

    def time(self, message_template: str, *args: Any) -> Operation:
        """Begin an operation that is completed by releasing it."""
        if self._cached_result is not None:
            return self._cached_result
        return Operation(
            self._sink, message_template, args, CompletionBehaviour.COMPLETE, self._completion, self._abandonment
        )


LevelledOperation.NONE = LevelledOperation(
    None,
    LogLevel.CRITICAL,
    LogLevel.CRITICAL,
    cached_result=Operation(NULL_SINK, "", (), CompletionBehaviour.SILENT, LogLevel.CRITICAL, LogLevel.CRITICAL),
)
