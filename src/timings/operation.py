"""Timed operations.

An `Operation` measures one unit of work and, when the work concludes, writes
exactly one record carrying the elapsed time and an outcome tag. While the
operation is open its `OperationId` is held in the sink's scope, so every
record written during the work can be correlated with the timing.

Instances are meant for a single thread of control. Create them through
`timings.time`, `timings.begin_time` or `timings.time_at`.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import timedelta
from types import TracebackType
from typing import TYPE_CHECKING, Any

import pydantic_core

from .levels import LogLevel
from .models import OUTCOME_ABANDONED, OUTCOME_COMPLETED, CompletionBehaviour, OperationProperty
from .scopes import ScopeHandle
from .sinks import LogSink
from .stopwatch import Stopwatch

if TYPE_CHECKING:
    from .levelled import LevelledOperation

_OUTCOME_SUFFIX = f" {{{OperationProperty.OUTCOME.value}}} in {{{OperationProperty.ELAPSED.value}:.1f}} ms"


class OperationStateError(RuntimeError):
    """Raised when an operation reaches a completion behaviour it does not know."""


class Operation:
    """Records the timing of one unit of work to a `LogSink`."""

    def __init__(
        self,
        sink: LogSink,
        message_template: str,
        args: Sequence[Any],
        completion_behaviour: CompletionBehaviour,
        completion_level: LogLevel,
        abandonment_level: LogLevel,
    ) -> None:
        if sink is None:
            raise ValueError("sink is required.")
        if message_template is None:
            raise ValueError("message_template is required.")
        if args is None:
            raise ValueError("args is required.")

        self._sink = sink
        self._message_template = message_template
        self._args = tuple(args)
        self._completion_behaviour = completion_behaviour
        self._completion_level = completion_level
        self._abandonment_level = abandonment_level
        self._exception: BaseException | None = None
        self._stopwatch = Stopwatch()
        self._operation_id: uuid.UUID | None = None
        self._scope: ScopeHandle | None = None

        # An operation born silent never writes, so it needs no clock and no scope.
        if completion_behaviour is CompletionBehaviour.SILENT:
            return

        self._operation_id = uuid.uuid4()
        self._stopwatch.start()
        self._scope = sink.begin_scope({OperationProperty.OPERATION_ID.value: self._operation_id})

    @property
    def elapsed(self) -> timedelta:
        """Time since the operation began; frozen once it is completed or canceled."""
        return self._stopwatch.elapsed

    @property
    def operation_id(self) -> uuid.UUID | None:
        """The id held in scope while the operation is open, otherwise `None`."""
        return self._operation_id

    @property
    def completion_behaviour(self) -> CompletionBehaviour:
        return self._completion_behaviour

    def begin_time(self, message_template: str, *args: Any) -> Operation:
        """Begin another operation through the same sink. See `timings.begin_time`."""
        from .extensions import begin_time

        return begin_time(self._sink, message_template, *args)

    def time(self, message_template: str, *args: Any) -> Operation:
        """Time another operation through the same sink. See `timings.time`."""
        from .extensions import time

        return time(self._sink, message_template, *args)

    def time_at(self, completion: LogLevel, abandonment: LogLevel | None = None) -> LevelledOperation:
        """Launch operations at custom levels through the same sink. See `timings.time_at`."""
        from .extensions import time_at

        return time_at(self._sink, completion, abandonment)

    def complete(self, result_property_name: str | None = None, result: Any = None, serialize: bool = False) -> None:
        """Complete the operation, writing the event and elapsed time.

        Args:
            result_property_name: Optional name of a result property to attach
                to the event. When given, `result` is required.
            result: The result value.
            serialize: If true, the result is serialized to JSON before it is
                attached. Serialization errors propagate.
        """
        with_result = _check_result(result_property_name, result, serialize)

        self._stopwatch.stop()

        if self._completion_behaviour is CompletionBehaviour.SILENT:
            return

        if with_result:
            self._write_with_result(self._completion_level, OUTCOME_COMPLETED, result_property_name, result, serialize)
        else:
            self._write(self._completion_level, OUTCOME_COMPLETED)

    def abandon(self, result_property_name: str | None = None, result: Any = None, serialize: bool = False) -> None:
        """Abandon the operation, writing the event and elapsed time.

        Takes the same arguments as `complete`.
        """
        with_result = _check_result(result_property_name, result, serialize)

        if self._completion_behaviour is CompletionBehaviour.SILENT:
            return

        if with_result:
            self._write_with_result(self._abandonment_level, OUTCOME_ABANDONED, result_property_name, result, serialize)
        else:
            self._write(self._abandonment_level, OUTCOME_ABANDONED)

    def cancel(self) -> None:
        """Cancel the operation. Nothing is recorded afterwards, through any path."""
        self._stopwatch.stop()
        self._completion_behaviour = CompletionBehaviour.SILENT
        self._pop_log_context()

    def release(self) -> None:
        """Conclude the operation if no terminal call has been made.

        Operations started with `time` are recorded as completed; those started
        with `begin_time` as abandoned. Safe to call more than once.
        """
        behaviour = self._completion_behaviour
        if behaviour is CompletionBehaviour.SILENT:
            pass
        elif behaviour is CompletionBehaviour.ABANDON:
            self._write(self._abandonment_level, OUTCOME_ABANDONED)
        elif behaviour is CompletionBehaviour.COMPLETE:
            self._write(self._completion_level, OUTCOME_COMPLETED)
        else:
            raise OperationStateError(f"Unknown completion behaviour: {behaviour!r}")

        self._pop_log_context()

    def set_exception(self, exception: BaseException) -> Operation:
        """Attach an exception to the event that will be written. Returns self."""
        if self._completion_behaviour is not CompletionBehaviour.SILENT:
            self._exception = exception
        return self

    def __enter__(self) -> Operation:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None and self._exception is None:
            self.set_exception(exc)
        self.release()

    def _pop_log_context(self) -> None:
        if self._scope is None:
            return
        scope, self._scope = self._scope, None
        self._operation_id = None
        scope.release()

    def _write_with_result(
        self, level: LogLevel, outcome: str, result_property_name: str, result: Any, serialize: bool
    ) -> None:
        if serialize:
            result = pydantic_core.to_json(result).decode()

        scope = self._sink.begin_scope({result_property_name: result})
        try:
            self._write(level, outcome)
        finally:
            scope.release()

    def _write(self, level: LogLevel, outcome: str) -> None:
        self._stopwatch.stop()
        elapsed = self._stopwatch.elapsed_ms

        scope = self._sink.begin_scope(
            {
                OperationProperty.OUTCOME.value: outcome,
                OperationProperty.ELAPSED.value: elapsed,
            }
        )
        try:
            self._sink.log(
                level,
                self._exception,
                self._message_template + _OUTCOME_SUFFIX,
                (*self._args, outcome, elapsed),
            )
        finally:
            scope.release()
            self._completion_behaviour = CompletionBehaviour.SILENT
            self._pop_log_context()


def _check_result(result_property_name: str | None, result: Any, serialize: bool) -> bool:
    """Validate the optional result arguments; return whether a result was given."""
    if result_property_name is None and result is None:
        if serialize:
            raise ValueError("serialize requires result_property_name and result.")
        return False
    if not result_property_name:
        raise ValueError("result_property_name is required when a result is given.")
    if result is None:
        raise ValueError(f"result is required for property {result_property_name!r}.")
    return True
