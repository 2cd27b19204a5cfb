"""Entry points for timing operations against a sink.

Each function accepts any `LogSink` or a standard library `logging.Logger`,
which is wrapped in a `StdlibLogSink`.

Message arguments are stored and only rendered when the operation is written,
so do not pass values that are mutated while the operation runs.
"""

from __future__ import annotations

import logging
from typing import Any

from .levelled import LevelledOperation
from .levels import LogLevel
from .models import CompletionBehaviour
from .operation import Operation
from .sinks import LogSink, as_sink

logger = logging.getLogger(__name__)


def time(sink: LogSink | logging.Logger, message_template: str, *args: Any) -> Operation:
    """Begin an operation that is completed by releasing it.

    Use as a context manager:

        with timings.time(sink, "Loading {Count} rows", count):
            ...
    """
    return Operation(
        as_sink(sink), message_template, args, CompletionBehaviour.COMPLETE, LogLevel.INFORMATION, LogLevel.WARNING
    )


def begin_time(sink: LogSink | logging.Logger, message_template: str, *args: Any) -> Operation:
    """Begin an operation that must be completed with `Operation.complete`.

    Releasing it without an explicit completion records abandonment.
    """
    return Operation(
        as_sink(sink), message_template, args, CompletionBehaviour.ABANDON, LogLevel.INFORMATION, LogLevel.WARNING
    )


def time_at(
    sink: LogSink | logging.Logger,
    completion: LogLevel,
    abandonment: LogLevel | None = None,
) -> LevelledOperation:
    """Configure the levels used for completion and abandonment events.

    `abandonment` defaults to `completion`. If neither level is enabled on the
    sink at the time of the call, the shared no-op launcher is returned.
    """
    target = as_sink(sink)
    completion = LogLevel.parse(completion)
    applied_abandonment = LogLevel.parse(abandonment) if abandonment is not None else completion

    if not target.is_level_enabled(completion) and (
        applied_abandonment == completion or not target.is_level_enabled(applied_abandonment)
    ):
        logger.debug(
            "Timing levels %s/%s disabled; using no-op launcher", completion.name, applied_abandonment.name
        )
        return LevelledOperation.NONE

    return LevelledOperation(target, completion, applied_abandonment)
