"""Timed operations for structured logging.

An operation measures a unit of work and writes one record, tagged
`completed` or `abandoned`, with the elapsed milliseconds:

    with timings.time(logger, "Adding {Count} successive integers", count):
        ...

    op = timings.begin_time(logger, "Importing {File}", path)
    ...
    op.complete()
"""

from .config import TimingsConfig, load_config
from .extensions import begin_time, time, time_at
from .levelled import LevelledOperation
from .levels import LogLevel
from .models import CompletionBehaviour, LogEvent, OperationProperty
from .operation import Operation, OperationStateError
from .scopes import DEFAULT_SCOPES, NULL_SCOPE, ContextScope, ScopeHandle, ScopeStack
from .sinks import (
    NULL_SINK,
    InMemoryLogSink,
    LogSink,
    NullLogSink,
    ScopeContextFilter,
    StdlibLogSink,
    as_sink,
    render_template,
)
from .stopwatch import Stopwatch

__all__ = [
    "DEFAULT_SCOPES",
    "NULL_SCOPE",
    "NULL_SINK",
    "CompletionBehaviour",
    "ContextScope",
    "InMemoryLogSink",
    "LevelledOperation",
    "LogEvent",
    "LogLevel",
    "LogSink",
    "NullLogSink",
    "Operation",
    "OperationProperty",
    "OperationStateError",
    "ScopeContextFilter",
    "ScopeHandle",
    "ScopeStack",
    "StdlibLogSink",
    "Stopwatch",
    "TimingsConfig",
    "as_sink",
    "begin_time",
    "load_config",
    "render_template",
    "time",
    "time_at",
]
