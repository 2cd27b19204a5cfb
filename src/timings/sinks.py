"""Logging sinks that operations write through.

A sink is the logging capability an operation depends on. It answers whether a
level is enabled, writes templated records, and opens nested property scopes.
Sinks must be safe for concurrent use by independently owned operations.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .levels import LogLevel
from .models import LogEvent
from .scopes import DEFAULT_SCOPES, NULL_SCOPE, ScopeHandle, ScopeStack

logging.addLevelName(LogLevel.TRACE, "TRACE")

_PLACEHOLDER = re.compile(r"\{\{|\}\}|\{([@$]?)(\w+)(?:,(-?\d+))?(?::([^{}]*))?\}")


@runtime_checkable
class LogSink(Protocol):
    """The logging capability consumed by `Operation`."""

    def is_level_enabled(self, level: LogLevel) -> bool:
        """Return whether a record at `level` would be written."""

    def log(self, level: LogLevel, exception: BaseException | None, template: str, args: Sequence[Any]) -> None:
        """Write one record. `args` bind positionally to the template's placeholders."""

    def begin_scope(self, properties: Mapping[str, Any]) -> ScopeHandle:
        """Attach `properties` to records written until the handle is released."""


def render_template(template: str, args: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """Render a message template and capture its named properties.

    Placeholders look like `{Name}`, optionally with a `@` or `$` capture
    prefix, a `,width` alignment (negative pads on the right) and a `:spec`
    Python format spec, e.g. `{@Order}` or `{Elapsed,8:.1f}`. Properties are
    captured under the bare name. Distinct names bind to `args` in order of
    first appearance; `{{` and `}}` are literal braces. Placeholders without an
    argument are left as written.
    """
    properties: dict[str, Any] = {}
    names: list[str] = []

    def _substitute(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        name, alignment, spec = match.group(2), match.group(3), match.group(4)
        if name not in properties:
            if len(names) >= len(args):
                return token
            names.append(name)
            properties[name] = args[len(names) - 1]
        value = properties[name]
        text = str(value)
        if spec:
            try:
                text = format(value, spec)
            except (TypeError, ValueError):
                pass
        if alignment:
            width = int(alignment)
            text = text.rjust(width) if width > 0 else text.ljust(-width)
        return text

    return _PLACEHOLDER.sub(_substitute, template), properties


class StdlibLogSink:
    """Adapts a standard library `logging.Logger` to the sink protocol.

    Template and scope properties travel on the `LogRecord` as
    `message_template`, `template_properties` and `scope_properties`.
    """

    def __init__(self, logger: logging.Logger, *, scopes: ScopeStack = DEFAULT_SCOPES) -> None:
        self._logger = logger
        self._scopes = scopes

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def is_level_enabled(self, level: LogLevel) -> bool:
        return self._logger.isEnabledFor(int(level))

    def log(self, level: LogLevel, exception: BaseException | None, template: str, args: Sequence[Any]) -> None:
        if not self._logger.isEnabledFor(int(level)):
            return
        message, properties = render_template(template, args)
        self._logger.log(
            int(level),
            message,
            exc_info=exception,
            extra={
                "message_template": template,
                "template_properties": properties,
                "scope_properties": self._scopes.current(),
            },
        )

    def begin_scope(self, properties: Mapping[str, Any]) -> ScopeHandle:
        return self._scopes.push(properties)


class InMemoryLogSink:
    """In-memory sink for tests and local debugging."""

    def __init__(self, *, minimum_level: LogLevel = LogLevel.TRACE, scopes: ScopeStack | None = None) -> None:
        """Create an empty sink that records events at or above `minimum_level`."""
        self._minimum_level = minimum_level
        self._scopes = scopes if scopes is not None else ScopeStack(f"in_memory_scope_{id(self)}")
        self._lock = threading.Lock()
        self._events: list[LogEvent] = []

    @property
    def scopes(self) -> ScopeStack:
        return self._scopes

    def is_level_enabled(self, level: LogLevel) -> bool:
        return level >= self._minimum_level

    def log(self, level: LogLevel, exception: BaseException | None, template: str, args: Sequence[Any]) -> None:
        """Append an event to the in-memory list (thread-safe)."""
        if not self.is_level_enabled(level):
            return
        message, properties = render_template(template, args)
        event = LogEvent(
            level=level,
            message_template=template,
            message=message,
            args=tuple(args),
            exception=exception,
            properties=properties,
            scopes=[dict(frame) for frame in self._scopes.frames()],
        )
        with self._lock:
            self._events.append(event)

    def begin_scope(self, properties: Mapping[str, Any]) -> ScopeHandle:
        return self._scopes.push(properties)

    def snapshot(self) -> Sequence[LogEvent]:
        """Return a point-in-time copy of all recorded events."""
        with self._lock:
            return list(self._events)


class NullLogSink:
    """A sink with every level disabled that writes nothing."""

    def is_level_enabled(self, level: LogLevel) -> bool:
        return False

    def log(self, level: LogLevel, exception: BaseException | None, template: str, args: Sequence[Any]) -> None:
        return None

    def begin_scope(self, properties: Mapping[str, Any]) -> ScopeHandle:
        return NULL_SCOPE


NULL_SINK = NullLogSink()


class ScopeContextFilter(logging.Filter):
    """Stamps the held scope properties onto records that do not carry them.

    Attach to a handler so ordinary `logger.info(...)` calls made inside an
    operation also carry its `OperationId`.
    """

    def __init__(self, name: str = "", *, scopes: ScopeStack = DEFAULT_SCOPES) -> None:
        super().__init__(name)
        self._scopes = scopes

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "scope_properties"):
            record.scope_properties = self._scopes.current()
        return True


def as_sink(target: LogSink | logging.Logger) -> LogSink:
    """Return `target` as a sink, wrapping standard library loggers."""
    if target is None:
        raise ValueError("sink is required.")
    if isinstance(target, logging.Logger):
        return StdlibLogSink(target)
    if isinstance(target, LogSink):
        return target
    raise TypeError(f"Expected a LogSink or logging.Logger, got {type(target).__name__}.")
