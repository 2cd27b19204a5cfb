"""Scoped logging context.

A scope attaches key/value properties to every record logged while it is held.
Scopes nest: frames pushed later shadow earlier frames that use the same key.

The stack lives in a `ContextVar`, so each thread and each asyncio task sees its
own frames. Frames are removed by identity rather than by unwinding, which keeps
release correct even when handles are released out of order.
"""

from __future__ import annotations

import contextvars
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Protocol


class ScopeHandle(Protocol):
    """A held scope. `release()` must be safe to call more than once."""

    def release(self) -> None:
        """Detach the scope's properties."""


class _NullScope:
    """A scope that carries nothing."""

    def release(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""

    def __enter__(self) -> _NullScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


NULL_SCOPE = _NullScope()


class _Frame:
    """One pushed set of properties; compared by identity."""

    __slots__ = ("properties",)

    def __init__(self, properties: Mapping[str, Any]) -> None:
        self.properties = MappingProxyType(dict(properties))


class ScopeStack:
    """A context-local stack of property frames."""

    def __init__(self, name: str = "timings_scope") -> None:
        self._frames: contextvars.ContextVar[tuple[_Frame, ...]] = contextvars.ContextVar(name, default=())

    def push(self, properties: Mapping[str, Any]) -> ContextScope:
        """Push a frame and return the handle that removes it."""
        frame = _Frame(properties)
        self._frames.set(self._frames.get() + (frame,))
        return ContextScope(self, frame)

    def _remove(self, frame: _Frame) -> None:
        self._frames.set(tuple(f for f in self._frames.get() if f is not frame))

    def frames(self) -> list[Mapping[str, Any]]:
        """Return the held frames, outermost first."""
        return [f.properties for f in self._frames.get()]

    def current(self) -> dict[str, Any]:
        """Merge all held frames; inner frames win on key conflicts."""
        merged: dict[str, Any] = {}
        for frame in self._frames.get():
            merged.update(frame.properties)
        return merged

    def __len__(self) -> int:
        return len(self._frames.get())


class ContextScope:
    """Handle for a frame pushed onto a `ScopeStack`."""

    def __init__(self, stack: ScopeStack, frame: _Frame) -> None:
        self._stack = stack
        self._frame: _Frame | None = frame

    @property
    def properties(self) -> Mapping[str, Any]:
        """The properties this scope attaches (empty once released)."""
        if self._frame is None:
            return MappingProxyType({})
        return self._frame.properties

    @property
    def released(self) -> bool:
        return self._frame is None

    def release(self) -> None:
        """Remove the frame from its stack. Later calls do nothing."""
        if self._frame is None:
            return
        frame, self._frame = self._frame, None
        self._stack._remove(frame)

    def __enter__(self) -> ContextScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


# Shared by `StdlibLogSink` and `ScopeContextFilter`.
DEFAULT_SCOPES = ScopeStack()
