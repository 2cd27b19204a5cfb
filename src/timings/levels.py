"""Severity levels understood by timing sinks."""

from __future__ import annotations

import logging
from enum import IntEnum


class LogLevel(IntEnum):
    """Log severities, numerically aligned with the standard `logging` levels."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFORMATION = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, raw: str | int | LogLevel) -> LogLevel:
        """Parse a level from its name (case-insensitive, common aliases allowed) or number."""
        if isinstance(raw, LogLevel):
            return raw
        if raw is None:
            raise ValueError("A log level is required.")
        if isinstance(raw, int):
            return cls(raw)
        if not isinstance(raw, str):
            raise ValueError(f"Expected a log level name or number, got {type(raw).__name__}.")
        normalized = raw.strip().upper()
        aliases = {"INFO": "INFORMATION", "WARN": "WARNING", "FATAL": "CRITICAL", "VERBOSE": "TRACE"}
        normalized = aliases.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            names = ", ".join(level.name.lower() for level in cls)
            raise ValueError(f"Unknown log level {raw!r}. Expected one of: {names}.") from exc
