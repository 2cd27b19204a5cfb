"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into a typed Pydantic model.
- Validating level names and providing actionable error messages.
"""

from __future__ import annotations

import logging
import os

import dotenv
from pydantic import BaseModel, Field, field_validator

from .extensions import time_at
from .levelled import LevelledOperation
from .levels import LogLevel
from .sinks import LogSink


def _get_env_level(name: str) -> LogLevel | None:
    """Read an optional level env var."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return LogLevel.parse(raw)
    except ValueError as exc:
        raise ValueError(f"{name} is not a valid log level. {exc}") from exc


class TimingsConfig(BaseModel):
    """Levels used for configured timings."""

    completion_level: LogLevel = Field(default=LogLevel.INFORMATION, description="Level of completion events")
    abandonment_level: LogLevel = Field(default=LogLevel.WARNING, description="Level of abandonment events")

    @field_validator("completion_level", "abandonment_level", mode="before")
    def parse_level(cls, v: object) -> object:
        """Accept level names ("info", "Warning") as well as numbers."""
        if isinstance(v, (str, int)):
            return LogLevel.parse(v)
        return v

    def launcher(self, sink: LogSink | logging.Logger) -> LevelledOperation:
        """Return a launcher for `sink` at the configured levels."""
        return time_at(sink, self.completion_level, self.abandonment_level)


def load_config() -> TimingsConfig:
    """Load timing configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - `TIMINGS_ABANDONMENT_LEVEL` falls back to `TIMINGS_COMPLETION_LEVEL` when only
      the completion level is set, and to `warning` when neither is.
    """
    dotenv.load_dotenv()

    completion = _get_env_level("TIMINGS_COMPLETION_LEVEL")
    abandonment = _get_env_level("TIMINGS_ABANDONMENT_LEVEL")

    if completion is None:
        return TimingsConfig(abandonment_level=abandonment or LogLevel.WARNING)
    return TimingsConfig(completion_level=completion, abandonment_level=abandonment or completion)
