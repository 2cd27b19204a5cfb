"""Monotonic stopwatch."""

from __future__ import annotations

import time as _time
from datetime import timedelta


class Stopwatch:
    """Measures elapsed time with `time.perf_counter_ns`.

    `stop()` freezes the reading; calling it again keeps the first reading.
    """

    def __init__(self) -> None:
        self._started_ns: int | None = None
        self._stopped_ns: int | None = None

    def start(self) -> None:
        if self._started_ns is None:
            self._started_ns = _time.perf_counter_ns()

    def stop(self) -> None:
        if self.is_running:
            self._stopped_ns = _time.perf_counter_ns()

    @property
    def is_running(self) -> bool:
        return self._started_ns is not None and self._stopped_ns is None

    @property
    def elapsed_ns(self) -> int:
        if self._started_ns is None:
            return 0
        end = self._stopped_ns if self._stopped_ns is not None else _time.perf_counter_ns()
        return end - self._started_ns

    @property
    def elapsed(self) -> timedelta:
        return timedelta(microseconds=self.elapsed_ns / 1000)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in fractional milliseconds."""
        return self.elapsed_ns / 1_000_000
