from __future__ import annotations

import logging

import pytest

import timings
from timings import InMemoryLogSink, LogLevel, OperationProperty


def _outcome(ev) -> str:  # noqa: ANN001
    return ev.scope_properties()[OperationProperty.OUTCOME.value]


def test_time_then_release_records_information_completed() -> None:
    sink = InMemoryLogSink()
    timings.time(sink, "Test").release()

    (ev,) = sink.snapshot()
    assert ev.level == LogLevel.INFORMATION
    assert _outcome(ev) == "completed"


def test_begin_time_then_release_records_warning_abandoned() -> None:
    sink = InMemoryLogSink()
    timings.begin_time(sink, "Test").release()

    (ev,) = sink.snapshot()
    assert ev.level == LogLevel.WARNING
    assert _outcome(ev) == "abandoned"


def test_begin_time_complete_then_release_records_only_the_completion() -> None:
    sink = InMemoryLogSink()
    op = timings.begin_time(sink, "Test")
    op.complete()
    op.release()

    (ev,) = sink.snapshot()
    assert ev.level == LogLevel.INFORMATION
    assert _outcome(ev) == "completed"


def test_time_at_begin_time_then_release_records_critical_abandoned() -> None:
    sink = InMemoryLogSink()
    timings.time_at(sink, LogLevel.ERROR, LogLevel.CRITICAL).begin_time("Test").release()

    (ev,) = sink.snapshot()
    assert ev.level == LogLevel.CRITICAL
    assert _outcome(ev) == "abandoned"


def test_begin_time_cancel_complete_then_release_records_nothing() -> None:
    sink = InMemoryLogSink()
    op = timings.begin_time(sink, "Test")
    op.cancel()
    op.complete()
    op.release()

    assert sink.snapshot() == []


@pytest.mark.parametrize("entry_point", [timings.time, timings.begin_time])
def test_entry_points_require_sink_and_template(entry_point) -> None:  # noqa: ANN001
    sink = InMemoryLogSink()
    with pytest.raises(ValueError):
        entry_point(None, "Test")
    with pytest.raises(ValueError):
        entry_point(sink, None)
    assert len(sink.scopes) == 0


def test_entry_points_reject_objects_that_are_not_sinks() -> None:
    with pytest.raises(TypeError):
        timings.time(object(), "Test")  # type: ignore[arg-type]


def test_stdlib_logger_is_accepted_as_a_sink(caplog: pytest.LogCaptureFixture) -> None:
    log = logging.getLogger("timings.tests.extensions")
    caplog.set_level(logging.INFO, logger=log.name)

    with timings.time(log, "Adding {Count} successive integers", 10):
        pass

    (record,) = [r for r in caplog.records if r.name == log.name]
    assert record.levelno == logging.INFO
    assert record.getMessage().startswith("Adding 10 successive integers completed in ")
    assert record.template_properties["Count"] == 10
    assert record.scope_properties[OperationProperty.OUTCOME.value] == "completed"
    assert OperationProperty.OPERATION_ID.value in record.scope_properties


def test_time_at_with_disabled_stdlib_levels_returns_cached_result(caplog: pytest.LogCaptureFixture) -> None:
    log = logging.getLogger("timings.tests.extensions.quiet")
    log.setLevel(logging.WARNING)
    try:
        caplog.set_level(logging.DEBUG, logger="timings.extensions")
        launcher = timings.time_at(log, LogLevel.DEBUG)
    finally:
        log.setLevel(logging.NOTSET)

    assert launcher is timings.LevelledOperation.NONE
    assert any("no-op launcher" in r.getMessage() for r in caplog.records)
