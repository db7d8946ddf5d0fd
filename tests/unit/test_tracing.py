"""Unit tests for TraceDispatcher and the built-in tracers.

Tests dispatcher fan-out, partial failure, registration and the logging
tracer's level mapping.
"""

from __future__ import annotations

import logging

from switchyard.models.trace import TraceEvent, TraceKind
from switchyard.tracing import Tracer
from switchyard.tracing.dispatcher import TraceDispatcher, get_trace_dispatcher
from switchyard.tracing.tracers import LoggingTracer, RecordingTracer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_event(kind: TraceKind = TraceKind.ENTRY, **overrides) -> TraceEvent:
    defaults = {
        "kind": kind,
        "node_id": "node-1",
        "correlation_id": "corr-1",
    }
    defaults.update(overrides)
    return TraceEvent(**defaults)


class _FailingTracer:
    """A tracer that always raises."""

    @property
    def tracer_name(self) -> str:
        return "failing"

    def accept(self, event: TraceEvent) -> None:
        raise RuntimeError("Tracer failure for testing")


# ---------------------------------------------------------------------------
# Test: TraceDispatcher
# ---------------------------------------------------------------------------


class TestTraceDispatcher:
    """TraceDispatcher must fan out to all tracers, tolerating failures."""

    def test_emit_to_multiple_tracers(self):
        dispatcher = TraceDispatcher()
        first, second = RecordingTracer(), RecordingTracer()
        dispatcher.register_tracer(first)
        dispatcher.register_tracer(second)

        event = _make_event()
        succeeded = dispatcher.emit(event)

        assert succeeded == ["recording", "recording"]
        assert first.events == [event]
        assert second.events == [event]

    def test_emit_without_tracers_returns_empty(self):
        assert TraceDispatcher().emit(_make_event()) == []

    def test_failing_tracer_does_not_block_others(self, caplog):
        dispatcher = TraceDispatcher()
        good = RecordingTracer()
        dispatcher.register_tracer(_FailingTracer())
        dispatcher.register_tracer(good)

        with caplog.at_level(logging.ERROR, logger="switchyard.tracing.dispatcher"):
            succeeded = dispatcher.emit(_make_event())

        assert succeeded == ["recording"]
        assert len(good.events) == 1
        assert "failing" in caplog.text

    def test_disabled_dispatcher_skips_tracers(self):
        dispatcher = TraceDispatcher(enabled=False)
        tracer = RecordingTracer()
        dispatcher.register_tracer(tracer)

        assert dispatcher.emit(_make_event()) == []
        assert tracer.events == []

    def test_register_duplicate_ignored(self):
        dispatcher = TraceDispatcher()
        tracer = RecordingTracer()
        dispatcher.register_tracer(tracer)
        dispatcher.register_tracer(tracer)

        assert len(dispatcher.registered_tracers) == 1

    def test_unregister_tracer(self):
        dispatcher = TraceDispatcher()
        tracer = RecordingTracer()
        dispatcher.register_tracer(tracer)
        dispatcher.unregister_tracer(tracer)
        dispatcher.unregister_tracer(tracer)

        assert dispatcher.registered_tracers == []

    def test_process_wide_dispatcher_logs(self):
        dispatcher = get_trace_dispatcher()
        assert dispatcher is get_trace_dispatcher()
        assert any(
            isinstance(tracer, LoggingTracer) for tracer in dispatcher.registered_tracers
        )


# ---------------------------------------------------------------------------
# Test: built-in tracers
# ---------------------------------------------------------------------------


class TestTracers:
    def test_protocol_compliance(self):
        assert isinstance(LoggingTracer(), Tracer)
        assert isinstance(RecordingTracer(), Tracer)

    def test_logging_tracer_failure_is_warning(self, caplog):
        tracer = LoggingTracer()
        event = _make_event(TraceKind.FAILURE, detail={"cause": "RuntimeError('x')"})

        with caplog.at_level(logging.DEBUG, logger="switchyard.trace"):
            tracer.accept(event)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "corr-1" in record.getMessage()

    def test_logging_tracer_fanout_names_channel(self, caplog):
        tracer = LoggingTracer()
        event = _make_event(TraceKind.FANOUT, channel="audit", target_id="node-2")

        with caplog.at_level(logging.DEBUG, logger="switchyard.trace"):
            tracer.accept(event)

        message = caplog.records[-1].getMessage()
        assert "channel=audit" in message
        assert "node-2" in message

    def test_recording_tracer_filters_and_clears(self):
        tracer = RecordingTracer()
        tracer.accept(_make_event(TraceKind.ENTRY))
        tracer.accept(_make_event(TraceKind.FAILURE))

        assert [e.kind for e in tracer.of_kind(TraceKind.FAILURE)] == [TraceKind.FAILURE]
        tracer.clear()
        assert tracer.events == []
