"""Built-in tracers: one writes to ``logging``, one buffers in memory."""

from __future__ import annotations

import logging

from switchyard.models.trace import TraceEvent, TraceKind

trace_logger = logging.getLogger("switchyard.trace")


class LoggingTracer:
    """Writes trace events to the ``switchyard.trace`` logger.

    Entry, deferral and fan-out events are logged at DEBUG; failures at
    WARNING so they surface with the default log level.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or trace_logger

    @property
    def tracer_name(self) -> str:
        return "logging"

    def accept(self, event: TraceEvent) -> None:
        if event.kind is TraceKind.FAILURE:
            self._logger.warning(
                "node=%s correlation_id=%s failed: %s",
                event.node_id,
                event.correlation_id,
                event.detail.get("cause"),
            )
        elif event.kind is TraceKind.FANOUT:
            self._logger.debug(
                "node=%s correlation_id=%s channel=%s -> %s",
                event.node_id,
                event.correlation_id,
                event.channel,
                event.target_id,
            )
        else:
            self._logger.debug(
                "node=%s correlation_id=%s %s",
                event.node_id,
                event.correlation_id,
                event.kind.value,
            )


class RecordingTracer:
    """Buffers trace events in memory for inspection."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    @property
    def tracer_name(self) -> str:
        return "recording"

    def accept(self, event: TraceEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: TraceKind) -> list[TraceEvent]:
        """Return the buffered events of one kind, in emission order."""
        return [event for event in self.events if event.kind is kind]

    def clear(self) -> None:
        self.events.clear()
