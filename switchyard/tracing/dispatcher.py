"""TraceDispatcher — fans trace events out to every registered tracer.

A failure in one tracer is logged and does not block the others, nor the
traversal that emitted the event.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from switchyard.models.trace import TraceEvent

if TYPE_CHECKING:
    from switchyard.tracing import Tracer

logger = logging.getLogger(__name__)


class TraceDispatcher:
    """Routes trace events to all registered tracers.

    Usage
    -----
    >>> dispatcher = TraceDispatcher()
    >>> dispatcher.register_tracer(LoggingTracer())
    >>> dispatcher.emit(event)
    """

    def __init__(self, enabled: bool = True) -> None:
        self._tracers: list[Tracer] = []
        self.enabled = enabled

    # ------------------------------------------------------------------
    # Tracer management
    # ------------------------------------------------------------------

    def register_tracer(self, tracer: Tracer) -> None:
        """Register a tracer.  Registering the same instance twice is a no-op."""
        if tracer not in self._tracers:
            self._tracers.append(tracer)
            logger.debug("Registered tracer: %s", tracer.tracer_name)

    def unregister_tracer(self, tracer: Tracer) -> None:
        """Remove a previously registered tracer."""
        try:
            self._tracers.remove(tracer)
            logger.debug("Unregistered tracer: %s", tracer.tracer_name)
        except ValueError:
            pass

    @property
    def registered_tracers(self) -> list[Tracer]:
        """Return a copy of the registered tracer list."""
        return list(self._tracers)

    # ------------------------------------------------------------------
    # Emit
    # ------------------------------------------------------------------

    def emit(self, event: TraceEvent) -> list[str]:
        """Deliver *event* to every registered tracer.

        Returns the names of the tracers that accepted the event.
        """
        if not self.enabled or not self._tracers:
            return []

        succeeded: list[str] = []
        for tracer in self._tracers:
            try:
                tracer.accept(event)
                succeeded.append(tracer.tracer_name)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Tracer %s failed for %s event of message %s: %s",
                    tracer.tracer_name,
                    event.kind.value,
                    event.correlation_id,
                    exc,
                )
        return succeeded


_default_dispatcher: TraceDispatcher | None = None


def get_trace_dispatcher() -> TraceDispatcher:
    """Return the process-wide dispatcher, building it from settings on first use."""
    global _default_dispatcher
    if _default_dispatcher is None:
        from switchyard.config import settings
        from switchyard.tracing.tracers import LoggingTracer

        _default_dispatcher = TraceDispatcher(enabled=settings.trace_enabled)
        _default_dispatcher.register_tracer(LoggingTracer())
    return _default_dispatcher
