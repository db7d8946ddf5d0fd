"""Tracer protocol for Switchyard diagnostics.

All tracers implement the ``Tracer`` protocol: a ``tracer_name`` property
and an ``accept(event)`` method.  The ``TraceDispatcher`` calls ``accept``
on every registered tracer for every trace point the engine emits.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from switchyard.models.trace import TraceEvent


@runtime_checkable
class Tracer(Protocol):
    """Protocol that every trace receiver must implement.

    Attributes
    ----------
    tracer_name : str
        A human-readable identifier for this tracer instance.
    """

    @property
    def tracer_name(self) -> str:
        """Return the name of this tracer."""
        ...

    def accept(self, event: TraceEvent) -> None:
        """Accept one trace event.

        Tracers may raise; the dispatcher logs the failure and continues
        with the remaining tracers.  A tracer never interrupts a traversal.
        """
        ...
