"""Processing node — the dispatch engine.

A ``Node`` holds one work capability, ``work(node, message)``, and a table
of named outbound channels.  Messages enter a node through ``send`` (run
now) or ``post`` (run on a later scheduler tick).  Work forwards the
message downstream with ``next``.

Failure capture is node-local: any exception raised by ``work`` is turned
into a ``FailureRecord`` and delivered exactly once to the node's failure
capability.  Nothing is re-raised to the caller of ``send`` / ``post``.
Nodes built without a failure capability escalate to the process-wide
handler (see ``set_default_failure_handler``).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from switchyard.config import settings
from switchyard.core.scheduler import Scheduler, get_default_scheduler
from switchyard.models.failure import FailureRecord
from switchyard.models.message import Message
from switchyard.models.trace import DEFAULT_CHANNEL, TraceEvent, TraceKind
from switchyard.tracing.dispatcher import TraceDispatcher, get_trace_dispatcher

logger = logging.getLogger(__name__)

FailureHandler = Callable[[FailureRecord], None]
Work = Callable[["Node", Message], None]

_MISSING: Any = object()


class ConfigurationError(ValueError):
    """Raised when a node or its wiring is invalid at assembly time."""


# ---------------------------------------------------------------------------
# Process-wide failure fallback
# ---------------------------------------------------------------------------


def log_failure(record: FailureRecord) -> None:
    """Default failure handler: log the failure with its traceback."""
    cause = record.cause
    logger.error(
        "Node %s failed processing message %s: %s",
        record.node.id,
        record.correlation_id,
        cause,
        exc_info=(type(cause), cause, cause.__traceback__),
    )


_default_failure_handler: FailureHandler = log_failure


def get_default_failure_handler() -> FailureHandler:
    """Return the handler used by nodes that have no failure capability."""
    return _default_failure_handler


def set_default_failure_handler(handler: FailureHandler | None) -> None:
    """Install a process-wide failure handler.  ``None`` restores logging."""
    global _default_failure_handler
    if handler is not None and not callable(handler):
        raise ConfigurationError("Default failure handler must be callable")
    _default_failure_handler = handler or log_failure


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


class Node:
    """A processing unit with one work capability and named channels.

    Parameters
    ----------
    work:
        Callable invoked as ``work(node, message)``.
    on_failure:
        Optional failure capability ``(FailureRecord) -> None``.
    scheduler:
        Deferral backend for ``post`` and timers.  Defaults to the
        process-wide scheduler, resolved at use time.
    trace_dispatcher:
        Receiver of trace events.  Defaults to the process-wide dispatcher.
    isolate_fanout:
        When true, every fan-out target after the first receives a
        ``Message.fork()`` of the envelope as it was before the first
        target ran, instead of the shared envelope.
    name:
        Optional label used in diagnostics.
    """

    def __init__(
        self,
        work: Work,
        on_failure: FailureHandler | None = None,
        *,
        scheduler: Scheduler | None = None,
        trace_dispatcher: TraceDispatcher | None = None,
        isolate_fanout: bool | None = None,
        name: str | None = None,
    ) -> None:
        if not callable(work):
            raise ConfigurationError(f"Node work must be callable, got {work!r}")
        if on_failure is not None and not callable(on_failure):
            raise ConfigurationError(
                f"Failure capability must be callable, got {on_failure!r}"
            )
        if isolate_fanout is None:
            isolate_fanout = settings.isolate_fanout

        self.id = str(uuid.uuid4())
        self.name = name or getattr(work, "kind", None) or type(work).__name__
        self.work = work
        self.on_failure = on_failure
        self.channels: dict[str, list[Node]] = {}
        self.isolate_fanout = isolate_fanout
        self._scheduler = scheduler
        self._trace_dispatcher = trace_dispatcher

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is not None:
            return self._scheduler
        return get_default_scheduler()

    @property
    def trace_dispatcher(self) -> TraceDispatcher:
        if self._trace_dispatcher is not None:
            return self._trace_dispatcher
        return get_trace_dispatcher()

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def connect(self, channel: str | Node, target: Node | None = None) -> None:
        """Append *target* to *channel*.

        Called as ``connect(target)`` the default channel is used.  The same
        target may be registered several times and is then invoked once per
        registration.
        """
        if target is None:
            channel, target = DEFAULT_CHANNEL, channel
        if not isinstance(channel, str) or not channel:
            raise ConfigurationError(
                f"Channel name must be a non-empty string, got {channel!r}"
            )
        if not isinstance(target, Node):
            raise ConfigurationError(
                f"Channel target must be a Node, got {type(target).__name__}"
            )

        self.channels.setdefault(channel, []).append(target)
        logger.debug(
            "Node %s connected node %s at channel %s", self.id, target.id, channel
        )

    def targets(self, channel: str = DEFAULT_CHANNEL) -> list[Node]:
        """Return a copy of the targets registered under *channel*."""
        return list(self.channels.get(channel, ()))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def send(self, message: Message) -> None:
        """Run this node's work on *message* in the caller's frame."""
        self._trace(TraceKind.ENTRY, message)
        try:
            self.work(self, message)
        except Exception as exc:  # noqa: BLE001
            self.report_failure(message, exc)

    def post(self, message: Message) -> None:
        """Schedule ``send(message)`` for a later scheduler tick and return."""
        self._trace(TraceKind.POST, message)
        self.scheduler.call_soon(self.send, message)

    def next(self, channel: str | Message, message: Message = _MISSING) -> None:
        """Hand *message* to every target of *channel*, in registration order.

        Called as ``next(message)`` the default channel is used.  A channel
        with no targets is a no-op.
        """
        if message is _MISSING:
            channel, message = DEFAULT_CHANNEL, channel

        targets = self.channels.get(channel)
        if not targets:
            return

        targets = list(targets)
        outgoing = [message]
        if self.isolate_fanout:
            # Branches are taken before any target runs.
            outgoing.extend(message.fork() for _ in targets[1:])
        else:
            outgoing.extend(message for _ in targets[1:])

        for target, branch in zip(targets, outgoing):
            self._trace(TraceKind.FANOUT, branch, channel=channel, target_id=target.id)
            target.send(branch)

    # ------------------------------------------------------------------
    # Failure capture
    # ------------------------------------------------------------------

    def report_failure(self, message: Message, cause: BaseException) -> None:
        """Deliver a ``FailureRecord`` to the failure capability once.

        Used by ``send`` for work failures and by nodes that fail outside
        the caller's frame (transport errors, timer continuations).  A
        failure capability that raises is logged; the error goes no further.
        """
        record = FailureRecord(node=self, message=message, cause=cause)
        self._trace(
            TraceKind.FAILURE,
            message,
            detail={"cause": repr(cause), "error_type": type(cause).__name__},
        )

        handler = self.on_failure or get_default_failure_handler()
        try:
            handler(record)
        except Exception:  # noqa: BLE001
            logger.exception(
                "Failure capability of node %s raised while handling message %s",
                self.id,
                message.correlation_id,
            )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _trace(
        self,
        kind: TraceKind,
        message: Message,
        channel: str | None = None,
        target_id: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        dispatcher = self.trace_dispatcher
        if not dispatcher.enabled:
            return
        dispatcher.emit(
            TraceEvent(
                kind=kind,
                node_id=self.id,
                correlation_id=message.correlation_id,
                channel=channel,
                target_id=target_id,
                detail=detail or {},
            )
        )

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, id={self.id!r})"
