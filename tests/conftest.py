"""Shared test fixtures for Switchyard."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from switchyard.core.node import Node, set_default_failure_handler
from switchyard.core.scheduler import CooperativeScheduler
from switchyard.models.failure import FailureRecord
from switchyard.models.message import Message
from switchyard.tracing.dispatcher import TraceDispatcher
from switchyard.tracing.tracers import RecordingTracer


class FakeClock:
    """Manually advanced monotonic clock; ``sleep`` advances it instantly."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _restore_failure_handler() -> Iterator[None]:
    """Tests that install a default failure handler must not leak it."""
    yield
    set_default_failure_handler(None)


@pytest.fixture
def scheduler() -> CooperativeScheduler:
    """A real-time cooperative scheduler private to the test."""
    return CooperativeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_scheduler(clock: FakeClock) -> CooperativeScheduler:
    """A cooperative scheduler driven by a fake clock."""
    return CooperativeScheduler(clock=clock, sleep=clock.sleep)


@pytest.fixture
def recorder() -> RecordingTracer:
    return RecordingTracer()


@pytest.fixture
def trace_dispatcher(recorder: RecordingTracer) -> TraceDispatcher:
    """A dispatcher feeding only the test's RecordingTracer."""
    dispatcher = TraceDispatcher()
    dispatcher.register_tracer(recorder)
    return dispatcher


@pytest.fixture
def failures() -> list[FailureRecord]:
    """Collects every FailureRecord delivered to ``failures.append``."""
    return []


@pytest.fixture
def node_options(
    scheduler: CooperativeScheduler, trace_dispatcher: TraceDispatcher
) -> dict[str, Any]:
    """Keyword arguments isolating a node from process-wide defaults."""
    return {"scheduler": scheduler, "trace_dispatcher": trace_dispatcher}


@pytest.fixture
def make_recording_node(
    node_options: dict[str, Any],
) -> Callable[..., Node]:
    """Factory fixture: a pass-through node appending ``(label, message)`` to *log*."""

    def _factory(
        label: str,
        log: list[tuple[str, Message]],
        forward: bool = True,
        **overrides: Any,
    ) -> Node:
        def _work(node: Node, message: Message) -> None:
            log.append((label, message))
            if forward:
                node.next(message)

        options = {**node_options, "name": label, **overrides}
        return Node(_work, **options)

    return _factory
