"""Cooperative scheduling for deferred dispatch and timers.

The engine defers work in exactly two places: ``Node.post`` (run on a later
tick) and timer-based nodes (run after a delay).  Both go through the
``Scheduler`` protocol so the engine does not depend on any particular
event loop.

Two implementations ship:

* ``CooperativeScheduler`` — a self-contained single-threaded task queue
  with a timer heap, driven explicitly with ``run_once()`` / ``run()``.
* ``AsyncioScheduler`` — an adapter over an ``asyncio`` event loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for deferral backends."""

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Run ``callback(*args)`` on a later tick, never in the caller's frame."""
        ...

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> None:
        """Run ``callback(*args)`` once at least *delay* seconds have elapsed."""
        ...


class CooperativeScheduler:
    """Single-threaded cooperative task queue plus timer facility.

    Ready callbacks run in FIFO order.  Timers run in deadline order, ties
    broken by scheduling order.  A callback that raises is logged and does
    not stop the loop.

    Parameters
    ----------
    clock:
        Monotonic clock returning seconds.  Defaults to ``time.monotonic``.
    sleep:
        Blocking sleep used by ``run()`` while waiting for the next timer.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._ready: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._timers: list[
            tuple[float, int, Callable[..., Any], tuple[Any, ...]]
        ] = []
        self._sequence = itertools.count()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self._ready.append((callback, args))

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> None:
        deadline = self._clock() + max(delay, 0.0)
        heapq.heappush(
            self._timers, (deadline, next(self._sequence), callback, args)
        )

    @property
    def pending(self) -> int:
        """Number of ready callbacks plus pending timers."""
        return len(self._ready) + len(self._timers)

    # ------------------------------------------------------------------
    # Driving the loop
    # ------------------------------------------------------------------

    def run_once(self) -> int:
        """Run one tick: promote due timers, then run every callback ready now.

        Callbacks scheduled while the tick runs wait for the next tick.
        Returns the number of callbacks executed.
        """
        now = self._clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, callback, args = heapq.heappop(self._timers)
            self._ready.append((callback, args))

        executed = 0
        for _ in range(len(self._ready)):
            callback, args = self._ready.popleft()
            try:
                callback(*args)
            except Exception:  # noqa: BLE001
                logger.exception("Scheduled callback %r raised", callback)
            executed += 1
        return executed

    def run(self, timeout: float | None = None) -> None:
        """Run ticks until no work is left.

        Sleeps until the next timer deadline whenever nothing is ready.  With
        *timeout*, returns once that many seconds have elapsed even if work
        remains.
        """
        started = self._clock()
        while self.pending:
            if timeout is not None and self._clock() - started >= timeout:
                logger.warning(
                    "Scheduler run timed out with %d pending callbacks",
                    self.pending,
                )
                return
            if self.run_once():
                continue
            if self._timers:
                wait = self._timers[0][0] - self._clock()
                if timeout is not None:
                    wait = min(wait, started + timeout - self._clock())
                if wait > 0:
                    self._sleep(wait)


class AsyncioScheduler:
    """Adapter that defers onto an ``asyncio`` event loop.

    When *loop* is omitted the running loop is resolved at scheduling time,
    so an instance can be created outside of any loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self._resolve_loop().call_soon(callback, *args)

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> None:
        self._resolve_loop().call_later(max(delay, 0.0), callback, *args)


_default_scheduler: Scheduler = CooperativeScheduler()


def get_default_scheduler() -> Scheduler:
    """Return the process-wide scheduler used by nodes built without one."""
    return _default_scheduler


def set_default_scheduler(scheduler: Scheduler) -> None:
    """Replace the process-wide scheduler."""
    global _default_scheduler
    _default_scheduler = scheduler
