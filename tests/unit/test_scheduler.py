"""Tests for the cooperative and asyncio schedulers."""

from __future__ import annotations

import asyncio
import logging
import time

from switchyard.core.node import Node
from switchyard.core.scheduler import (
    AsyncioScheduler,
    CooperativeScheduler,
    Scheduler,
    get_default_scheduler,
    set_default_scheduler,
)
from switchyard.models.message import create_message


class TestCooperativeScheduler:
    def test_satisfies_protocol(self):
        assert isinstance(CooperativeScheduler(), Scheduler)
        assert isinstance(AsyncioScheduler(), Scheduler)

    def test_call_soon_runs_fifo_on_next_tick(self, fake_scheduler):
        calls: list[int] = []
        fake_scheduler.call_soon(calls.append, 1)
        fake_scheduler.call_soon(calls.append, 2)

        assert calls == []
        assert fake_scheduler.run_once() == 2
        assert calls == [1, 2]

    def test_callbacks_scheduled_during_tick_wait(self, fake_scheduler):
        calls: list[str] = []

        def _outer() -> None:
            calls.append("outer")
            fake_scheduler.call_soon(calls.append, "inner")

        fake_scheduler.call_soon(_outer)
        fake_scheduler.run_once()
        assert calls == ["outer"]

        fake_scheduler.run_once()
        assert calls == ["outer", "inner"]

    def test_timers_fire_in_deadline_order(self, fake_scheduler, clock):
        calls: list[str] = []
        fake_scheduler.call_later(0.5, calls.append, "late")
        fake_scheduler.call_later(0.1, calls.append, "early")
        fake_scheduler.call_later(0.1, calls.append, "early-second")

        fake_scheduler.run()

        assert calls == ["early", "early-second", "late"]
        assert clock.now >= 0.5

    def test_timer_not_due_does_not_run(self, fake_scheduler, clock):
        calls: list[str] = []
        fake_scheduler.call_later(1.0, calls.append, "x")

        assert fake_scheduler.run_once() == 0
        clock.now = 1.0
        assert fake_scheduler.run_once() == 1
        assert calls == ["x"]

    def test_pending_counts_ready_and_timers(self, fake_scheduler):
        fake_scheduler.call_soon(lambda: None)
        fake_scheduler.call_later(1.0, lambda: None)
        assert fake_scheduler.pending == 2
        fake_scheduler.run()
        assert fake_scheduler.pending == 0

    def test_raising_callback_does_not_stop_loop(self, fake_scheduler, caplog):
        calls: list[str] = []

        def _explode() -> None:
            raise RuntimeError("callback failed")

        fake_scheduler.call_soon(_explode)
        fake_scheduler.call_soon(calls.append, "after")

        with caplog.at_level(logging.ERROR, logger="switchyard.core.scheduler"):
            fake_scheduler.run()

        assert calls == ["after"]
        assert "raised" in caplog.text

    def test_run_timeout_leaves_work_pending(self, fake_scheduler):
        fake_scheduler.call_later(10.0, lambda: None)
        fake_scheduler.run(timeout=1.0)
        assert fake_scheduler.pending == 1

    def test_real_clock_waits_for_timer(self, scheduler):
        fired: list[float] = []
        started = time.monotonic()
        scheduler.call_later(0.02, lambda: fired.append(time.monotonic()))
        scheduler.run()

        assert len(fired) == 1
        assert fired[0] - started >= 0.02


class TestAsyncioScheduler:
    def test_post_runs_on_event_loop(self, trace_dispatcher):
        async def _main() -> list[str]:
            seen: list[str] = []
            node = Node(
                lambda node, message: seen.append("ran"),
                scheduler=AsyncioScheduler(),
                trace_dispatcher=trace_dispatcher,
            )
            node.post(create_message({}))
            assert seen == []
            await asyncio.sleep(0)
            return seen

        assert asyncio.run(_main()) == ["ran"]

    def test_call_later_uses_loop_timer(self):
        async def _main() -> float:
            loop = asyncio.get_running_loop()
            done = loop.create_future()
            started = loop.time()
            AsyncioScheduler(loop).call_later(0.01, done.set_result, None)
            await done
            return loop.time() - started

        assert asyncio.run(_main()) >= 0.009


class TestDefaultScheduler:
    def test_nodes_resolve_default_at_use_time(self, fake_scheduler, trace_dispatcher):
        previous = get_default_scheduler()
        node = Node(lambda node, message: None, trace_dispatcher=trace_dispatcher)
        try:
            set_default_scheduler(fake_scheduler)
            node.post(create_message({}))
            assert fake_scheduler.pending == 1
        finally:
            set_default_scheduler(previous)
