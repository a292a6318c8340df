"""Tests for the schedulers and the EventCoalescer."""

from __future__ import annotations

import asyncio

import pytest

from fontlens.scheduling.coalescer import EventCoalescer
from fontlens.scheduling.scheduler import AsyncioScheduler, ManualScheduler


# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------

class TestManualScheduler:
    def setup_method(self):
        self.scheduler = ManualScheduler()
        self.calls: list[str] = []

    def test_frames_run_once_per_run_frame(self):
        self.scheduler.request_frame(lambda: self.calls.append("a"))
        self.scheduler.request_frame(lambda: self.calls.append("b"))
        assert self.scheduler.run_frame() == 2
        assert self.scheduler.run_frame() == 0
        assert self.calls == ["a", "b"]

    def test_cancelled_frame_does_not_run(self):
        handle = self.scheduler.request_frame(lambda: self.calls.append("a"))
        handle.cancel()
        assert handle.cancelled
        assert self.scheduler.run_frame() == 0
        assert self.calls == []

    def test_timers_run_in_deadline_order(self):
        self.scheduler.call_later(0.3, lambda: self.calls.append("late"))
        self.scheduler.call_later(0.1, lambda: self.calls.append("early"))
        self.scheduler.advance(0.2)
        assert self.calls == ["early"]
        self.scheduler.advance(0.2)
        assert self.calls == ["early", "late"]
        assert self.scheduler.now() == pytest.approx(0.4)

    def test_timer_sees_its_own_deadline(self):
        seen: list[float] = []
        self.scheduler.call_later(0.1, lambda: seen.append(self.scheduler.now()))
        self.scheduler.advance(1.0)
        assert seen == [pytest.approx(0.1)]


# ---------------------------------------------------------------------------
# Position coalescing
# ---------------------------------------------------------------------------

class TestPositionCoalescing:
    def setup_method(self):
        self.scheduler = ManualScheduler()
        self.positions: list[tuple[float, float]] = []
        self.coalescer = EventCoalescer(
            self.scheduler, lambda x, y: self.positions.append((x, y))
        )

    def test_burst_delivers_only_latest_position(self):
        for i in range(50):
            self.coalescer.schedule_position(i, i * 2)
        assert self.scheduler.pending_frames == 1
        self.scheduler.run_frame()
        assert self.positions == [(49, 98)]
        assert self.coalescer.frames_executed == 1
        assert self.coalescer.frames_superseded == 49

    def test_new_frame_after_previous_ran(self):
        self.coalescer.schedule_position(1, 1)
        self.scheduler.run_frame()
        self.coalescer.schedule_position(2, 2)
        self.scheduler.run_frame()
        assert self.positions == [(1, 1), (2, 2)]

    def test_cancel_frame(self):
        self.coalescer.schedule_position(1, 1)
        self.coalescer.cancel_frame()
        assert not self.coalescer.frame_pending
        self.scheduler.run_frame()
        assert self.positions == []


# ---------------------------------------------------------------------------
# Content throttling
# ---------------------------------------------------------------------------

class TestContentThrottle:
    def setup_method(self):
        self.scheduler = ManualScheduler()
        self.coalescer = EventCoalescer(self.scheduler, lambda x, y: None, content_interval=0.2)

    def test_first_sample_is_due(self):
        assert self.coalescer.content_due("p1")

    def test_same_target_waits_for_interval(self):
        self.coalescer.mark_content("p1")
        self.scheduler.advance(0.1)
        assert not self.coalescer.content_due("p1")
        self.scheduler.advance(0.1)
        assert self.coalescer.content_due("p1")

    def test_target_change_is_due_immediately(self):
        self.coalescer.mark_content("p1")
        assert self.coalescer.content_due("p2")

    def test_reset(self):
        self.coalescer.mark_content("p1")
        self.coalescer.reset_content()
        assert self.coalescer.content_due("p1")


# ---------------------------------------------------------------------------
# Named timers
# ---------------------------------------------------------------------------

class TestTimers:
    def setup_method(self):
        self.scheduler = ManualScheduler()
        self.coalescer = EventCoalescer(self.scheduler, lambda x, y: None)
        self.fired: list[str] = []

    def test_rescheduling_a_name_replaces_the_timer(self):
        self.coalescer.schedule_timer("selection", 0.1, lambda: self.fired.append("first"))
        self.scheduler.advance(0.05)
        self.coalescer.schedule_timer("selection", 0.1, lambda: self.fired.append("second"))
        self.scheduler.advance(0.1)
        assert self.fired == ["second"]
        assert self.coalescer.pending_timers == []

    def test_cancel_all_silences_everything(self):
        positions: list[tuple[float, float]] = []
        coalescer = EventCoalescer(self.scheduler, lambda x, y: positions.append((x, y)))
        coalescer.schedule_position(5, 5)
        coalescer.schedule_timer("a", 0.1, lambda: self.fired.append("a"))
        coalescer.schedule_timer("b", 0.5, lambda: self.fired.append("b"))
        coalescer.cancel_all()
        self.scheduler.run_frame()
        self.scheduler.advance(1.0)
        assert positions == []
        assert self.fired == []
        assert self.scheduler.pending_timers == 0


# ---------------------------------------------------------------------------
# AsyncioScheduler
# ---------------------------------------------------------------------------

class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_burst_coalesces_on_event_loop(self):
        positions: list[tuple[float, float]] = []
        scheduler = AsyncioScheduler(frame_interval=0.01)
        coalescer = EventCoalescer(scheduler, lambda x, y: positions.append((x, y)))
        for i in range(10):
            coalescer.schedule_position(i, i)
        await asyncio.sleep(0.05)
        assert positions == [(9, 9)]

    @pytest.mark.asyncio
    async def test_cancelled_timer_does_not_fire(self):
        fired: list[str] = []
        scheduler = AsyncioScheduler()
        handle = scheduler.call_later(0.01, lambda: fired.append("x"))
        handle.cancel()
        await asyncio.sleep(0.03)
        assert fired == []
        assert handle.cancelled

    @pytest.mark.asyncio
    async def test_continuous_motion_still_runs_frames(self):
        positions: list[tuple[float, float]] = []
        scheduler = AsyncioScheduler(frame_interval=0.02)
        coalescer = EventCoalescer(scheduler, lambda x, y: positions.append((x, y)))
        # pointer events arrive faster than frames for several intervals
        for i in range(40):
            coalescer.schedule_position(i, i)
            await asyncio.sleep(0.005)
        assert coalescer.frames_executed >= 3
        assert positions[-1][0] > positions[0][0]

    @pytest.mark.asyncio
    async def test_frames_align_to_fixed_tick(self):
        scheduler = AsyncioScheduler(frame_interval=10.0)
        deadline = scheduler.next_frame_time()
        assert deadline > scheduler.now()
        assert deadline == scheduler.next_frame_time()
        assert deadline % 10.0 == 0
