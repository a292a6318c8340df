"""Schedulers — display frames and one-shot timers on a single event thread."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import math
from abc import ABC, abstractmethod
from typing import Callable

Callback = Callable[[], None]

_FRAME_INTERVAL = 1 / 60


class Handle(ABC):
    """Cancellation token for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None: ...

    @property
    @abstractmethod
    def cancelled(self) -> bool: ...


class Scheduler(ABC):
    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""

    @abstractmethod
    def request_frame(self, callback: Callback) -> Handle:
        """Run ``callback`` once, aligned with the next display frame."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> Handle: ...


# ---------------------------------------------------------------------------
# Deterministic scheduler
# ---------------------------------------------------------------------------


class _ManualHandle(Handle):
    def __init__(self, callback: Callback) -> None:
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Clock that only moves when told to.

    Frames run on run_frame(); timers run on advance() once their deadline
    has passed. Callbacks scheduled from inside a frame wait for the next one.
    """

    def __init__(self, *, start: float = 0.0, frame_interval: float = _FRAME_INTERVAL) -> None:
        self._now = start
        self._frame_interval = frame_interval
        self._frames: list[_ManualHandle] = []
        self._timers: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()
        self.frames_run = 0

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: Callback) -> Handle:
        handle = _ManualHandle(callback)
        self._frames.append(handle)
        return handle

    def call_later(self, delay: float, callback: Callback) -> Handle:
        handle = _ManualHandle(callback)
        heapq.heappush(self._timers, (self._now + max(0.0, delay), next(self._seq), handle))
        return handle

    @property
    def pending_frames(self) -> int:
        return sum(1 for h in self._frames if not h.cancelled)

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, h in self._timers if not h.cancelled)

    def run_frame(self) -> int:
        """Advance one frame interval and run the frame callbacks. Returns how many ran."""
        self.advance(self._frame_interval)
        frames, self._frames = self._frames, []
        ran = 0
        for handle in frames:
            if not handle.cancelled:
                handle.callback()
                ran += 1
        self.frames_run += ran
        return ran

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running due timers in deadline order."""
        deadline = self._now + seconds
        while self._timers and self._timers[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._timers)
            self._now = max(self._now, when)
            if not handle.cancelled:
                handle.callback()
        self._now = deadline


# ---------------------------------------------------------------------------
# asyncio scheduler
# ---------------------------------------------------------------------------


class _AsyncioHandle(Handle):
    def __init__(self, timer: asyncio.TimerHandle) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._timer.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Runs frames and timers on an asyncio event loop.

    Frames fire on a fixed tick, the next multiple of ``frame_interval`` on the
    loop clock, so cancelling and re-requesting a frame inside one interval
    still runs it at the same tick.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        frame_interval: float = _FRAME_INTERVAL,
    ) -> None:
        self._loop = loop
        self._frame_interval = frame_interval

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def request_frame(self, callback: Callback) -> Handle:
        return _AsyncioHandle(self.loop.call_at(self.next_frame_time(), callback))

    def next_frame_time(self) -> float:
        now = self.loop.time()
        return (math.floor(now / self._frame_interval) + 1) * self._frame_interval

    def call_later(self, delay: float, callback: Callback) -> Handle:
        return _AsyncioHandle(self.loop.call_later(max(0.0, delay), callback))
