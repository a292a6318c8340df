"""EventCoalescer — turns pointer bursts into at most one UI update per frame."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import Callable

from fontlens.scheduling.scheduler import Callback, Handle, Scheduler

logger = logging.getLogger(__name__)

PositionCallback = Callable[[float, float], None]


class EventCoalescer:
    """
    Two independent rate limits over one scheduler.

    Position: every schedule_position() cancels the pending frame and asks for
    a new one, so only the newest pointer position is ever delivered.

    Content: content_due() says whether re-sampling is allowed now — when the
    target changed or ``content_interval`` seconds passed since the last
    sample. Callers record a sample with mark_content().

    cancel_all() drops the pending frame and all named timers.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_position: PositionCallback,
        *,
        content_interval: float = 0.2,
    ) -> None:
        self._scheduler = scheduler
        self._on_position = on_position
        self._content_interval = content_interval

        self._frame: Handle | None = None
        self._position: tuple[float, float] | None = None
        self._timers: dict[str, Handle] = {}

        self._content_key: Hashable | None = None
        self._content_time: float | None = None

        self.frames_executed = 0
        self.frames_superseded = 0

    # ------------------------------------------------------------------
    # Position coalescing
    # ------------------------------------------------------------------

    def schedule_position(self, x: float, y: float) -> None:
        self._position = (x, y)
        if self._frame is not None and not self._frame.cancelled:
            self._frame.cancel()
            self.frames_superseded += 1
        self._frame = self._scheduler.request_frame(self._run_frame)

    def cancel_frame(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None
        self._position = None

    @property
    def frame_pending(self) -> bool:
        return self._frame is not None and not self._frame.cancelled

    def _run_frame(self) -> None:
        self._frame = None
        position, self._position = self._position, None
        if position is None:
            return
        self.frames_executed += 1
        self._on_position(*position)

    # ------------------------------------------------------------------
    # Content throttling
    # ------------------------------------------------------------------

    def content_due(self, key: Hashable) -> bool:
        if key != self._content_key or self._content_time is None:
            return True
        return self._scheduler.now() - self._content_time >= self._content_interval

    def mark_content(self, key: Hashable) -> None:
        self._content_key = key
        self._content_time = self._scheduler.now()

    def reset_content(self) -> None:
        self._content_key = None
        self._content_time = None

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def schedule_timer(self, name: str, delay: float, callback: Callback) -> None:
        """(Re)arm the timer called ``name``; an earlier one with that name is cancelled."""
        self.cancel_timer(name)

        def fire() -> None:
            self._timers.pop(name, None)
            callback()

        self._timers[name] = self._scheduler.call_later(delay, fire)

    def cancel_timer(self, name: str) -> None:
        handle = self._timers.pop(name, None)
        if handle is not None:
            handle.cancel()

    @property
    def pending_timers(self) -> list[str]:
        return sorted(self._timers)

    def cancel_all(self) -> None:
        self.cancel_frame()
        for name in list(self._timers):
            self.cancel_timer(name)
        self.reset_content()
        logger.debug("Cancelled pending frame and timers")
