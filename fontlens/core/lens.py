"""FontLens — main orchestrator class."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from playwright.async_api import Page

from fontlens.core.config import DEFAULT_CONFIG, InspectorConfig
from fontlens.core.errors import DomAccessError
from fontlens.core.types import HostAction, KeyEvent, PointerEvent
from fontlens.dom.headless import HeadlessNode
from fontlens.dom.page import PageDom
from fontlens.formatter.formatter import TooltipRow
from fontlens.host.base import Host
from fontlens.host.memory import MemoryHost
from fontlens.scheduling.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from fontlens.tooltips.controller import TooltipController
from fontlens.tooltips.tooltip import FloatingTooltip, PinnedTooltip

logger = logging.getLogger(__name__)


class FontLens:
    """
    Drives the inspector against a Playwright page.

    Usage:
        lens = FontLens()
        lens.toggle()
        await lens.hover(page, 120, 80)
        await lens.settle()
        print(lens.controller.render_text())
    """

    def __init__(
        self,
        *,
        host: Host | None = None,
        config: InspectorConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.host = host or MemoryHost(search_url=self.config.search_url)
        self.dom = PageDom()
        self._scheduler = scheduler or AsyncioScheduler(frame_interval=self.config.frame_interval)
        self.controller = TooltipController(self.dom, self.host, self._scheduler, config=self.config)
        self._last_target: HeadlessNode | None = None

    # ------------------------------------------------------------------
    # Host messages
    # ------------------------------------------------------------------

    def toggle(self) -> dict[str, Any]:
        return self.controller.handle_message({"action": HostAction.TOGGLE.value})

    def handle_message(self, message: Any) -> dict[str, Any]:
        return self.controller.handle_message(message)

    # ------------------------------------------------------------------
    # Page events
    # ------------------------------------------------------------------

    async def hover(self, page: Page, x: float, y: float) -> HeadlessNode | None:
        """Move the pointer to (x, y) and deliver the resulting mouse events."""
        try:
            target = await self.dom.refresh(page, x, y)
        except DomAccessError:
            logger.exception("Page snapshot failed; tearing the session down")
            self.controller.teardown()
            self._last_target = None
            return None

        previous = self._last_target
        same = (
            previous is not None
            and target is not None
            and self.dom.node_key(previous) == self.dom.node_key(target)
        )
        if previous is not None and not same:
            self.dom.dispatch(PointerEvent("mouseout", x, y, target=previous, related_target=target))
        self.dom.dispatch(PointerEvent("mousemove" if same else "mouseover", x, y, target=target))
        self._last_target = target
        return target

    async def select(self, page: Page, x: float, y: float) -> HeadlessNode | None:
        """Release the mouse at (x, y) over whatever the page currently has selected."""
        target = await self.hover(page, x, y)
        self.dom.dispatch(PointerEvent("mouseup", x, y, target=target))
        return target

    def press(self, key: str) -> None:
        self.dom.dispatch(KeyEvent(key))

    async def settle(self) -> None:
        """Let pending frames and the selection debounce run."""
        if isinstance(self._scheduler, ManualScheduler):
            self._scheduler.run_frame()
            self._scheduler.advance(self.config.selection_debounce)
            return
        await asyncio.sleep(max(2 * self.config.frame_interval, self.config.selection_debounce) + 0.05)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def floating(self) -> FloatingTooltip | None:
        return self.controller.floating

    @property
    def pinned(self) -> list[PinnedTooltip]:
        return self.controller.pinned

    def rows(self, tooltip_id: str | None = None) -> list[TooltipRow]:
        return self.controller.rows(tooltip_id)

    def reset(self) -> None:
        """Tear down the session, including pinned tooltips."""
        self.controller.teardown()
        self._last_target = None
