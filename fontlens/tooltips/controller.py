"""TooltipController — the inspection session state machine."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from fontlens.core.config import DEFAULT_CONFIG, InspectorConfig
from fontlens.core.errors import FontLensError
from fontlens.core.types import (
    HostAction,
    KeyEvent,
    Phase,
    PointerEvent,
    SessionContext,
    TooltipContent,
)
from fontlens.detection.classifier import TextClassifier
from fontlens.detection.sampler import StyleSampler
from fontlens.dom.base import DomSurface, Listener
from fontlens.formatter.formatter import TooltipFormatter, TooltipRow
from fontlens.host.base import Host, search_request
from fontlens.scheduling.coalescer import EventCoalescer
from fontlens.scheduling.scheduler import Scheduler
from fontlens.tooltips.positioning import (
    grid_key,
    near_viewport_edge,
    place_floating,
    place_pinned,
)
from fontlens.tooltips.tooltip import FloatingTooltip, PinnedTooltip

logger = logging.getLogger(__name__)

_SELECTION_TIMER = "selection"


class TooltipController:
    """
    Owns the floating tooltip, the pinned tooltips and the session lifecycle.

    States::

        INACTIVE --activate--> IDLE --inspectable target--> TRACKING
        TRACKING --leave target / edge / root--> IDLE
        IDLE|TRACKING --Escape--> IDLE (active=False, pinned kept)
        any --deactivate / teardown--> INACTIVE

    All DOM listeners and scheduled callbacks are released by teardown(),
    which is safe to call any number of times.
    """

    def __init__(
        self,
        dom: DomSurface,
        host: Host,
        scheduler: Scheduler,
        *,
        config: InspectorConfig = DEFAULT_CONFIG,
        formatter: TooltipFormatter | None = None,
    ) -> None:
        self._dom = dom
        self._host = host
        self._scheduler = scheduler
        self._config = config
        self._formatter = formatter or TooltipFormatter()

        self.session = SessionContext()
        self._classifier = TextClassifier(dom, config)
        self._sampler = StyleSampler(dom)
        self._coalescer = EventCoalescer(
            scheduler,
            self._on_frame,
            content_interval=config.content_refresh_interval,
        )

        self.floating: FloatingTooltip | None = None
        self._pinned: dict[str, PinnedTooltip] = {}
        self._pinned_buckets: set[tuple[int, int]] = set()
        self._pinned_ids = itertools.count(1)

        self._attached: list[tuple[str, Listener]] = []
        self._handlers: dict[str, Listener] = {
            "mouseover": self.handle_pointer_over,
            "mousemove": self.handle_pointer_move,
            "mouseout": self.handle_pointer_out,
            "mouseup": self.handle_mouse_up,
            "keydown": self.handle_key_down,
        }

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def active(self) -> bool:
        return self.session.active

    @property
    def pinned(self) -> list[PinnedTooltip]:
        return list(self._pinned.values())

    @property
    def coalescer(self) -> EventCoalescer:
        return self._coalescer

    @property
    def listeners_attached(self) -> int:
        return len(self._attached)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def activate(self) -> None:
        if self.session.active:
            return
        with self._lifecycle_guard("activate"):
            self._detach_listeners()
            if self.floating is not None:
                self.floating.dispose()
            self.floating = FloatingTooltip()
            self.session.current_target = None
            self._coalescer.reset_content()
            for event_type, handler in self._handlers.items():
                self._dom.add_listener(event_type, handler)
                self._attached.append((event_type, handler))
            self.session.active = True
            self.session.transition(Phase.IDLE)
            logger.info("Inspector activated")

    def deactivate(self, *, preserve_pinned: bool = False) -> None:
        self.teardown(preserve_pinned=preserve_pinned)
        logger.info("Inspector deactivated (pinned tooltips %s)", "kept" if preserve_pinned else "removed")

    def toggle(self) -> None:
        if self.session.active:
            self.deactivate(preserve_pinned=self._config.preserve_pinned_on_toggle)
        else:
            self.activate()

    def teardown(self, *, preserve_pinned: bool = False) -> None:
        """Release every listener, timer and tooltip this session holds."""
        self._coalescer.cancel_all()
        self._detach_listeners()
        if self.floating is not None:
            self.floating.hide()
            self.floating.dispose()
            self.floating = None
        if not preserve_pinned:
            self.remove_all_pinned()
        self.session.current_target = None
        self.session.active = False
        self.session.transition(Phase.INACTIVE)

    def _suspend(self) -> None:
        """Escape: stop inspecting but keep pinned tooltips on the page."""
        self._coalescer.cancel_all()
        self._detach_listeners()
        if self.floating is not None:
            self.floating.hide()
        self.session.current_target = None
        self.session.active = False
        self.session.transition(Phase.IDLE)

    def _detach_listeners(self) -> None:
        attached, self._attached = self._attached, []
        for event_type, handler in attached:
            try:
                self._dom.remove_listener(event_type, handler)
            except FontLensError as exc:
                logger.warning("Could not remove %s listener: %s", event_type, exc)

    @contextmanager
    def _lifecycle_guard(self, operation: str, *, preserve_pinned: bool = False) -> Iterator[None]:
        try:
            yield
        except FontLensError:
            logger.exception("%s failed; tearing the session down", operation)
            self.teardown(preserve_pinned=preserve_pinned)

    # ------------------------------------------------------------------
    # Host messages
    # ------------------------------------------------------------------

    def handle_message(self, message: Any) -> dict[str, Any]:
        if not isinstance(message, Mapping):
            logger.warning("Received invalid message: %r", message)
            return {"success": False, "error": "Invalid request"}

        action = message.get("action")
        if not action:
            logger.warning("Message missing action property")
            return {"success": False, "error": "Missing action property"}

        if action == HostAction.TOGGLE.value:
            self.toggle()
            return {"success": True, "isActive": self.active}
        if action == HostAction.DEACTIVATE.value:
            self.deactivate(preserve_pinned=bool(message.get("preservePinned", False)))
            return {"success": True}
        if action == HostAction.CHECK_LOADED.value:
            return {"loaded": True}
        if action == HostAction.CHECK_STATUS.value:
            return {"isActive": self.active}

        logger.warning("Received unknown action: %s", action)
        return {"success": False, "error": f"Unknown action: {action}"}

    # ------------------------------------------------------------------
    # Pointer tracking
    # ------------------------------------------------------------------

    def handle_pointer_over(self, event: PointerEvent) -> None:
        self._track(event)

    def handle_pointer_move(self, event: PointerEvent) -> None:
        self._track(event)

    def handle_pointer_out(self, event: PointerEvent) -> None:
        if not self.session.active or self.session.current_target is None:
            return
        with self._lifecycle_guard(event.type):
            related = event.related_target
            if related is not None and self._dom.contains(self.session.current_target, related):
                return
            self._leave("pointer left target")

    def _track(self, event: PointerEvent) -> None:
        if not self.session.active:
            return
        with self._lifecycle_guard(event.type):
            self.session.pointer = (event.x, event.y)

            if near_viewport_edge(event.x, event.y, self._dom.viewport(), self._config.edge_margin):
                self._leave("pointer at viewport edge")
                return

            target = self._dom.element_for(event.target)
            if target is None or self._is_document_root(target):
                self._leave("pointer over document root")
                return

            if not self._classifier.is_inspectable(target):
                self._leave("target is not inspectable")
                return

            self.session.current_target = target
            self.session.transition(Phase.TRACKING)
            self._coalescer.schedule_position(event.x, event.y)

    def _is_document_root(self, node: Any) -> bool:
        key = self._dom.node_key(node)
        roots = (self._dom.document_element(), self._dom.body())
        return any(root is not None and self._dom.node_key(root) == key for root in roots)

    def _leave(self, reason: str) -> None:
        if self.session.current_target is None and self.session.phase is not Phase.TRACKING:
            return
        logger.debug("Hiding floating tooltip: %s", reason)
        self._coalescer.cancel_frame()
        self._coalescer.reset_content()
        if self.floating is not None:
            self.floating.hide()
        self.session.current_target = None
        self.session.transition(Phase.IDLE)

    def _on_frame(self, x: float, y: float) -> None:
        target = self.session.current_target
        if not self.session.active or target is None or self.floating is None:
            return
        with self._lifecycle_guard("frame"):
            key = self._dom.node_key(target)
            if self._coalescer.content_due(key):
                content = self._sampler.sample_content(target)
                self._coalescer.mark_content(key)
                self.floating.apply_content(content, self._scheduler.now())
            left, top = place_floating(x, y, self._dom.viewport(), self._config)
            self.floating.show(left, top)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key_down(self, event: KeyEvent) -> None:
        if not self.session.active or event.key != "Escape":
            return
        with self._lifecycle_guard("escape", preserve_pinned=True):
            self._suspend()
            self._host.post_message({"action": self._config.deactivation_action})
            logger.info("Inspector deactivated via Escape (pinned tooltips kept)")

    # ------------------------------------------------------------------
    # Pinned tooltips
    # ------------------------------------------------------------------

    def handle_mouse_up(self, event: PointerEvent) -> None:
        if not self.session.active:
            return
        self.session.pointer = (event.x, event.y)
        x, y, target = event.x, event.y, event.target
        self._coalescer.schedule_timer(
            _SELECTION_TIMER,
            self._config.selection_debounce,
            lambda: self._pin_selection(x, y, target),
        )

    def _pin_selection(self, x: float, y: float, target: Any) -> None:
        with self._lifecycle_guard("selection"):
            self.create_pinned(x, y, target)

    def create_pinned(self, x: float, y: float, target: Any = None) -> PinnedTooltip | None:
        """
        Pin the current selection's typography near (x, y).

        Returns None when the session is inactive, nothing is selected, or a
        pinned tooltip already occupies the same grid bucket.
        """
        if not self.session.active:
            return None

        text = self._dom.selection_text().strip()
        if not text:
            return None

        element = self._dom.selection_anchor() or self._dom.element_for(target)
        if element is None or not self._dom.is_element(element):
            logger.debug("No element to pin for selection %r", text[:30])
            return None

        bucket = grid_key(x, y, self._config.grid_size)
        if bucket in self._pinned_buckets:
            logger.debug("Pinned tooltip already at bucket %s", bucket)
            return None

        rect = self._dom.selection_rect()
        if rect is not None and rect.width > 0 and rect.height > 0:
            anchor = (rect.left, rect.bottom)
        else:
            anchor = (x, y)

        pinned = PinnedTooltip(
            id=f"pin-{next(self._pinned_ids)}",
            position=place_pinned(*anchor, self._dom.viewport(), self._config),
            content=self._sampler.sample_content(element),
            grid_key=bucket,
            selected_text=text,
            created_at=self._scheduler.now(),
        )
        self._pinned[pinned.id] = pinned
        self._pinned_buckets.add(bucket)
        logger.info("Pinned tooltip %s at %s", pinned.id, pinned.position)
        return pinned

    def close_pinned(self, tooltip_id: str) -> bool:
        """Dismiss one pinned tooltip. Its grid bucket stays reserved."""
        pinned = self._pinned.pop(tooltip_id, None)
        if pinned is None:
            return False
        pinned.dispose()
        return True

    def remove_all_pinned(self) -> None:
        for pinned in self._pinned.values():
            pinned.dispose()
        self._pinned.clear()
        self._pinned_buckets.clear()

    # ------------------------------------------------------------------
    # Tooltip actions
    # ------------------------------------------------------------------

    def _tooltip(self, tooltip_id: str | None) -> FloatingTooltip | PinnedTooltip | None:
        if tooltip_id is None:
            return self.floating
        return self._pinned.get(tooltip_id)

    def content(self, tooltip_id: str | None = None) -> TooltipContent | None:
        tooltip = self._tooltip(tooltip_id)
        return tooltip.content if tooltip is not None else None

    def rows(self, tooltip_id: str | None = None) -> list[TooltipRow]:
        return self._formatter.rows(self.content(tooltip_id))

    def render_text(self, tooltip_id: str | None = None) -> str:
        return self._formatter.render_text(self.content(tooltip_id))

    def activate_font_family(self, tooltip_id: str | None = None) -> bool:
        """Ask the host to search for the tooltip's font-family list."""
        content = self.content(tooltip_id)
        if content is None or content.style is None or not content.style.font_family:
            return False
        with self._lifecycle_guard("search"):
            self._host.post_message(search_request(content.style.font_family))
            return True
        return False

    def copy(self, field: str, tooltip_id: str | None = None) -> bool:
        """
        Copy one displayed field through the host clipboard.

        On success the field's affordance reads ``copied`` for
        ``copy_feedback_duration`` seconds. Failures are logged only.
        """
        tooltip = self._tooltip(tooltip_id)
        if tooltip is None:
            return False
        row = self._formatter.row(tooltip.content, field)
        if row is None or not row.copy_value:
            return False

        def on_done(error: Exception | None) -> None:
            if error is not None:
                logger.warning("Failed to copy %s: %s", field, error)
                return
            if tooltip.disposed:
                return
            affordance = tooltip.affordance(field)
            affordance.cancel()
            affordance.copied = True

            def revert() -> None:
                affordance.copied = False
                affordance.revert = None

            affordance.revert = self._scheduler.call_later(self._config.copy_feedback_duration, revert)

        with self._lifecycle_guard("copy"):
            self._host.write_clipboard(row.copy_value, on_done)
            return True
        return False
