"""Tooltip models — the floating tooltip, pinned tooltips and copy affordances."""

from __future__ import annotations

from dataclasses import dataclass, field

from fontlens.core.types import TooltipContent
from fontlens.scheduling.scheduler import Handle


@dataclass
class CopyAffordance:
    """Per-field copy button; shows ``copied`` until its revert timer fires."""

    key: str
    copied: bool = False
    revert: Handle | None = None

    def cancel(self) -> None:
        if self.revert is not None:
            self.revert.cancel()
            self.revert = None


@dataclass
class _TooltipBase:
    position: tuple[float, float] = (0.0, 0.0)
    affordances: dict[str, CopyAffordance] = field(default_factory=dict)
    disposed: bool = False

    def affordance(self, key: str) -> CopyAffordance:
        return self.affordances.setdefault(key, CopyAffordance(key))

    def dispose(self) -> None:
        """Cancel any pending feedback timers and mark the tooltip as gone."""
        for affordance in self.affordances.values():
            affordance.cancel()
        self.affordances.clear()
        self.disposed = True


@dataclass
class FloatingTooltip(_TooltipBase):
    """The single tooltip that follows the pointer."""

    visible: bool = False
    content: TooltipContent | None = None
    content_hash: str | None = None
    last_content_update: float | None = None
    renders: int = 0

    def apply_content(self, content: TooltipContent, now: float) -> bool:
        """Replace the content unless it is identical. Returns True when re-rendered."""
        self.last_content_update = now
        digest = content.content_hash
        if digest == self.content_hash:
            return False
        for affordance in self.affordances.values():
            affordance.cancel()
        self.affordances.clear()
        self.content = content
        self.content_hash = digest
        self.renders += 1
        return True

    def show(self, x: float, y: float) -> None:
        self.position = (x, y)
        self.visible = True

    def hide(self) -> None:
        self.visible = False
        self.content = None
        self.content_hash = None
        self.last_content_update = None


@dataclass
class PinnedTooltip(_TooltipBase):
    """A tooltip created from a text selection; its content never changes."""

    id: str = ""
    content: TooltipContent = field(default_factory=TooltipContent)
    grid_key: tuple[int, int] = (0, 0)
    selected_text: str = ""
    created_at: float = 0.0
