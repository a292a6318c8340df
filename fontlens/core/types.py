"""Shared types and dataclasses for FontLens."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Phase(str, Enum):
    INACTIVE = "inactive"
    IDLE = "idle"  # active, no current target
    TRACKING = "tracking"  # active, valid target, floating tooltip visible


class HostAction(str, Enum):
    TOGGLE = "toggleExtension"
    DEACTIVATE = "deactivateExtension"
    SEARCH_FONT_FAMILY = "searchFontFamily"
    CHECK_LOADED = "checkContentScriptLoaded"
    CHECK_STATUS = "checkExtensionStatus"


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class LCH:
    l: int  # noqa: E741
    c: int
    h: int


@dataclass(frozen=True)
class HCL:
    h: int
    c: int
    l: int  # noqa: E741


@dataclass(frozen=True)
class StyleSnapshot:
    """Resolved typography of one element at one point in time."""

    font_family: str
    font_size: str
    font_weight: str
    line_height: str
    letter_spacing: str
    text_align: str

    @property
    def primary_family(self) -> str:
        """First entry of the family list, the face the browser tries first."""
        return self.font_family.split(",")[0].strip()


@dataclass(frozen=True)
class ColorSnapshot:
    rgb: RGB
    hex: str
    lch: LCH
    hcl: HCL


@dataclass(frozen=True)
class TooltipContent:
    """Everything a tooltip displays. Either half may be absent."""

    style: StyleSnapshot | None = None
    color: ColorSnapshot | None = None

    @property
    def is_empty(self) -> bool:
        return self.style is None and self.color is None

    @property
    def content_hash(self) -> str:
        """Stable fingerprint used to skip re-rendering identical content."""
        payload = json.dumps(asdict(self), sort_keys=True)
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()


@dataclass
class PointerEvent:
    """A mouse event as delivered by the host page."""

    type: str  # "mouseover", "mouseout", "mousemove", "mouseup"
    x: float
    y: float
    target: Any = None
    related_target: Any = None


@dataclass
class KeyEvent:
    key: str
    type: str = "keydown"


@dataclass
class SessionContext:
    """
    Page-lifetime session state owned by the TooltipController.

    ``phase`` is the lifecycle; ``active`` is false both when INACTIVE and
    after Escape (IDLE with listeners detached and pinned tooltips kept).
    """

    phase: Phase = Phase.INACTIVE
    active: bool = False
    current_target: Any = None
    pointer: tuple[float, float] | None = None
    history: list[Phase] = field(default_factory=list)

    def transition(self, phase: Phase) -> None:
        if phase is not self.phase:
            self.history.append(self.phase)
            self.phase = phase
