import logging

from fontlens.core.config import DEFAULT_CONFIG, InspectorConfig
from fontlens.core.errors import DomAccessError, FontLensError, HostContextError
from fontlens.core.lens import FontLens
from fontlens.core.types import (
    HCL,
    LCH,
    RGB,
    ColorSnapshot,
    HostAction,
    KeyEvent,
    Phase,
    PointerEvent,
    Rect,
    StyleSnapshot,
    TooltipContent,
)
from fontlens.tooltips.controller import TooltipController

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FontLens",
    "TooltipController",
    "InspectorConfig",
    "DEFAULT_CONFIG",
    # Errors
    "FontLensError",
    "DomAccessError",
    "HostContextError",
    # Types
    "ColorSnapshot",
    "HCL",
    "HostAction",
    "KeyEvent",
    "LCH",
    "Phase",
    "PointerEvent",
    "RGB",
    "Rect",
    "StyleSnapshot",
    "TooltipContent",
]
