from fontlens.tooltips.controller import TooltipController
from fontlens.tooltips.positioning import grid_key, near_viewport_edge, place_floating, place_pinned
from fontlens.tooltips.tooltip import CopyAffordance, FloatingTooltip, PinnedTooltip

__all__ = [
    "CopyAffordance",
    "FloatingTooltip",
    "PinnedTooltip",
    "TooltipController",
    "grid_key",
    "near_viewport_edge",
    "place_floating",
    "place_pinned",
]
