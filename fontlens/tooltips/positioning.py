"""Tooltip placement and pinned-tooltip grid bucketing."""

from __future__ import annotations

import math

from fontlens.core.config import InspectorConfig
from fontlens.core.types import Rect


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def place_floating(
    x: float,
    y: float,
    viewport: Rect,
    config: InspectorConfig,
    *,
    height: float | None = None,
) -> tuple[float, float]:
    """
    Pointer position → tooltip top-left.

    The tooltip sits ``tooltip_offset`` below-right of the cursor and flips to
    the other side of the cursor on an axis where it would overflow; it never
    goes above or left of the viewport origin.
    """
    width = config.tooltip_width
    height = height if height is not None else config.tooltip_height
    offset = config.tooltip_offset

    left = x + offset
    if left + width > viewport.width:
        left = x - width - offset

    top = y + offset
    if top + height > viewport.height:
        top = y - height - offset

    return max(0.0, left), max(0.0, top)


def place_pinned(
    anchor_x: float,
    anchor_y: float,
    viewport: Rect,
    config: InspectorConfig,
) -> tuple[float, float]:
    """Put a pinned tooltip ``pinned_offset`` below its anchor, kept inside the right edge."""
    left = anchor_x
    top = anchor_y + config.pinned_offset
    limit = viewport.width - config.pinned_right_margin
    if left + config.tooltip_width > limit:
        left = max(config.pinned_right_margin, limit - config.tooltip_width)
    return float(_round_half_up(left)), float(_round_half_up(top))


def grid_key(x: float, y: float, grid_size: float = 10.0) -> tuple[int, int]:
    """Quantize a pointer position into the de-duplication bucket."""
    return (_round_half_up(x / grid_size), _round_half_up(y / grid_size))


def near_viewport_edge(x: float, y: float, viewport: Rect, margin: float) -> bool:
    return (
        x < margin
        or x > viewport.width - margin
        or y < margin
        or y > viewport.height - margin
    )
