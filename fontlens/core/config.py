"""Inspector configuration — every tunable constant in one place."""

from __future__ import annotations

from dataclasses import dataclass

from fontlens.core.types import HostAction


@dataclass(frozen=True)
class InspectorConfig:
    # Floating tooltip placement (px)
    tooltip_offset: float = 10.0
    tooltip_width: float = 250.0
    tooltip_height: float = 200.0  # estimate until the tooltip has been laid out
    edge_margin: float = 15.0

    # Timing (seconds)
    content_refresh_interval: float = 0.2
    selection_debounce: float = 0.1
    copy_feedback_duration: float = 2.0
    frame_interval: float = 1 / 60

    # Pinned tooltips (px)
    grid_size: float = 10.0
    pinned_offset: float = 4.0
    pinned_right_margin: float = 10.0

    # Classifier thresholds
    min_element_size: float = 10.0
    min_direct_text: int = 3
    rich_container_text: int = 20
    styled_container_text: int = 5

    # Host integration
    deactivation_action: str = HostAction.DEACTIVATE.value
    preserve_pinned_on_toggle: bool = False
    search_url: str = "https://www.google.com/search?q="


DEFAULT_CONFIG = InspectorConfig()
