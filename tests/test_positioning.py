"""Tests for tooltip placement and grid bucketing."""

from fontlens.core.config import InspectorConfig
from fontlens.core.types import Rect
from fontlens.tooltips.positioning import grid_key, near_viewport_edge, place_floating, place_pinned

VIEWPORT = Rect(0, 0, 1280, 800)


class TestFloatingPlacement:
    def setup_method(self):
        self.config = InspectorConfig()

    def test_offset_below_right_of_pointer(self):
        assert place_floating(150, 110, VIEWPORT, self.config) == (160, 120)

    def test_flips_left_on_right_overflow(self):
        left, _ = place_floating(1200, 110, VIEWPORT, self.config)
        assert left == 1200 - 250 - 10

    def test_flips_up_on_bottom_overflow(self):
        _, top = place_floating(150, 700, VIEWPORT, self.config)
        assert top == 700 - 200 - 10

    def test_measured_height_overrides_estimate(self):
        _, top = place_floating(150, 700, VIEWPORT, self.config, height=50)
        assert top == 710

    def test_never_negative(self):
        narrow = Rect(0, 0, 200, 150)
        assert place_floating(100, 60, narrow, self.config) == (0, 0)


class TestPinnedPlacement:
    def setup_method(self):
        self.config = InspectorConfig()

    def test_four_pixels_below_anchor(self):
        assert place_pinned(100, 120, VIEWPORT, self.config) == (100, 124)

    def test_kept_inside_right_edge(self):
        left, _ = place_pinned(1200, 120, VIEWPORT, self.config)
        assert left == 1280 - 10 - 250

    def test_rounded_to_whole_pixels(self):
        assert place_pinned(100.4, 120.6, VIEWPORT, self.config) == (100, 125)


class TestGridKey:
    def test_nearby_points_share_bucket(self):
        assert grid_key(150, 110) == grid_key(152, 111) == (15, 11)

    def test_half_rounds_up(self):
        assert grid_key(155, 115) == (16, 12)

    def test_distinct_buckets(self):
        assert grid_key(150, 110) != grid_key(200, 110)


class TestViewportEdge:
    def test_margin(self):
        assert near_viewport_edge(5, 400, VIEWPORT, 15)
        assert near_viewport_edge(640, 790, VIEWPORT, 15)
        assert not near_viewport_edge(15, 15, VIEWPORT, 15)
        assert not near_viewport_edge(640, 400, VIEWPORT, 15)
