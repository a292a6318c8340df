"""
Integration tests for the full FontLens pipeline (without a live browser).

These tests drive the orchestrator with mock Playwright pages that return
serialized snapshots, validating the flow from hover()/select() to tooltip
rows and host messages.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from fontlens.core.lens import FontLens
from fontlens.core.types import Phase
from fontlens.dom.headless import DEFAULT_STYLE
from fontlens.host.memory import MemoryHost
from fontlens.scheduling.scheduler import ManualScheduler


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def raw_element(key, tag, *texts, rect=(0, 0, 1280, 800), **style):
    left, top, width, height = rect
    return {
        "key": key,
        "tag": tag,
        "style": {**DEFAULT_STYLE, **{k.replace("_", "-"): v for k, v in style.items()}},
        "rect": {"left": left, "top": top, "width": width, "height": height},
        "texts": list(texts),
    }


HTML = raw_element(1, "HTML")
BODY = raw_element(2, "BODY")
PARAGRAPH = raw_element(
    3, "P", "Hello world",
    rect=(100, 100, 200, 20),
    font_family="Arial, sans-serif",
    font_weight="700",
    color="rgb(255, 0, 0)",
)
HEADING = raw_element(
    4, "H1", "Title",
    rect=(100, 40, 400, 40),
    font_family="Georgia, serif",
    font_size="32px",
)


def snapshot(*chain, selection=None):
    return {
        "viewport": {"width": 1280, "height": 800},
        "target": list(chain),
        "hit": True,
        "selection": selection,
    }


def mock_page(*results):
    page = MagicMock()
    page.evaluate = AsyncMock(side_effect=list(results))
    return page


def make_lens():
    return FontLens(host=MemoryHost(), scheduler=ManualScheduler())


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestHover:
    @pytest.mark.asyncio
    async def test_hover_paragraph_shows_typography_and_color(self):
        lens = make_lens()
        lens.toggle()
        page = mock_page(snapshot(HTML, BODY, PARAGRAPH))

        await lens.hover(page, 150, 110)
        await lens.settle()

        assert lens.controller.phase is Phase.TRACKING
        assert lens.floating.visible
        rows = {row.key: row for row in lens.rows()}
        assert rows["font_family"].value == "Arial, sans-serif"
        assert rows["font_weight"].value == "700 (Bold)"
        assert rows["hex"].value == "#ff0000"

    @pytest.mark.asyncio
    async def test_font_family_activation_sends_one_search(self):
        lens = make_lens()
        lens.toggle()
        await lens.hover(mock_page(snapshot(HTML, BODY, PARAGRAPH)), 150, 110)
        await lens.settle()

        assert lens.controller.activate_font_family()
        searches = [m for m in lens.host.messages if m["action"] == "searchFontFamily"]
        assert searches == [{"action": "searchFontFamily", "fontFamily": "Arial, sans-serif"}]

    @pytest.mark.asyncio
    async def test_moving_between_elements(self):
        lens = make_lens()
        lens.toggle()
        page = mock_page(
            snapshot(HTML, BODY, PARAGRAPH),
            snapshot(HTML, BODY, PARAGRAPH),
            snapshot(HTML, BODY, HEADING),
        )

        await lens.hover(page, 150, 110)
        await lens.hover(page, 160, 110)
        await lens.settle()
        assert lens.floating.position == (170, 120)

        await lens.hover(page, 150, 60)
        await lens.settle()
        assert lens.rows()[0].value == "Georgia, serif"

    @pytest.mark.asyncio
    async def test_hover_body_hides_tooltip(self):
        lens = make_lens()
        lens.toggle()
        page = mock_page(snapshot(HTML, BODY, PARAGRAPH), snapshot(HTML, BODY))

        await lens.hover(page, 150, 110)
        await lens.settle()
        await lens.hover(page, 600, 400)

        assert lens.controller.phase is Phase.IDLE
        assert not lens.floating.visible

    @pytest.mark.asyncio
    async def test_inactive_lens_ignores_hover(self):
        lens = make_lens()
        await lens.hover(mock_page(snapshot(HTML, BODY, PARAGRAPH)), 150, 110)
        await lens.settle()
        assert lens.floating is None
        assert lens.controller.phase is Phase.INACTIVE

    @pytest.mark.asyncio
    async def test_closed_page_tears_session_down(self):
        lens = make_lens()
        lens.toggle()
        page = mock_page(PlaywrightError("Target page has been closed"))

        assert await lens.hover(page, 150, 110) is None
        assert lens.controller.phase is Phase.INACTIVE
        assert lens.dom.listener_count() == 0


class TestSelectAndEscape:
    @pytest.mark.asyncio
    async def test_select_pins_tooltip(self):
        lens = make_lens()
        lens.toggle()
        selection = {
            "text": "Hello",
            "chain": [HTML, BODY, PARAGRAPH],
            "rect": {"left": 100, "top": 100, "width": 40, "height": 20},
        }
        await lens.select(mock_page(snapshot(HTML, BODY, PARAGRAPH, selection=selection)), 150, 110)
        await lens.settle()

        [pinned] = lens.pinned
        assert pinned.position == (100, 124)
        assert pinned.selected_text == "Hello"
        assert lens.rows(pinned.id)[0].value == "Arial, sans-serif"

    @pytest.mark.asyncio
    async def test_escape_keeps_pinned_and_notifies_host(self):
        lens = make_lens()
        lens.toggle()
        selection = {"text": "Hello", "chain": [HTML, BODY, PARAGRAPH], "rect": None}
        await lens.select(mock_page(snapshot(HTML, BODY, PARAGRAPH, selection=selection)), 150, 110)
        await lens.settle()

        lens.press("Escape")

        assert lens.controller.phase is Phase.IDLE
        assert not lens.controller.active
        assert len(lens.pinned) == 1
        assert lens.host.actions() == ["deactivateExtension"]

    @pytest.mark.asyncio
    async def test_toggle_off_clears_everything(self):
        lens = make_lens()
        lens.toggle()
        selection = {"text": "Hello", "chain": [HTML, BODY, PARAGRAPH], "rect": None}
        await lens.select(mock_page(snapshot(HTML, BODY, PARAGRAPH, selection=selection)), 150, 110)
        await lens.settle()

        response = lens.toggle()

        assert response == {"success": True, "isActive": False}
        assert lens.pinned == []
        assert lens.floating is None


class TestAsyncioScheduling:
    @pytest.mark.asyncio
    async def test_default_scheduler_runs_on_event_loop(self):
        lens = FontLens()
        lens.toggle()
        await lens.hover(mock_page(snapshot(HTML, BODY, PARAGRAPH)), 150, 110)
        await lens.settle()

        assert lens.floating.visible
        assert lens.rows()[0].value == "Arial, sans-serif"
