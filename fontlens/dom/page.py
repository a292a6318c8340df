"""PageDom — a HeadlessDom refreshed from a live Playwright page."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from fontlens.core.errors import DomAccessError
from fontlens.core.types import Rect
from fontlens.dom.headless import HeadlessDom, HeadlessNode, HeadlessText

logger = logging.getLogger(__name__)

# Serializes the element under (x, y) and the selection's common ancestor as
# root-to-leaf chains. Element keys live in a WeakMap so the same element keeps
# its key across snapshots without touching the document.
_SNAPSHOT_JS = """(point) => {
    const PROPS = [
        'display', 'visibility', 'opacity', 'font-family', 'font-size',
        'font-weight', 'line-height', 'letter-spacing', 'text-align', 'color',
    ];
    if (!window.__fontlensKeys) {
        window.__fontlensKeys = new WeakMap();
        window.__fontlensNextKey = 1;
    }
    const keys = window.__fontlensKeys;

    function keyOf(el) {
        if (!keys.has(el)) keys.set(el, window.__fontlensNextKey++);
        return keys.get(el);
    }

    function serialize(el) {
        const computed = window.getComputedStyle(el);
        const style = {};
        for (const prop of PROPS) style[prop] = computed.getPropertyValue(prop);
        const r = el.getBoundingClientRect();
        const texts = [];
        for (const child of el.childNodes) {
            if (child.nodeType === Node.TEXT_NODE) texts.push(child.textContent);
        }
        return {
            key: keyOf(el),
            tag: el.tagName,
            style,
            rect: {left: r.left, top: r.top, width: r.width, height: r.height},
            texts,
            text: el.textContent,
        };
    }

    function chainOf(el) {
        const chain = [];
        while (el && el.nodeType === Node.ELEMENT_NODE) {
            chain.unshift(serialize(el));
            el = el.parentElement;
        }
        return chain;
    }

    const target = document.elementFromPoint(point.x, point.y);
    const result = {
        viewport: {width: window.innerWidth, height: window.innerHeight},
        target: target ? chainOf(target) : chainOf(document.body),
        hit: !!target,
        selection: null,
    };

    const sel = window.getSelection();
    const text = sel ? sel.toString() : '';
    if (text.trim() && sel.rangeCount > 0) {
        const range = sel.getRangeAt(0);
        let anchor = range.commonAncestorContainer;
        if (anchor.nodeType !== Node.ELEMENT_NODE) anchor = anchor.parentElement;
        const rects = range.getClientRects();
        const last = rects.length ? rects[rects.length - 1] : null;
        result.selection = {
            text,
            chain: anchor ? chainOf(anchor) : [],
            rect: last ? {left: last.left, top: last.top, width: last.width, height: last.height} : null,
        };
    }
    return result;
}"""


def _rect(raw: dict | None) -> Rect | None:
    if not raw:
        return None
    return Rect(
        float(raw.get("left", 0)),
        float(raw.get("top", 0)),
        float(raw.get("width", 0)),
        float(raw.get("height", 0)),
    )


class PageDom(HeadlessDom):
    """
    A read-only mirror of the parts of a page the inspector looks at.

    Usage:
        dom = PageDom()
        target = await dom.refresh(page, 200, 150)

    Each refresh() replaces the mirrored tree; nodes from an earlier snapshot
    are marked detached, so reading them raises DomAccessError.
    """

    def __init__(self) -> None:
        self._nodes: dict[Any, HeadlessNode] = {}
        super().__init__()

    async def refresh(self, page: Page, x: float, y: float) -> HeadlessNode | None:
        """Snapshot the page around (x, y). Returns the element under the point."""
        try:
            raw = await page.evaluate(_SNAPSHOT_JS, {"x": x, "y": y})
        except PlaywrightError as exc:
            raise DomAccessError(f"Could not read page at ({x}, {y}): {exc}") from exc
        return self.load(raw or {})

    def load(self, raw: dict) -> HeadlessNode | None:
        """Replace the mirrored tree with a serialized snapshot."""
        for node in self._nodes.values():
            node.detached = True
        self._nodes = {}

        viewport = raw.get("viewport") or {}
        self.set_viewport(float(viewport.get("width", 0)), float(viewport.get("height", 0)))

        target = self._load_chain(raw.get("target") or [])

        selection = raw.get("selection")
        if selection:
            anchor = self._load_chain(selection.get("chain") or [])
            self.select(selection.get("text", ""), anchor, _rect(selection.get("rect")))
        else:
            self.clear_selection()

        logger.debug("Loaded page snapshot with %d elements", len(self._nodes))
        return target if raw.get("hit") else None

    def _load_chain(self, chain: list[dict]) -> HeadlessNode | None:
        parent: HeadlessNode | None = None
        for raw in chain:
            key = raw["key"]
            node = self._nodes.get(key)
            if node is None:
                node = HeadlessNode(
                    tag=str(raw.get("tag", "")).upper(),
                    key=key,
                    style=dict(raw.get("style") or {}),
                    rect=_rect(raw.get("rect")) or Rect(0, 0, 0, 0),
                    parent=parent,
                    text=raw.get("text"),
                )
                node.children = [HeadlessText(t, parent=node) for t in raw.get("texts", [])]
                if parent is not None:
                    parent.children.append(node)
                self._nodes[key] = node
                if node.tag == "HTML":
                    self._html = node
                elif node.tag == "BODY":
                    self._body = node
            parent = node
        return parent
