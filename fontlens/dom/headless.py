"""
HeadlessDom — an in-memory DomSurface.

Holds a small element tree with already-resolved styles and geometry, plus a
minimal CSS color engine so ``normalize_color`` behaves like a browser's
computed ``color`` value. Used to unit-test the engine and as the backing
store that PageDom refreshes from a live page.
"""

from __future__ import annotations

import colorsys
import itertools
import re
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any

from fontlens.core.errors import DomAccessError
from fontlens.core.types import Rect
from fontlens.dom.base import DomSurface, Listener


DEFAULT_STYLE: dict[str, str] = {
    "display": "block",
    "visibility": "visible",
    "opacity": "1",
    "font-family": "Times New Roman",
    "font-size": "16px",
    "font-weight": "400",
    "line-height": "normal",
    "letter-spacing": "normal",
    "text-align": "start",
    "color": "rgb(0, 0, 0)",
}

# Properties a child inherits from its parent when not set explicitly
_INHERITED = (
    "visibility", "font-family", "font-size", "font-weight",
    "line-height", "letter-spacing", "text-align", "color",
)

_NAMED_COLORS: dict[str, tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "aqua": (0, 255, 255),
    "magenta": (255, 0, 255),
    "fuchsia": (255, 0, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "silver": (192, 192, 192),
    "maroon": (128, 0, 0),
    "olive": (128, 128, 0),
    "navy": (0, 0, 128),
    "purple": (128, 0, 128),
    "teal": (0, 128, 128),
    "orange": (255, 165, 0),
    "rebeccapurple": (102, 51, 153),
}

_RGB_FN_RE = re.compile(r"^rgba?\(\s*([\d.]+)[\s,]+([\d.]+)[\s,]+([\d.]+)(?:\s*[,/]\s*([\d.]+%?))?\s*\)$")
_HSL_FN_RE = re.compile(
    r"^hsla?\(\s*([\d.]+)(?:deg)?[\s,]+([\d.]+)%[\s,]+([\d.]+)%(?:\s*[,/]\s*([\d.]+%?))?\s*\)$"
)
_HEX_COLOR_RE = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")


def _format_rgb(r: float, g: float, b: float, alpha: str | None) -> str:
    channels = ", ".join(str(max(0, min(255, int(round(v))))) for v in (r, g, b))
    if alpha is None:
        return f"rgb({channels})"
    if alpha.endswith("%"):
        alpha_value = float(alpha[:-1]) / 100
    else:
        alpha_value = float(alpha)
    if alpha_value >= 1:
        return f"rgb({channels})"
    return f"rgba({channels}, {alpha_value:g})"


def normalize_css_color(value: str) -> str:
    """
    Resolve a CSS color to the browser's computed form.

    Returns ``""`` for values the engine cannot parse, the way an invalid
    declaration leaves nothing to compute.
    """
    text = value.strip().lower()
    if not text:
        return ""
    if text == "transparent":
        return "rgba(0, 0, 0, 0)"
    if text in _NAMED_COLORS:
        return _format_rgb(*_NAMED_COLORS[text], None)

    match = _HEX_COLOR_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        alpha = f"{int(digits[6:8], 16) / 255:.3f}" if len(digits) == 8 else None
        return _format_rgb(r, g, b, alpha)

    match = _RGB_FN_RE.match(text)
    if match:
        r, g, b = (float(match.group(i)) for i in (1, 2, 3))
        return _format_rgb(r, g, b, match.group(4))

    match = _HSL_FN_RE.match(text)
    if match:
        hue = float(match.group(1)) % 360 / 360
        sat = float(match.group(2)) / 100
        light = float(match.group(3)) / 100
        r, g, b = colorsys.hls_to_rgb(hue, light, sat)
        return _format_rgb(r * 255, g * 255, b * 255, match.group(4))

    return ""


@dataclass(eq=False)
class HeadlessText:
    text: str
    parent: HeadlessNode | None = None


@dataclass(eq=False)
class HeadlessNode:
    """An element with resolved style and geometry."""

    tag: str
    key: Hashable
    style: dict[str, str] = field(default_factory=dict)
    rect: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))
    children: list[HeadlessNode | HeadlessText] = field(default_factory=list)
    parent: HeadlessNode | None = None
    detached: bool = False
    text: str | None = None  # full textContent when mirrored from a live page

    def __repr__(self) -> str:
        return f"<{self.tag.lower()} key={self.key!r}>"


class HeadlessDom(DomSurface):
    """
    In-memory document.

    Usage:
        dom = HeadlessDom()
        p = dom.element("p", "Hello world", style={"font-family": "Arial"},
                        rect=Rect(100, 100, 200, 20))
        dom.dispatch(PointerEvent("mouseover", 150, 110, target=p))
    """

    def __init__(self, *, viewport: tuple[float, float] = (1280, 800)) -> None:
        self._keys = itertools.count(1)
        self._listeners: dict[str, list[Listener]] = {}
        self._viewport = Rect(0, 0, viewport[0], viewport[1])
        self._selection_text = ""
        self._selection_anchor: HeadlessNode | None = None
        self._selection_rect: Rect | None = None
        self.reset_tree()

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def reset_tree(self) -> None:
        width, height = self._viewport.width, self._viewport.height
        self._html = HeadlessNode(
            tag="HTML", key=next(self._keys), style=dict(DEFAULT_STYLE),
            rect=Rect(0, 0, width, height),
        )
        self._body = HeadlessNode(
            tag="BODY", key=next(self._keys), style=dict(DEFAULT_STYLE),
            rect=Rect(0, 0, width, height), parent=self._html,
        )
        self._html.children.append(self._body)
        self.clear_selection()

    def element(
        self,
        tag: str,
        *texts: str,
        style: Mapping[str, str] | None = None,
        rect: Rect | None = None,
        parent: HeadlessNode | None = None,
        key: Hashable | None = None,
    ) -> HeadlessNode:
        """Create an element under ``parent`` (default: body) with direct text children."""
        parent = parent or self._body
        resolved = {prop: parent.style.get(prop, DEFAULT_STYLE[prop]) for prop in _INHERITED}
        for prop, value in DEFAULT_STYLE.items():
            resolved.setdefault(prop, value)
        if style:
            resolved.update(style)
        node = HeadlessNode(
            tag=tag.upper(),
            key=key if key is not None else next(self._keys),
            style=resolved,
            rect=rect or Rect(100, 100, 200, 20),
            parent=parent,
        )
        for text in texts:
            node.children.append(HeadlessText(text, parent=node))
        parent.children.append(node)
        return node

    def text(self, parent: HeadlessNode, text: str) -> HeadlessText:
        node = HeadlessText(text, parent=parent)
        parent.children.append(node)
        return node

    def detach(self, node: HeadlessNode) -> None:
        """Remove ``node`` from the tree; later reads raise DomAccessError."""
        if node.parent is not None:
            node.parent.children = [c for c in node.parent.children if c is not node]
        node.detached = True

    def set_viewport(self, width: float, height: float) -> None:
        self._viewport = Rect(0, 0, width, height)

    def select(self, text: str, anchor: HeadlessNode | None = None, rect: Rect | None = None) -> None:
        self._selection_text = text
        self._selection_anchor = anchor
        self._selection_rect = rect

    def clear_selection(self) -> None:
        self.select("", None, None)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: Any) -> None:
        """Deliver ``event`` to every listener registered for ``event.type``."""
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    def add_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    # ------------------------------------------------------------------
    # DomSurface
    # ------------------------------------------------------------------

    def _checked(self, node: Any) -> HeadlessNode:
        if not isinstance(node, HeadlessNode):
            raise DomAccessError(f"Not an element: {node!r}")
        if node.detached:
            raise DomAccessError(f"Element is detached: {node!r}")
        return node

    def is_element(self, node: Any) -> bool:
        return isinstance(node, HeadlessNode)

    def tag_name(self, node: Any) -> str:
        return self._checked(node).tag

    def node_key(self, node: Any) -> Hashable:
        if isinstance(node, HeadlessNode):
            return node.key
        return id(node)

    def parent_element(self, node: Any) -> Any | None:
        if isinstance(node, (HeadlessNode, HeadlessText)):
            return node.parent
        return None

    def document_element(self) -> HeadlessNode:
        return self._html

    def body(self) -> HeadlessNode:
        return self._body

    def resolved_style(self, node: Any) -> Mapping[str, str]:
        return dict(self._checked(node).style)

    def bounding_rect(self, node: Any) -> Rect:
        return self._checked(node).rect

    def direct_text_nodes(self, node: Any) -> list[str]:
        return [c.text for c in self._checked(node).children if isinstance(c, HeadlessText)]

    def text_content(self, node: Any) -> str:
        checked = self._checked(node)
        if checked.text is not None:
            return checked.text
        parts: list[str] = []
        stack: list[HeadlessNode | HeadlessText] = [checked]
        while stack:
            current = stack.pop()
            if isinstance(current, HeadlessText):
                parts.append(current.text)
            else:
                stack.extend(reversed(current.children))
        return "".join(parts)

    def viewport(self) -> Rect:
        return self._viewport

    def normalize_color(self, value: str) -> str:
        return normalize_css_color(value)

    def selection_text(self) -> str:
        return self._selection_text

    def selection_anchor(self) -> HeadlessNode | None:
        return self._selection_anchor

    def selection_rect(self) -> Rect | None:
        return self._selection_rect
