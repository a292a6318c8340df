"""StyleSampler — reads resolved typography and foreground color from a node."""

from __future__ import annotations

import logging
import re
from typing import Any

from fontlens.color.convert import color_snapshot
from fontlens.core.errors import DomAccessError
from fontlens.core.types import ColorSnapshot, StyleSnapshot, TooltipContent
from fontlens.dom.base import DomSurface

logger = logging.getLogger(__name__)

_QUOTES_RE = re.compile(r"""['"]""")
_RGB_RE = re.compile(r"rgba?\(\s*(\d+)[\s,]+(\d+)[\s,]+(\d+)")


class StyleSampler:
    """Normalizes a node's resolved style into snapshots. Never raises for bad input."""

    def __init__(self, dom: DomSurface) -> None:
        self._dom = dom

    def sample(self, node: Any) -> StyleSnapshot | None:
        if node is None or not self._dom.is_element(node):
            return None
        try:
            style = self._dom.resolved_style(node)
        except DomAccessError as exc:
            logger.warning("Could not read style: %s", exc)
            return None
        return StyleSnapshot(
            font_family=_QUOTES_RE.sub("", style.get("font-family", "")),
            font_size=style.get("font-size", ""),
            font_weight=style.get("font-weight", ""),
            line_height=style.get("line-height", ""),
            letter_spacing=style.get("letter-spacing", ""),
            text_align=style.get("text-align", ""),
        )

    def sample_color(self, node: Any) -> ColorSnapshot | None:
        if node is None or not self._dom.is_element(node):
            return None
        try:
            raw = self._dom.resolved_style(node).get("color", "")
            normalized = self._dom.normalize_color(raw)
        except DomAccessError as exc:
            logger.warning("Could not read color: %s", exc)
            return None

        match = _RGB_RE.search(normalized)
        if match is None:
            logger.debug("Unparseable color %r (normalized %r)", raw, normalized)
            return None
        r, g, b = (int(match.group(i)) for i in (1, 2, 3))
        return color_snapshot(r, g, b)

    def sample_content(self, node: Any) -> TooltipContent:
        return TooltipContent(style=self.sample(node), color=self.sample_color(node))
