"""InspectableTextClassifier — decides whether a node is text worth inspecting."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from fontlens.core.config import DEFAULT_CONFIG, InspectorConfig
from fontlens.core.errors import DomAccessError
from fontlens.dom.base import DomSurface

logger = logging.getLogger(__name__)

# Structural, media, void, form-control and metadata tags never carry inspectable text
_NON_TEXT_TAGS = frozenset({
    "HTML", "HEAD", "TITLE", "BODY", "SCRIPT", "STYLE", "SVG", "PATH", "IMG", "VIDEO",
    "AUDIO", "CANVAS", "IFRAME", "OBJECT", "EMBED", "NAV", "UL", "OL", "HR", "BR",
    "WBR", "NOSCRIPT", "INPUT", "SELECT", "OPTION", "OPTGROUP", "DATALIST", "OUTPUT",
    "MENU", "ASIDE", "FIGURE", "FIGCAPTION", "MAP", "AREA", "SOURCE", "TRACK", "META",
    "LINK", "BASE", "PARAM", "PROGRESS", "METER", "TIME", "HEADER", "FOOTER", "MAIN",
    "SECTION", "ARTICLE", "DIALOG", "DETAILS", "SUMMARY", "PICTURE", "TEMPLATE",
})

_BLOCK_TEXT_TAGS = frozenset({
    "P", "H1", "H2", "H3", "H4", "H5", "H6", "BLOCKQUOTE", "PRE", "CODE",
})

_INLINE_TEXT_TAGS = frozenset({
    "SPAN", "A", "STRONG", "EM", "B", "I", "U", "SUP", "SUB", "MARK", "SMALL",
    "DEL", "INS", "Q", "ABBR", "CITE", "DFN", "LABEL",
})

_CELL_ITEM_CONTROL_TAGS = frozenset({"TD", "TH", "LI", "DT", "DD", "BUTTON", "TEXTAREA"})

_GENERIC_CONTAINER_TAG = "DIV"

_PUNCTUATION_RE = re.compile(r"""[\s.,;:!?()\[\]{}'"/\\\-_+=<>|&$#@%^*]+""")
_MEANINGFUL_RE = re.compile(r"[a-zA-Z0-9\u4e00-\u9fa5]{3,}")

# text-align values a stylesheet never has to set
_DEFAULT_ALIGNMENTS = frozenset({"", "start", "initial", "inherit"})


class TextClassifier:
    """
    Fail-fast predicate over a DOM node.

    Cheap tag and visibility checks run before geometry, and geometry runs
    before the text heuristics. The result depends only on the node's tag,
    resolved style, geometry and text, so repeated calls agree.
    """

    def __init__(self, dom: DomSurface, config: InspectorConfig = DEFAULT_CONFIG) -> None:
        self._dom = dom
        self._config = config

    def is_inspectable(self, node: Any) -> bool:
        if node is None or not self._dom.is_element(node):
            return False
        try:
            return self._classify(node)
        except DomAccessError as exc:
            logger.warning("Could not classify node: %s", exc)
            return False

    def direct_text_length(self, node: Any) -> int:
        """Sum of trimmed lengths of the node's immediate text children."""
        return sum(len(text.strip()) for text in self._dom.direct_text_nodes(node))

    def _classify(self, node: Any) -> bool:
        cfg = self._config
        tag = self._dom.tag_name(node)

        if tag in _NON_TEXT_TAGS:
            logger.debug("Reject %s: non-text tag", tag)
            return False

        style = self._dom.resolved_style(node)
        if self._is_hidden(style):
            logger.debug("Reject %s: hidden", tag)
            return False

        text = self._dom.text_content(node).strip()
        if not text:
            logger.debug("Reject %s: blank", tag)
            return False

        rect = self._dom.bounding_rect(node)
        if rect.width < cfg.min_element_size or rect.height < cfg.min_element_size:
            logger.debug("Reject %s: too small (%sx%s)", tag, rect.width, rect.height)
            return False

        viewport = self._dom.viewport()
        if (
            rect.top > viewport.height
            or rect.bottom < 0
            or rect.left > viewport.width
            or rect.right < 0
        ):
            logger.debug("Reject %s: outside viewport", tag)
            return False

        if not _MEANINGFUL_RE.search(_PUNCTUATION_RE.sub("", text)):
            logger.debug("Reject %s: no meaningful text in %r", tag, text[:30])
            return False

        direct = self.direct_text_length(node)

        if tag in _BLOCK_TEXT_TAGS and direct >= cfg.min_direct_text:
            logger.debug("Accept %s: block text (%d chars)", tag, direct)
            return True

        if tag in _INLINE_TEXT_TAGS and direct >= cfg.min_direct_text:
            logger.debug("Accept %s: inline text (%d chars)", tag, direct)
            return True

        if tag in _CELL_ITEM_CONTROL_TAGS and direct >= cfg.min_direct_text:
            logger.debug("Accept %s: cell/item/control text (%d chars)", tag, direct)
            return True

        if tag == _GENERIC_CONTAINER_TAG:
            return self._accept_container(node, style, direct)

        logger.debug("Reject %s: no rule matched", tag)
        return False

    def _accept_container(self, node: Any, style: Mapping[str, str], direct: int) -> bool:
        cfg = self._config
        if direct >= cfg.rich_container_text:
            logger.debug("Accept DIV: rich text container (%d chars)", direct)
            return True
        if (
            self._has_own_font_family(node, style)
            and style.get("text-align", "") not in _DEFAULT_ALIGNMENTS
            and direct >= cfg.styled_container_text
        ):
            logger.debug("Accept DIV: styled like a text container (%d chars)", direct)
            return True
        logger.debug("Reject DIV: %d direct chars", direct)
        return False

    def _has_own_font_family(self, node: Any, style: Mapping[str, str]) -> bool:
        family = style.get("font-family", "")
        if not family or family == "inherit":
            return False
        parent = self._dom.parent_element(node)
        if parent is None:
            return True
        return self._dom.resolved_style(parent).get("font-family", "") != family

    @staticmethod
    def _is_hidden(style: Mapping[str, str]) -> bool:
        if style.get("display") == "none" or style.get("visibility") == "hidden":
            return True
        try:
            opacity = float(style.get("opacity", "1"))
        except ValueError:
            return False
        return round(opacity, 2) == 0
