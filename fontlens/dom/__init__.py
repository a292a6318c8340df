from fontlens.dom.base import DomSurface, Listener
from fontlens.dom.headless import HeadlessDom, HeadlessNode, HeadlessText, normalize_css_color
from fontlens.dom.page import PageDom

__all__ = [
    "DomSurface",
    "HeadlessDom",
    "HeadlessNode",
    "HeadlessText",
    "Listener",
    "PageDom",
    "normalize_css_color",
]
