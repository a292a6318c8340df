"""Abstract DOM read surface the inspection engine depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from typing import Any, Callable

from fontlens.core.types import Rect

Listener = Callable[[Any], None]


class DomSurface(ABC):
    """
    Narrow capability interface over a document.

    Nodes are opaque to the engine: it only ever passes them back into the
    surface that produced them. Implementations raise DomAccessError when a
    read cannot be served (detached node, closed page).
    """

    # ------------------------------------------------------------------
    # Node identity
    # ------------------------------------------------------------------

    @abstractmethod
    def is_element(self, node: Any) -> bool: ...

    @abstractmethod
    def tag_name(self, node: Any) -> str:
        """Upper-case tag name, e.g. ``"P"``."""

    @abstractmethod
    def node_key(self, node: Any) -> Hashable:
        """Identity that survives re-reads of the same element."""

    @abstractmethod
    def parent_element(self, node: Any) -> Any | None: ...

    def element_for(self, node: Any) -> Any | None:
        """The node itself when it is an element, else its parent element (text nodes)."""
        if node is None:
            return None
        if self.is_element(node):
            return node
        return self.parent_element(node)

    def contains(self, ancestor: Any, node: Any) -> bool:
        """True when ``node`` is ``ancestor`` or one of its descendants."""
        if ancestor is None or node is None:
            return False
        key = self.node_key(ancestor)
        current = self.element_for(node)
        while current is not None:
            if self.node_key(current) == key:
                return True
            current = self.parent_element(current)
        return False

    @abstractmethod
    def document_element(self) -> Any | None: ...

    @abstractmethod
    def body(self) -> Any | None: ...

    # ------------------------------------------------------------------
    # Style, geometry, text
    # ------------------------------------------------------------------

    @abstractmethod
    def resolved_style(self, node: Any) -> Mapping[str, str]:
        """Post-cascade computed style keyed by CSS property name (``font-family``)."""

    @abstractmethod
    def bounding_rect(self, node: Any) -> Rect: ...

    @abstractmethod
    def direct_text_nodes(self, node: Any) -> list[str]:
        """Text of the node's immediate text-node children, in order."""

    @abstractmethod
    def text_content(self, node: Any) -> str: ...

    @abstractmethod
    def viewport(self) -> Rect: ...

    @abstractmethod
    def normalize_color(self, value: str) -> str:
        """Let the style engine turn any CSS color into ``rgb()``/``rgba()``."""

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @abstractmethod
    def selection_text(self) -> str: ...

    @abstractmethod
    def selection_anchor(self) -> Any | None:
        """Element containing the whole selection (common ancestor), if any."""

    def selection_rect(self) -> Rect | None:
        """Client rect of the last selected line, if the surface can report it."""
        return None

    # ------------------------------------------------------------------
    # Document listeners
    # ------------------------------------------------------------------

    @abstractmethod
    def add_listener(self, event_type: str, listener: Listener) -> None: ...

    @abstractmethod
    def remove_listener(self, event_type: str, listener: Listener) -> None: ...
