"""Abstract host boundary — messaging and clipboard provided by the embedding page."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from fontlens.core.types import HostAction

ClipboardCallback = Callable[[Exception | None], None]


class Host(ABC):
    """
    What the inspection engine needs from its embedder.

    post_message() is fire-and-forget. write_clipboard() completes through
    ``on_done`` with ``None`` on success or the failure. Implementations raise
    HostContextError when the embedding context is gone.
    """

    @abstractmethod
    def post_message(self, message: dict[str, Any]) -> None: ...

    @abstractmethod
    def write_clipboard(self, text: str, on_done: ClipboardCallback) -> None: ...


def search_request(font_family: str) -> dict[str, Any]:
    return {"action": HostAction.SEARCH_FONT_FAMILY.value, "fontFamily": font_family}
