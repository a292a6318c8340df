"""MemoryHost — records host traffic in memory."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from fontlens.core.errors import HostContextError
from fontlens.core.types import HostAction
from fontlens.host.base import ClipboardCallback, Host

logger = logging.getLogger(__name__)

_DEFAULT_SEARCH_URL = "https://www.google.com/search?q="


class MemoryHost(Host):
    """
    Host that keeps every message, the clipboard and opened search URLs.

    Set ``clipboard_error`` to make clipboard writes fail, or call close() to
    simulate the embedding context going away.
    """

    def __init__(self, *, search_url: str = _DEFAULT_SEARCH_URL) -> None:
        self.messages: list[dict[str, Any]] = []
        self.search_urls: list[str] = []
        self.clipboard: str = ""
        self.clipboard_error: Exception | None = None
        self._search_url = search_url
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def post_message(self, message: dict[str, Any]) -> None:
        if self._closed:
            raise HostContextError("Host context invalidated")
        self.messages.append(dict(message))
        if message.get("action") == HostAction.SEARCH_FONT_FAMILY.value:
            url = self._search_url + quote(message.get("fontFamily", ""))
            self.search_urls.append(url)
            logger.info("Search requested: %s", url)

    def write_clipboard(self, text: str, on_done: ClipboardCallback) -> None:
        if self._closed:
            raise HostContextError("Host context invalidated")
        if self.clipboard_error is not None:
            on_done(self.clipboard_error)
            return
        self.clipboard = text
        on_done(None)

    def actions(self) -> list[str]:
        return [m.get("action", "") for m in self.messages]
