"""Exception hierarchy for FontLens."""

from __future__ import annotations


class FontLensError(Exception):
    """Base class for recoverable inspection failures."""


class DomAccessError(FontLensError):
    """A read from the DOM surface failed (node detached, page closed, ...)."""


class HostContextError(FontLensError):
    """The hosting context went away while the session was active."""
