from fontlens.host.base import Host, search_request
from fontlens.host.memory import MemoryHost

__all__ = ["Host", "MemoryHost", "search_request"]
