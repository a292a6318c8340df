from fontlens.scheduling.coalescer import EventCoalescer
from fontlens.scheduling.scheduler import AsyncioScheduler, Handle, ManualScheduler, Scheduler

__all__ = ["AsyncioScheduler", "EventCoalescer", "Handle", "ManualScheduler", "Scheduler"]
