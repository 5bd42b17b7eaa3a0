"""Host timer implementations for the playback engine.

WHY: The engine only needs "call this once, later" and "what time is it".
Keeping those behind one interface separates pacing logic from whichever
loop hosts it.

HOW: base.py defines the Scheduler ABC, asyncio_scheduler.py wraps an
asyncio event loop, simulated.py provides a virtual clock for tests.
"""

from rsvp_reader.scheduling.asyncio_scheduler import AsyncioScheduler
from rsvp_reader.scheduling.base import Scheduler, TimerHandle
from rsvp_reader.scheduling.simulated import SimulatedScheduler, SimulatedTimer

__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "SimulatedScheduler",
    "SimulatedTimer",
    "TimerHandle",
]
