"""asyncio-backed scheduler for running the engine inside an event loop.

WHY: An event loop is Python's native single-threaded, cooperative timer
host. ``loop.call_later`` is fire-once and its TimerHandle cancels
synchronously, which is exactly the contract the engine needs.

HOW: Delays are converted from milliseconds to seconds for
``loop.call_later``; ``loop.time()`` is the clock. If no loop is passed,
the running loop is looked up on first use, so the scheduler can be built
before ``asyncio.run()`` starts. Calling now() or call_later() with no loop
running raises RuntimeError.

RULES:
- All engine calls must happen on the loop's thread
- Callback exceptions go to the loop's exception handler
"""

from __future__ import annotations

import asyncio
from typing import Callable

from rsvp_reader.scheduling.base import Scheduler, TimerHandle


class AsyncioScheduler(Scheduler):
    """Scheduler that delegates to an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)
