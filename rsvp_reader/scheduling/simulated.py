"""Deterministic virtual-clock scheduler for tests and offline timing.

WHY: Real timers make pacing tests slow and flaky. A virtual clock lets a
test advance time explicitly and assert on exact firing times, including
the effect of host timer slop on drift correction.

HOW: Pending timers live in a heap ordered by (due time, sequence
number). ``advance()`` pops due timers one at a time, moves the clock to
each timer's due time, and runs it; timers scheduled by a callback join
the heap and fire in the same advance if they fall inside the window.
``latency_ms`` is added to every due time to model a host that fires late.

RULES:
- Timers fire in due-time order; ties fire in scheduling order
- The clock never moves backwards; negative advances raise ValueError
- A cancelled timer never fires and no longer counts as pending
- Negative delays are treated as 0
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable

from rsvp_reader.scheduling.base import Scheduler


@dataclass(order=True)
class SimulatedTimer:
    """A pending callback on the virtual clock."""

    due_ms: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class SimulatedScheduler(Scheduler):
    """Scheduler driven by explicit ``advance()`` calls.

    Example:
        scheduler = SimulatedScheduler(latency_ms=4.0)
        engine = PlaybackEngine(scheduler=scheduler)
        engine.load_text("one two three")
        engine.start()
        scheduler.advance(250)
    """

    def __init__(self, latency_ms: float = 0.0, start_ms: float = 0.0) -> None:
        self.latency_ms = latency_ms
        self._now = start_ms
        self._heap: list[SimulatedTimer] = []
        self._counter = itertools.count()
        self.fired_at: list[float] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> SimulatedTimer:
        timer = SimulatedTimer(
            due_ms=self._now + max(0.0, delay_ms) + self.latency_ms,
            seq=next(self._counter),
            callback=callback,
        )
        heapq.heappush(self._heap, timer)
        return timer

    @property
    def pending_count(self) -> int:
        """Number of timers that are neither fired nor cancelled."""
        return sum(1 for timer in self._heap if not timer.cancelled)

    def next_due(self) -> float | None:
        """Due time of the earliest live timer, or None."""
        self._drop_cancelled()
        return self._heap[0].due_ms if self._heap else None

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms``, firing every timer that falls due.

        Returns:
            Number of callbacks run.
        """
        if ms < 0:
            raise ValueError("Cannot advance the clock by a negative amount ({}).".format(ms))
        target = self._now + ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self._fire_next()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, limit_ms: float | None = None) -> int:
        """Fire timers until none are pending.

        Args:
            limit_ms: Stop once the next timer would fire more than this many
                      milliseconds after the current time. None means no limit.

        Returns:
            Number of callbacks run.
        """
        deadline = None if limit_ms is None else self._now + limit_ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or (deadline is not None and due > deadline):
                break
            self._fire_next()
            fired += 1
        return fired

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)

    def _fire_next(self) -> None:
        timer = heapq.heappop(self._heap)
        self._now = max(self._now, timer.due_ms)
        self.fired_at.append(self._now)
        timer.callback()
