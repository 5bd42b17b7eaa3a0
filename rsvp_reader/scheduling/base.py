"""Abstract host timer used by the playback engine.

WHY: The engine's pacing and drift correction depend on a fire-once,
cancellable timer and a clock. Hiding both behind a small interface lets
the same engine run on an asyncio loop in an application and on a virtual
clock in tests, where every firing time is exact.

HOW: Scheduler is an ABC with two requirements: ``now()`` returns a
monotonic time in milliseconds, and ``call_later()`` arranges a callback
and returns a handle with a ``cancel()`` method.

RULES:
- All times are float milliseconds
- ``cancel()`` is synchronous: once it returns, the callback never runs
- Cancelling an already fired or already cancelled handle is a no-op
- Callbacks run on the scheduler's own thread of control, one at a time

To add a new host timer:
1. Subclass Scheduler in a new module under scheduling/
2. Implement now() and call_later()
3. Export it from scheduling/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Anything returned by ``call_later`` that can be cancelled."""

    def cancel(self) -> None:
        ...


class Scheduler(ABC):
    """Abstract fire-once timer plus monotonic clock."""

    @abstractmethod
    def now(self) -> float:
        """Current monotonic time in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once, ``delay_ms`` milliseconds from now.

        Args:
            delay_ms: Requested delay. Real hosts usually fire a little
                      late, occasionally early.
            callback: Zero-argument callable.

        Returns:
            A handle whose ``cancel()`` prevents the callback from running.
        """
