"""
Scheduler Module - Deferred callbacks for timed engine steps.

The engine never sleeps. Waits (auto-solve pacing, the completion delay)
are callbacks scheduled on a Scheduler so the event loop stays responsive
to stop requests while a wait is pending.
"""

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running, if it has not run yet."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """True while the callback is still pending."""
        pass


class Scheduler(ABC):
    """
    Abstract timer source.

    Implementations run callbacks on the same thread as the caller's
    event loop.
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """
        Run callback once after delay seconds.

        Args:
            delay: Seconds to wait (>= 0)
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the call
        """
        pass


class _ManualCall(ScheduledCall):
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False
        self._fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def fire(self) -> None:
        self._fired = True
        self.callback()


class ManualScheduler(Scheduler):
    """
    Scheduler driven by an explicit clock.

    Nothing runs until advance() or run_next() is called, which lets
    headless code and tests single-step timed sequences.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(1.2, step)
        scheduler.advance(1.2)   # step() runs here
    """

    def __init__(self):
        self._now = 0.0
        self._queue: List[Tuple[float, int, _ManualCall]] = []
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        """Current clock value in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for _, _, call in self._queue if call.active)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    def next_due(self) -> float:
        """Due time of the earliest pending callback (inf if none)."""
        self._drop_inactive()
        return self._queue[0][0] if self._queue else float("inf")

    def run_next(self) -> bool:
        """
        Jump the clock to the earliest pending callback and run it.

        Returns:
            True if a callback ran
        """
        self._drop_inactive()
        if not self._queue:
            return False
        due, _, call = heapq.heappop(self._queue)
        self._now = max(self._now, due)
        call.fire()
        return True

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due.

        Callbacks scheduled by callbacks also run if they fall inside the
        window.

        Returns:
            Number of callbacks run
        """
        target = self._now + seconds
        ran = 0
        while self.next_due() <= target:
            self.run_next()
            ran += 1
        self._now = target
        return ran

    def run_all(self, limit: int = 10000) -> int:
        """Run callbacks until none remain (bounded by limit)."""
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran

    def _drop_inactive(self) -> None:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)
