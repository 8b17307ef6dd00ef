"""
Qt Scheduler Module - QTimer-backed Scheduler for the GUI event loop.
"""

import logging
from typing import Callable, Set

from PyQt5.QtCore import QObject, QTimer

from tifpuzzle.engine.scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class _TimerCall(ScheduledCall):
    """Single-shot QTimer wrapped as a cancellable handle."""

    def __init__(self, owner: 'QtScheduler', delay: float, callback: Callable[[], None]):
        self._owner = owner
        self._callback = callback
        self._done = False

        self._timer = QTimer(owner.timer_parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(max(int(delay * 1000), 0))

    def cancel(self) -> None:
        if self._done:
            return
        self._timer.stop()
        self._finish()

    @property
    def active(self) -> bool:
        return not self._done

    def _fire(self) -> None:
        if self._done:
            return
        self._finish()
        self._callback()

    def _finish(self) -> None:
        self._done = True
        self._owner._release(self)
        self._timer.deleteLater()


class QtScheduler(Scheduler):
    """
    Runs engine callbacks on the Qt event loop.

    Must be created on the GUI thread, after QApplication. Timers are
    parented to an internal QObject so they are cleaned up with it.
    """

    def __init__(self, parent: QObject = None):
        self._owner = QObject(parent)
        self._calls: Set[_TimerCall] = set()

    @property
    def timer_parent(self) -> QObject:
        return self._owner

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _TimerCall(self, delay, callback)
        self._calls.add(call)
        return call

    def cancel_all(self) -> None:
        """Cancel every pending callback (used on shutdown)."""
        for call in list(self._calls):
            call.cancel()
        logger.debug("All scheduled calls cancelled")

    def _release(self, call: _TimerCall) -> None:
        self._calls.discard(call)
