"""Cancellable deferred callbacks.

The round engine never sleeps or spawns threads. Anything that happens
"later" (fault recovery, round regeneration, the session clock) is handed
to a :class:`Scheduler` and returns a :class:`TimerHandle` that the owner
cancels when a newer event supersedes it.

``ManualScheduler`` runs on virtual time and is used by tests and headless
drivers; the Qt application uses ``totemtrace.ui.qt_scheduler.QtScheduler``.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle returned by :class:`ManualScheduler`."""

    def __init__(self, callback: Callable[[], None], interval: Optional[float]) -> None:
        self._callback = callback
        self._interval = interval
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def interval(self) -> Optional[float]:
        return self._interval

    def _fire(self) -> None:
        if self._interval is None:
            self._active = False
        self._callback()

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """Virtual-time scheduler: nothing fires until :meth:`advance` is called."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        timer = ManualTimer(callback, None)
        heapq.heappush(self._queue, (self._now + delay, next(self._seq), timer))
        return timer

    def call_every(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        timer = ManualTimer(callback, interval)
        heapq.heappush(self._queue, (self._now + interval, next(self._seq), timer))
        return timer

    def pending(self) -> int:
        """Number of timers that are still scheduled."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def advance(self, seconds: float) -> None:
        """Move virtual time forward, firing due callbacks in due-time order."""
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount: {seconds}")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._now = max(self._now, due)
            if timer.interval is not None:
                heapq.heappush(self._queue, (due + timer.interval, next(self._seq), timer))
            timer._fire()
        self._now = target
