"""Scheduler implementation backed by the Qt event loop."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    def __init__(self, timer: QTimer, single_shot: bool) -> None:
        self._timer: Optional[QTimer] = timer
        if single_shot:
            timer.timeout.connect(self._finished)

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _finished(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtScheduler:
    """Hands deferred engine callbacks to QTimer; timers are parented to ``parent``."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def call_later(self, delay: float, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(delay, callback, single_shot=True)

    def call_every(self, interval: float, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(interval, callback, single_shot=False)

    def _start(self, seconds: float, callback: Callable[[], None], single_shot: bool) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, int(round(seconds * 1000))))
        timer.timeout.connect(callback)
        handle = QtTimerHandle(timer, single_shot)
        timer.start()
        return handle
