"""Feedback cues for the desktop app."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtWidgets import QApplication

from totemtrace.core.feedback import LoggingFeedback


class QtFeedback(LoggingFeedback):
    """Beeps on mistakes and at the end of a session, and notifies the window."""

    def __init__(self, on_cue: Optional[Callable[[str], None]] = None) -> None:
        self._on_cue = on_cue

    def wrong(self) -> None:
        super().wrong()
        QApplication.beep()
        self._notify("wrong")

    def round_complete(self) -> None:
        super().round_complete()
        self._notify("round_complete")

    def session_end(self) -> None:
        super().session_end()
        QApplication.beep()
        self._notify("session_end")

    def _notify(self, cue: str) -> None:
        if self._on_cue is not None:
            self._on_cue(cue)
