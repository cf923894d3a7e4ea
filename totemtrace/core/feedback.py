"""Feedback cue collaborator (sounds, flashes, haptics).

Cues are fire-and-forget: the engine never looks at a return value and a
cue that fails must not break a round.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class FeedbackCues(Protocol):
    def click(self) -> None: ...

    def correct(self) -> None: ...

    def wrong(self) -> None: ...

    def round_complete(self) -> None: ...

    def session_end(self) -> None: ...


class LoggingFeedback:
    """Default cue sink: records each cue in the debug log."""

    def click(self) -> None:
        logger.debug("cue: click")

    def correct(self) -> None:
        logger.debug("cue: correct")

    def wrong(self) -> None:
        logger.debug("cue: wrong")

    def round_complete(self) -> None:
        logger.debug("cue: round complete")

    def session_end(self) -> None:
        logger.debug("cue: session end")


def emit(feedback: FeedbackCues, cue: str) -> None:
    """Invoke a cue by name, logging instead of propagating any failure."""
    try:
        getattr(feedback, cue)()
    except Exception:
        logger.exception("Feedback cue %r failed", cue)
