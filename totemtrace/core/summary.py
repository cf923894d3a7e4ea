"""End-of-session summary and rank thresholds.

The summary is what the export collaborator renders into a shareable
image; it is built from a ledger snapshot and never touches the engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from totemtrace.core.ledger import LedgerSnapshot

DEFAULT_PLAYER_NAME = "Player"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')


@dataclass(frozen=True)
class Rank:
    label: str
    min_score: int


def rank_for(score: int, thresholds: Sequence[Rank]) -> Optional[Rank]:
    """Return the highest rank whose threshold the score reaches.

    Returns None when no thresholds are configured.
    """
    best: Optional[Rank] = None
    for rank in thresholds:
        if score >= rank.min_score and (best is None or rank.min_score > best.min_score):
            best = rank
    return best


@dataclass(frozen=True)
class SessionSummary:
    player_name: str
    profile_title: str
    per_tier: Mapping[str, int] = field(default_factory=dict)
    total_clicks: int = 0
    correct_clicks: int = 0
    accuracy: int = 0
    rank: Optional[Rank] = None

    @property
    def total_score(self) -> int:
        return sum(self.per_tier.values())

    @classmethod
    def from_ledger(
        cls,
        ledger: LedgerSnapshot,
        *,
        profile_title: str,
        ranks: Sequence[Rank] = (),
        player_name: str = "",
    ) -> "SessionSummary":
        name = player_name.strip() or DEFAULT_PLAYER_NAME
        return cls(
            player_name=name,
            profile_title=profile_title,
            per_tier=dict(ledger.per_tier),
            total_clicks=ledger.total_clicks,
            correct_clicks=ledger.correct_clicks,
            accuracy=ledger.accuracy,
            rank=rank_for(ledger.total_score, ranks),
        )

    def export_filename(self, suffix: str = ".png") -> str:
        parts = [self.profile_title, self.player_name, str(self.total_score)]
        stem = "_".join(_UNSAFE_FILENAME_CHARS.sub("_", p.strip()) for p in parts)
        return f"{stem}{suffix}"
