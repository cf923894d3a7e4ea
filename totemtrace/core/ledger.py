from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from totemtrace.core.levels import Tier


def accuracy_percent(correct_clicks: int, total_clicks: int) -> int:
    """Correct clicks as a whole percentage, rounded half up; 0 with no clicks."""
    if total_clicks <= 0:
        return 0
    return (correct_clicks * 200 + total_clicks) // (total_clicks * 2)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Read-only copy of the ledger handed to the presentation layer."""

    per_tier: Mapping[str, int] = field(default_factory=dict)
    total_clicks: int = 0
    correct_clicks: int = 0

    @property
    def accuracy(self) -> int:
        return accuracy_percent(self.correct_clicks, self.total_clicks)

    @property
    def total_score(self) -> int:
        return sum(self.per_tier.values())


class ScoreLedger:
    """Per-tier score plus global click counters for one session.

    The total score is always derived from the per-tier entries, never
    stored on its own.
    """

    def __init__(self, tier_keys: Iterable[str]) -> None:
        self._tier_keys = tuple(tier_keys)
        self._per_tier: dict[str, int] = {key: 0 for key in self._tier_keys}
        self._total_clicks = 0
        self._correct_clicks = 0

    @property
    def total_clicks(self) -> int:
        return self._total_clicks

    @property
    def correct_clicks(self) -> int:
        return self._correct_clicks

    @property
    def accuracy(self) -> int:
        return accuracy_percent(self._correct_clicks, self._total_clicks)

    @property
    def total_score(self) -> int:
        return sum(self._per_tier.values())

    def score_for(self, tier_key: str) -> int:
        return self._per_tier[tier_key]

    def record_click(self, correct: bool) -> None:
        self._total_clicks += 1
        if correct:
            self._correct_clicks += 1

    def award_round_completion(self, tier: Tier) -> int:
        """Add the tier's point value to its entry and return the new entry."""
        if tier.key not in self._per_tier:
            raise KeyError(tier.key)
        self._per_tier[tier.key] += tier.point_value
        return self._per_tier[tier.key]

    def reset(self) -> None:
        self._per_tier = {key: 0 for key in self._tier_keys}
        self._total_clicks = 0
        self._correct_clicks = 0

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            per_tier=MappingProxyType(dict(self._per_tier)),
            total_clicks=self._total_clicks,
            correct_clicks=self._correct_clicks,
        )
