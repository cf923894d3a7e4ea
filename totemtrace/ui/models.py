"""Data models used by the UI, derived from engine snapshots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from totemtrace.core.levels import LevelCatalog, Tier
from totemtrace.core.progress import can_select
from totemtrace.core.session import SessionSnapshot


@dataclass
class TierButtonState:
    """UI state for one tier button: lock status and selection."""

    tier: Tier
    unlocked: bool
    is_current: bool = False

    @property
    def label(self) -> str:
        if self.tier.icon:
            return f"{self.tier.icon} {self.tier.name}"
        return self.tier.name


@dataclass
class CardState:
    """UI state for one card in the grid."""

    index: int
    symbol: str
    selected: bool = False
    masked: bool = False

    @property
    def clickable(self) -> bool:
        return not (self.selected or self.masked)


def tier_button_states(catalog: LevelCatalog, snapshot: SessionSnapshot) -> List[TierButtonState]:
    return [
        TierButtonState(
            tier=tier,
            unlocked=can_select(tier, snapshot.highest_order),
            is_current=tier.key == snapshot.tier,
        )
        for tier in catalog.all()
    ]


def card_states(snapshot: SessionSnapshot) -> List[CardState]:
    selected = set(snapshot.selection)
    masked = set(snapshot.masked_symbols)
    return [
        CardState(
            index=i,
            symbol=card.symbol,
            selected=card.identity in selected,
            masked=card.symbol in masked,
        )
        for i, card in enumerate(snapshot.cards)
    ]


def format_clock(seconds: float) -> str:
    """Whole seconds left, rounded up so the display only reads 0s at expiry."""
    return f"{max(0, math.ceil(seconds - 1e-9))}s"
