from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

TIER_KEYS: Tuple[str, ...] = ("BASIC", "ADVANCED", "LUXURY", "CHAOS")

STRUCTURED = "structured"
CHAOS = "chaos"

# CHAOS always lays out 12 cards and may consume up to 7 distinct symbols.
CHAOS_TOTAL_CARDS = 12
CHAOS_SYMBOLS_NEEDED = 7


@dataclass(frozen=True)
class Tier:
    key: str
    name: str
    order: int
    family: str
    total_cards: int
    target_types: int
    point_value: int
    columns: int = 3
    icon: str = ""

    @property
    def is_chaos(self) -> bool:
        return self.family == CHAOS

    @property
    def required_selections(self) -> Optional[int]:
        """Correct clicks needed to finish a round; None when decided per round."""
        if self.is_chaos:
            return None
        return self.target_types * 2

    @property
    def decoy_count(self) -> int:
        """Single-copy decoy cards in a structured layout."""
        if self.is_chaos:
            return 0
        return self.total_cards - self.target_types * 2


class SymbolPool:
    """Ordered, immutable set of distinct symbols a layout may draw from."""

    def __init__(self, symbols: Iterable[str]) -> None:
        items = tuple(symbols)
        if len(set(items)) != len(items):
            raise ValueError("Symbol pool contains duplicate symbols")
        self._symbols = items

    @property
    def symbols(self) -> Tuple[str, ...]:
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._symbols

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolPool):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolPool({list(self._symbols)!r})"


class LevelCatalog:
    """Static table of the four difficulty tiers, ordered by rank."""

    def __init__(self, tiers: Iterable[Tier]) -> None:
        ordered = sorted(tiers, key=lambda t: t.order)
        self._tiers = {tier.key: tier for tier in ordered}
        if len(self._tiers) != len(ordered):
            raise ValueError("Tier keys must be unique")

    def all(self) -> List[Tier]:
        return list(self._tiers.values())

    def get(self, key: str) -> Tier:
        return self._tiers[key]

    def keys(self) -> List[str]:
        return list(self._tiers)

    def first(self) -> Tier:
        return next(iter(self._tiers.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._tiers

    def __len__(self) -> int:
        return len(self._tiers)
