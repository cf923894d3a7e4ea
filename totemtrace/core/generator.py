"""Card layout generation for every tier.

Two families of tiers exist:

* **Structured** (BASIC, ADVANCED, LUXURY) – ``target_types`` symbols are
  drawn as targets and placed twice each; the remaining slots are filled
  with distinct single-copy decoys. The player must collect every copy
  of every target.
* **Chaos** – an unbiased coin picks one of two rules per round:
  ``FIND_UNIQUE`` (five pairs plus two singletons, the singletons are the
  targets) or ``FIND_TRIPLET`` (one triplet, four pairs and a singleton,
  the triplet is the target).

Solvability is guaranteed by construction: the target cards placed are
always exactly the number of selections required.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from totemtrace.core.levels import SymbolPool, Tier

logger = logging.getLogger(__name__)


class ChaosMode(str, Enum):
    FIND_UNIQUE = "FIND_UNIQUE"
    FIND_TRIPLET = "FIND_TRIPLET"


@dataclass(frozen=True)
class Card:
    """A single card; identity is unique per card, not per symbol."""

    identity: int
    symbol: str


@dataclass(frozen=True)
class Layout:
    tier_key: str
    cards: Tuple[Card, ...]
    target_symbols: FrozenSet[str]
    required_count: int
    chaos_mode: Optional[ChaosMode] = None

    def __len__(self) -> int:
        return len(self.cards)

    def symbols(self) -> List[str]:
        """Distinct symbols on the board, in order of first appearance."""
        return list(dict.fromkeys(card.symbol for card in self.cards))

    def is_target(self, card: Card) -> bool:
        return card.symbol in self.target_symbols

    def target_card_count(self) -> int:
        return sum(1 for card in self.cards if card.symbol in self.target_symbols)

    def index_of(self, identity: int) -> int:
        for i, card in enumerate(self.cards):
            if card.identity == identity:
                return i
        raise KeyError(identity)


class PuzzleGenerator:
    """Builds shuffled layouts from a tier and a symbol pool.

    All randomness goes through the injected ``random.Random`` so a seeded
    generator reproduces the same sequence of rounds.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._ids = itertools.count(1)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def generate(self, tier: Tier, pool: SymbolPool) -> Layout:
        if tier.is_chaos:
            layout = self._generate_chaos(tier, pool)
        else:
            layout = self._generate_structured(tier, pool)
        logger.debug(
            "Generated %s layout: %d cards, targets=%s, required=%d",
            tier.key,
            len(layout.cards),
            sorted(layout.target_symbols),
            layout.required_count,
        )
        return layout

    def _generate_structured(self, tier: Tier, pool: SymbolPool) -> Layout:
        decoys_needed = tier.decoy_count
        if decoys_needed < 0:
            raise ValueError(f"Tier {tier.key} has fewer cards than target copies")
        distinct_needed = tier.target_types + decoys_needed
        if distinct_needed > len(pool):
            raise ValueError(
                f"Tier {tier.key} needs {distinct_needed} distinct symbols, pool has {len(pool)}"
            )

        drawn = self._rng.sample(pool.symbols, distinct_needed)
        targets = drawn[: tier.target_types]
        decoys = drawn[tier.target_types :]

        symbols: List[str] = []
        for symbol in targets:
            symbols.extend([symbol, symbol])
        symbols.extend(decoys)

        return Layout(
            tier_key=tier.key,
            cards=self._deal(symbols),
            target_symbols=frozenset(targets),
            required_count=tier.target_types * 2,
        )

    def _generate_chaos(self, tier: Tier, pool: SymbolPool) -> Layout:
        if self._rng.random() < 0.5:
            mode = ChaosMode.FIND_UNIQUE
            drawn = self._rng.sample(pool.symbols, 7)
            pairs, singles = drawn[:5], drawn[5:]
            symbols = [s for s in pairs for _ in range(2)] + singles
            targets = singles
            required = 2
        else:
            mode = ChaosMode.FIND_TRIPLET
            drawn = self._rng.sample(pool.symbols, 6)
            triplet, pairs, single = drawn[0], drawn[1:5], drawn[5]
            symbols = [triplet] * 3 + [s for s in pairs for _ in range(2)] + [single]
            targets = [triplet]
            required = 3

        return Layout(
            tier_key=tier.key,
            cards=self._deal(symbols),
            target_symbols=frozenset(targets),
            required_count=required,
            chaos_mode=mode,
        )

    def _deal(self, symbols: List[str]) -> Tuple[Card, ...]:
        shuffled = list(symbols)
        self._rng.shuffle(shuffled)
        return tuple(Card(identity=next(self._ids), symbol=s) for s in shuffled)


def describe_goal(layout: Layout) -> str:
    """Instruction text shown above the card grid."""
    if layout.chaos_mode is ChaosMode.FIND_UNIQUE:
        return f"Pick the {layout.required_count} lone totems!"
    if layout.chaos_mode is ChaosMode.FIND_TRIPLET:
        return f"Find the totem shown {layout.required_count} times!"
    pairs = len(layout.target_symbols)
    if pairs == 2:
        return f"Find both pairs ({layout.required_count} cards)"
    if pairs > 2:
        return f"Find all {pairs} pairs ({layout.required_count} cards)"
    return f"Find the {layout.required_count} matching cards"
