from __future__ import annotations

import logging

from totemtrace.core.errors import TierLocked
from totemtrace.core.levels import Tier

logger = logging.getLogger(__name__)


def can_select(tier: Tier, highest_order_reached: int) -> bool:
    """A tier is selectable unless it sits below the highest tier reached."""
    return tier.order >= highest_order_reached


class ProgressGate:
    """One-way ratchet over tier order. Reset only when a new session starts."""

    def __init__(self) -> None:
        self._highest_order = 0

    @property
    def highest_order(self) -> int:
        return self._highest_order

    def can_select(self, tier: Tier) -> bool:
        return can_select(tier, self._highest_order)

    def reach(self, tier: Tier) -> None:
        """Move to ``tier``, raising the ratchet; raises TierLocked if gated."""
        if not self.can_select(tier):
            raise TierLocked(tier.key, self._highest_order)
        if tier.order > self._highest_order:
            logger.info("Highest tier raised from order %d to %d (%s)", self._highest_order, tier.order, tier.key)
        self._highest_order = max(self._highest_order, tier.order)

    def reset(self) -> None:
        self._highest_order = 0
