"""Errors surfaced to callers of the round engine."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Raised for caller bugs: bad card indices or calls on a finished session."""


class TierLocked(ValueError):
    """Raised when a tier sits below the highest tier already reached."""

    def __init__(self, tier_key: str, highest_order: int) -> None:
        super().__init__(
            f"Tier {tier_key!r} is locked (highest order reached: {highest_order})"
        )
        self.tier_key = tier_key
        self.highest_order = highest_order
