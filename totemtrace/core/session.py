from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from totemtrace.core.errors import InvalidInput
from totemtrace.core.feedback import FeedbackCues, LoggingFeedback, emit
from totemtrace.core.generator import Card, ChaosMode, Layout, PuzzleGenerator, describe_goal
from totemtrace.core.ledger import LedgerSnapshot, ScoreLedger
from totemtrace.core.levels import Tier
from totemtrace.core.profiles import GenerationProfile
from totemtrace.core.progress import ProgressGate
from totemtrace.core.scheduler import Scheduler, TimerHandle
from totemtrace.core.summary import SessionSummary

logger = logging.getLogger(__name__)

CLOCK_INTERVAL = 1.0


class GameState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    FAULT = "fault"
    COMPLETE = "complete"
    EXPIRED = "expired"


class RoundOutcome(str, Enum):
    IGNORED = "ignored"
    CORRECT = "correct"
    FAULT = "fault"
    ROUND_COMPLETE = "round_complete"


class TickResult(str, Enum):
    RUNNING = "running"
    SESSION_EXPIRED = "session_expired"


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the presentation layer needs to draw one frame.

    ``target_symbols`` is exposed for tests and debugging only and must not
    be shown to the player.
    """

    game_state: GameState
    tier: str
    cards: Tuple[Card, ...] = ()
    target_symbols: FrozenSet[str] = frozenset()
    selection: Tuple[int, ...] = ()
    masked_symbols: Tuple[str, ...] = ()
    ledger: LedgerSnapshot = field(default_factory=LedgerSnapshot)
    remaining_seconds: float = 0.0
    required_count: int = 0
    chaos_mode: Optional[ChaosMode] = None
    highest_order: int = 0
    goal: str = ""

    @property
    def score(self) -> int:
        return self.ledger.total_score

    @property
    def accuracy(self) -> int:
        return self.ledger.accuracy

    @property
    def selected_indices(self) -> Tuple[int, ...]:
        positions = {card.identity: i for i, card in enumerate(self.cards)}
        return tuple(positions[identity] for identity in self.selection if identity in positions)


class RoundSession:
    """State machine for one timed session of rounds.

    IDLE -> ACTIVE on :meth:`start_session`. A wrong click moves ACTIVE to
    FAULT, which returns to ACTIVE with an empty selection after the
    profile's fault delay. Selecting the last required card moves ACTIVE to
    COMPLETE; a fresh round at the same tier is dealt after the
    regeneration delay. When the countdown hits zero the session is
    EXPIRED and accepts no further selections.

    Every event runs to completion before the next one, so no locking is
    needed. Pending timers are cancelled whenever a newer event makes them
    stale.
    """

    def __init__(
        self,
        profile: GenerationProfile,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        feedback: Optional[FeedbackCues] = None,
    ) -> None:
        self._profile = profile
        self._scheduler = scheduler
        self._generator = PuzzleGenerator(rng)
        self._feedback: FeedbackCues = feedback if feedback is not None else LoggingFeedback()
        self._ledger = ScoreLedger(profile.catalog.keys())
        self._gate = ProgressGate()

        self._state = GameState.IDLE
        self._tier: Tier = profile.catalog.first()
        self._layout: Optional[Layout] = None
        self._selection: List[int] = []
        self._masked: List[str] = []
        self._remaining = float(profile.session_seconds)

        self._fault_timer: Optional[TimerHandle] = None
        self._regenerate_timer: Optional[TimerHandle] = None
        self._clock: Optional[TimerHandle] = None

    @property
    def profile(self) -> GenerationProfile:
        return self._profile

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def tier(self) -> Tier:
        return self._tier

    @property
    def layout(self) -> Optional[Layout]:
        return self._layout

    @property
    def remaining_seconds(self) -> float:
        return self._remaining

    @property
    def highest_order(self) -> int:
        return self._gate.highest_order

    def can_select_tier(self, key: str) -> bool:
        return self._gate.can_select(self._profile.catalog.get(key))

    # -- Session lifecycle -------------------------------------------------

    def start_session(self) -> None:
        """Reset score, progress and clock, then deal the first BASIC round."""
        self._cancel_timers(include_clock=True)
        self._ledger.reset()
        self._gate.reset()
        self._remaining = float(self._profile.session_seconds)
        self._tier = self._profile.catalog.first()
        self._gate.reach(self._tier)
        self._deal_round()
        self._state = GameState.ACTIVE
        self._clock = self._scheduler.call_every(CLOCK_INTERVAL, self._on_clock)
        logger.info(
            "Session started: profile=%s, %ds on the clock",
            self._profile.key,
            self._profile.session_seconds,
        )
        emit(self._feedback, "click")

    def tick(self, elapsed: float) -> TickResult:
        """Advance the countdown by ``elapsed`` seconds."""
        if elapsed < 0:
            raise InvalidInput(f"elapsed time must be non-negative, got {elapsed}")
        if self._state is GameState.IDLE:
            raise InvalidInput("No session in progress")
        if self._state is GameState.EXPIRED:
            return TickResult.SESSION_EXPIRED

        self._remaining = max(0.0, self._remaining - elapsed)
        if self._remaining <= 1e-9:
            self._remaining = 0.0
            self._expire()
            return TickResult.SESSION_EXPIRED
        return TickResult.RUNNING

    def change_tier(self, key: str) -> None:
        """Switch to another tier and deal a fresh round there.

        Raises:
            InvalidInput: No session is running.
            KeyError: Unknown tier key.
            TierLocked: The tier is below the highest tier reached.
        """
        if self._state in (GameState.IDLE, GameState.EXPIRED):
            raise InvalidInput(f"Cannot change tier while {self._state.value}")
        tier = self._profile.catalog.get(key)
        self._gate.reach(tier)

        self._cancel_timers()
        self._tier = tier
        self._deal_round()
        self._state = GameState.ACTIVE
        logger.info("Tier changed to %s", tier.key)
        emit(self._feedback, "click")

    # -- Selections --------------------------------------------------------

    def submit_selection(self, index: int) -> RoundOutcome:
        if self._state in (GameState.IDLE, GameState.EXPIRED) or self._layout is None:
            raise InvalidInput(f"Selections are not accepted while {self._state.value}")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInput(f"Card index must be an integer, got {index!r}")
        if not 0 <= index < len(self._layout.cards):
            raise InvalidInput(
                f"Card index {index} out of range for {len(self._layout.cards)} cards"
            )
        if self._state is not GameState.ACTIVE:
            return RoundOutcome.IGNORED

        card = self._layout.cards[index]
        if card.identity in self._selection or card.symbol in self._masked:
            return RoundOutcome.IGNORED

        emit(self._feedback, "click")

        if not self._layout.is_target(card):
            self._ledger.record_click(False)
            if self._profile.masking:
                self._mask_one_decoy()
            self._state = GameState.FAULT
            self._fault_timer = self._scheduler.call_later(self._profile.fault_delay, self._recover)
            logger.debug("Wrong card %d (%s) on %s", index, card.symbol, self._tier.key)
            emit(self._feedback, "wrong")
            return RoundOutcome.FAULT

        self._ledger.record_click(True)
        self._selection.append(card.identity)

        if len(self._selection) >= self._layout.required_count:
            entry = self._ledger.award_round_completion(self._tier)
            self._state = GameState.COMPLETE
            self._regenerate_timer = self._scheduler.call_later(
                self._profile.regenerate_delay, self._regenerate
            )
            logger.debug("Round complete on %s, tier score now %d", self._tier.key, entry)
            emit(self._feedback, "round_complete")
            return RoundOutcome.ROUND_COMPLETE

        logger.debug(
            "Correct card %d, %d/%d selected",
            index,
            len(self._selection),
            self._layout.required_count,
        )
        emit(self._feedback, "correct")
        return RoundOutcome.CORRECT

    # -- Read side ---------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        layout = self._layout
        return SessionSnapshot(
            game_state=self._state,
            tier=self._tier.key,
            cards=layout.cards if layout else (),
            target_symbols=layout.target_symbols if layout else frozenset(),
            selection=tuple(self._selection),
            masked_symbols=tuple(self._masked),
            ledger=self._ledger.snapshot(),
            remaining_seconds=self._remaining,
            required_count=layout.required_count if layout else 0,
            chaos_mode=layout.chaos_mode if layout else None,
            highest_order=self._gate.highest_order,
            goal=describe_goal(layout) if layout else "",
        )

    def summary(self, player_name: str = "") -> SessionSummary:
        return SessionSummary.from_ledger(
            self._ledger.snapshot(),
            profile_title=self._profile.title,
            ranks=self._profile.ranks,
            player_name=player_name,
        )

    # -- Internals ---------------------------------------------------------

    def _deal_round(self) -> None:
        self._layout = self._generator.generate(self._tier, self._profile.pool)
        self._selection = []
        self._masked = []

    def _mask_one_decoy(self) -> None:
        assert self._layout is not None
        candidates = [
            symbol
            for symbol in self._layout.symbols()
            if symbol not in self._layout.target_symbols and symbol not in self._masked
        ]
        if candidates:
            symbol = self._generator.rng.choice(candidates)
            self._masked.append(symbol)
            logger.debug("Masked symbol %s", symbol)

    def _recover(self) -> None:
        self._fault_timer = None
        if self._state is GameState.FAULT:
            self._selection = []
            self._state = GameState.ACTIVE

    def _regenerate(self) -> None:
        self._regenerate_timer = None
        if self._state is GameState.COMPLETE:
            self._deal_round()
            self._state = GameState.ACTIVE

    def _on_clock(self) -> None:
        self.tick(CLOCK_INTERVAL)

    def _expire(self) -> None:
        self._cancel_timers(include_clock=True)
        self._state = GameState.EXPIRED
        logger.info(
            "Session expired: score=%d, clicks=%d, accuracy=%d%%",
            self._ledger.total_score,
            self._ledger.total_clicks,
            self._ledger.accuracy,
        )
        emit(self._feedback, "session_end")

    def _cancel_timers(self, include_clock: bool = False) -> None:
        for timer in (self._fault_timer, self._regenerate_timer):
            if timer is not None:
                timer.cancel()
        self._fault_timer = None
        self._regenerate_timer = None
        if include_clock and self._clock is not None:
            self._clock.cancel()
            self._clock = None
