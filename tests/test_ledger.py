"""Tests for totemtrace.core.ledger – score and accuracy bookkeeping."""

from __future__ import annotations

import pytest

from totemtrace.core.ledger import LedgerSnapshot, ScoreLedger, accuracy_percent
from totemtrace.core.levels import CHAOS, STRUCTURED, Tier

KEYS = ["BASIC", "ADVANCED", "LUXURY", "CHAOS"]

BASIC = Tier(key="BASIC", name="Basic", order=0, family=STRUCTURED, total_cards=6, target_types=1, point_value=1)
CHAOS_TIER = Tier(key="CHAOS", name="Chaos", order=3, family=CHAOS, total_cards=12, target_types=0, point_value=10)


@pytest.fixture()
def ledger() -> ScoreLedger:
    return ScoreLedger(KEYS)


# ---------------------------------------------------------------------------
# accuracy_percent
# ---------------------------------------------------------------------------

class TestAccuracyPercent:
    def test_zero_clicks(self):
        assert accuracy_percent(0, 0) == 0

    def test_perfect(self):
        assert accuracy_percent(5, 5) == 100

    def test_rounds_to_nearest(self):
        assert accuracy_percent(2, 3) == 67
        assert accuracy_percent(1, 3) == 33

    def test_half_rounds_up(self):
        # 1/8 = 12.5%
        assert accuracy_percent(1, 8) == 13


# ---------------------------------------------------------------------------
# ScoreLedger
# ---------------------------------------------------------------------------

class TestScoreLedger:
    def test_starts_empty(self, ledger: ScoreLedger):
        assert ledger.total_clicks == 0
        assert ledger.correct_clicks == 0
        assert ledger.accuracy == 0
        assert ledger.total_score == 0

    def test_record_click(self, ledger: ScoreLedger):
        ledger.record_click(True)
        ledger.record_click(False)
        ledger.record_click(True)
        assert ledger.total_clicks == 3
        assert ledger.correct_clicks == 2
        assert ledger.accuracy == 67

    def test_award_adds_point_value(self, ledger: ScoreLedger):
        assert ledger.award_round_completion(BASIC) == 1
        assert ledger.award_round_completion(BASIC) == 2
        assert ledger.award_round_completion(CHAOS_TIER) == 10
        assert ledger.score_for("BASIC") == 2
        assert ledger.total_score == 12

    def test_award_unknown_tier(self):
        ledger = ScoreLedger(["BASIC"])
        with pytest.raises(KeyError):
            ledger.award_round_completion(CHAOS_TIER)

    def test_reset(self, ledger: ScoreLedger):
        ledger.record_click(True)
        ledger.award_round_completion(BASIC)
        ledger.reset()
        assert ledger.total_clicks == 0
        assert ledger.total_score == 0
        assert ledger.score_for("BASIC") == 0


# ---------------------------------------------------------------------------
# LedgerSnapshot
# ---------------------------------------------------------------------------

class TestLedgerSnapshot:
    def test_snapshot_values(self, ledger: ScoreLedger):
        ledger.record_click(True)
        ledger.record_click(False)
        ledger.award_round_completion(CHAOS_TIER)
        snap = ledger.snapshot()
        assert dict(snap.per_tier) == {"BASIC": 0, "ADVANCED": 0, "LUXURY": 0, "CHAOS": 10}
        assert snap.total_clicks == 2
        assert snap.correct_clicks == 1
        assert snap.accuracy == 50
        assert snap.total_score == 10

    def test_total_score_is_sum_of_tiers(self, ledger: ScoreLedger):
        ledger.award_round_completion(BASIC)
        ledger.award_round_completion(CHAOS_TIER)
        snap = ledger.snapshot()
        assert snap.total_score == sum(snap.per_tier.values())

    def test_snapshot_is_detached(self, ledger: ScoreLedger):
        snap = ledger.snapshot()
        ledger.award_round_completion(BASIC)
        assert snap.per_tier["BASIC"] == 0

    def test_snapshot_is_read_only(self, ledger: ScoreLedger):
        snap = ledger.snapshot()
        with pytest.raises(TypeError):
            snap.per_tier["BASIC"] = 5  # type: ignore[index]

    def test_default_snapshot(self):
        snap = LedgerSnapshot()
        assert snap.accuracy == 0
        assert snap.total_score == 0
