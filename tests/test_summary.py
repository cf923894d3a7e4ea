"""Tests for totemtrace.core.summary – ranks and the end-of-session summary."""

from __future__ import annotations

import pytest

from totemtrace.core.ledger import LedgerSnapshot
from totemtrace.core.summary import DEFAULT_PLAYER_NAME, Rank, SessionSummary, rank_for

CLASSIC_RANKS = (
    Rank("GOD", 150),
    Rank("SSS", 100),
    Rank("S", 70),
    Rank("A", 40),
    Rank("C", 0),
)


# ---------------------------------------------------------------------------
# rank_for
# ---------------------------------------------------------------------------

class TestRankFor:
    @pytest.mark.parametrize(
        "score,label",
        [(0, "C"), (39, "C"), (40, "A"), (69, "A"), (70, "S"), (99, "S"), (100, "SSS"), (149, "SSS"), (150, "GOD"), (999, "GOD")],
    )
    def test_classic_thresholds(self, score: int, label: str):
        assert rank_for(score, CLASSIC_RANKS).label == label

    def test_order_of_thresholds_does_not_matter(self):
        assert rank_for(75, tuple(reversed(CLASSIC_RANKS))).label == "S"

    def test_no_thresholds(self):
        assert rank_for(500, ()) is None

    def test_below_every_threshold(self):
        assert rank_for(5, (Rank("A", 40),)) is None


# ---------------------------------------------------------------------------
# SessionSummary
# ---------------------------------------------------------------------------

class TestSessionSummary:
    @pytest.fixture()
    def ledger(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            per_tier={"BASIC": 3, "ADVANCED": 4, "LUXURY": 25, "CHAOS": 10},
            total_clicks=40,
            correct_clicks=35,
        )

    def test_from_ledger(self, ledger: LedgerSnapshot):
        s = SessionSummary.from_ledger(ledger, profile_title="Totem Trace", ranks=CLASSIC_RANKS, player_name="Mei")
        assert s.player_name == "Mei"
        assert s.total_score == 42
        assert s.total_clicks == 40
        assert s.correct_clicks == 35
        assert s.accuracy == 88
        assert s.rank == Rank("A", 40)
        assert s.per_tier["LUXURY"] == 25

    def test_blank_name_gets_default(self, ledger: LedgerSnapshot):
        s = SessionSummary.from_ledger(ledger, profile_title="T", player_name="   ")
        assert s.player_name == DEFAULT_PLAYER_NAME

    def test_no_rank_table(self, ledger: LedgerSnapshot):
        s = SessionSummary.from_ledger(ledger, profile_title="T")
        assert s.rank is None

    def test_export_filename(self, ledger: LedgerSnapshot):
        s = SessionSummary.from_ledger(ledger, profile_title="Totem Trace", player_name="Mei Lin")
        assert s.export_filename() == "Totem_Trace_Mei_Lin_42.png"
        assert s.export_filename(".jpg").endswith("_42.jpg")

    def test_export_filename_strips_path_characters(self, ledger: LedgerSnapshot):
        s = SessionSummary.from_ledger(ledger, profile_title="T", player_name="a/b:c")
        assert "/" not in s.export_filename()
        assert ":" not in s.export_filename()
