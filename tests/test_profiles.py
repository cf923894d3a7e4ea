"""Tests for totemtrace.core.profiles – YAML generation profiles."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest
import yaml

from totemtrace.core.levels import TIER_KEYS
from totemtrace.core.profiles import DEFAULT_PROFILE, ProfileRepository, load_profile

VALID = {
    "title": "Test Set",
    "symbols": list("ABCDEFGHIJ"),
    "masking": True,
    "session_seconds": 30,
    "fault_delay": 0.5,
    "regenerate_delay": 0.2,
    "ranks": [{"label": "A", "min_score": 10}, {"label": "C", "min_score": 0}],
    "tiers": [
        {"key": "BASIC", "order": 0, "family": "structured", "total_cards": 6, "target_types": 1, "points": 1},
        {"key": "ADVANCED", "order": 1, "family": "structured", "total_cards": 9, "target_types": 1, "points": 2},
        {"key": "LUXURY", "order": 2, "family": "structured", "total_cards": 12, "target_types": 2, "points": 5, "columns": 4},
        {"key": "CHAOS", "order": 3, "family": "chaos", "total_cards": 12, "points": 10, "columns": 4},
    ],
}


def _write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.dump(data, allow_unicode=True, default_flow_style=False), encoding="utf-8")
    return path


def _variant(**changes) -> dict:
    data = copy.deepcopy(VALID)
    data.update(changes)
    return data


# ---------------------------------------------------------------------------
# Shipped profiles
# ---------------------------------------------------------------------------

class TestShippedProfiles:
    @pytest.fixture(scope="class")
    def repo(self) -> ProfileRepository:
        return ProfileRepository()

    def test_both_variants_present(self, repo: ProfileRepository):
        assert set(repo.keys()) >= {"classic", "animals"}
        assert DEFAULT_PROFILE in repo.keys()

    def test_classic(self, repo: ProfileRepository):
        p = repo.get("classic")
        assert list(p.pool) == [str(i) for i in range(10)]
        assert p.masking is False
        assert p.session_seconds == 60
        assert p.fault_delay == 1.0
        assert [r.label for r in p.ranks] == ["GOD", "SSS", "S", "A", "C"]

    def test_animals(self, repo: ProfileRepository):
        p = repo.get("animals")
        assert len(p.pool) == 10
        assert p.masking is True
        assert p.fault_delay == 1.2
        assert p.ranks == ()
        assert p.catalog.get("CHAOS").icon

    @pytest.mark.parametrize("key", ["classic", "animals"])
    def test_tier_table(self, repo: ProfileRepository, key: str):
        catalog = repo.get(key).catalog
        assert catalog.keys() == list(TIER_KEYS)
        assert [t.total_cards for t in catalog.all()] == [6, 9, 12, 12]
        assert [t.point_value for t in catalog.all()] == [1, 2, 5, 10]
        assert [t.required_selections for t in catalog.all()] == [2, 2, 4, None]
        assert [t.columns for t in catalog.all()] == [3, 3, 4, 4]

    def test_unknown_key(self, repo: ProfileRepository):
        with pytest.raises(KeyError):
            repo.get("nonexistent")


# ---------------------------------------------------------------------------
# load_profile – happy path
# ---------------------------------------------------------------------------

class TestLoadProfile:
    def test_valid_file(self, tmp_path: Path):
        p = load_profile(_write_yaml(tmp_path / "test.yaml", VALID))
        assert p.key == "test"
        assert p.title == "Test Set"
        assert p.masking is True
        assert p.session_seconds == 30
        assert p.regenerate_delay == 0.2
        assert p.catalog.get("LUXURY").target_types == 2
        assert p.catalog.get("CHAOS").is_chaos

    def test_defaults(self, tmp_path: Path):
        data = _variant()
        for name in ("masking", "session_seconds", "fault_delay", "regenerate_delay", "ranks"):
            del data[name]
        p = load_profile(_write_yaml(tmp_path / "d.yaml", data))
        assert p.masking is False
        assert p.session_seconds == 60
        assert p.fault_delay == 1.0
        assert p.regenerate_delay == 0.1
        assert p.ranks == ()

    def test_numeric_symbols_become_strings(self, tmp_path: Path):
        p = load_profile(_write_yaml(tmp_path / "n.yaml", _variant(symbols=list(range(10)))))
        assert "0" in p.pool

    def test_repository_from_directory(self, tmp_path: Path):
        _write_yaml(tmp_path / "b.yaml", VALID)
        _write_yaml(tmp_path / "a.yaml", VALID)
        repo = ProfileRepository(tmp_path)
        assert repo.keys() == ["a", "b"]
        assert len(repo.all()) == 2


# ---------------------------------------------------------------------------
# load_profile – error paths
# ---------------------------------------------------------------------------

class TestLoadProfileErrors:
    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "e.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="expected YAML"):
            load_profile(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "l.yaml"
        path.write_text("- item\n", encoding="utf-8")
        with pytest.raises(ValueError, match="expected YAML"):
            load_profile(path)

    def test_missing_title(self, tmp_path: Path):
        data = _variant()
        del data["title"]
        with pytest.raises(ValueError, match="'title'"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_duplicate_symbols(self, tmp_path: Path):
        with pytest.raises(ValueError, match="duplicates"):
            load_profile(_write_yaml(tmp_path / "x.yaml", _variant(symbols=list("AABCDEFGHI"))))

    def test_pool_smaller_than_chaos_needs(self, tmp_path: Path):
        with pytest.raises(ValueError, match="at least 7"):
            load_profile(_write_yaml(tmp_path / "x.yaml", _variant(symbols=list("ABCDEF"))))

    def test_pool_too_small_for_structured_tier(self, tmp_path: Path):
        # ADVANCED needs 8 distinct symbols
        with pytest.raises(ValueError, match="distinct symbols"):
            load_profile(_write_yaml(tmp_path / "x.yaml", _variant(symbols=list("ABCDEFG"))))

    def test_wrong_tier_keys(self, tmp_path: Path):
        data = _variant()
        data["tiers"] = data["tiers"][:3]
        with pytest.raises(ValueError, match="'tiers' must be"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_order_mismatch(self, tmp_path: Path):
        data = _variant()
        data["tiers"][1]["order"] = 5
        with pytest.raises(ValueError, match="expected 1"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_too_few_cards_for_targets(self, tmp_path: Path):
        data = _variant()
        data["tiers"][2]["total_cards"] = 3
        with pytest.raises(ValueError, match="fewer cards"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_chaos_card_count(self, tmp_path: Path):
        data = _variant()
        data["tiers"][3]["total_cards"] = 9
        with pytest.raises(ValueError, match="CHAOS tier must have 12"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_chaos_family_on_wrong_tier(self, tmp_path: Path):
        data = _variant()
        data["tiers"][0]["family"] = "chaos"
        with pytest.raises(ValueError, match="only the CHAOS tier"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_missing_points(self, tmp_path: Path):
        data = _variant()
        del data["tiers"][0]["points"]
        with pytest.raises(ValueError, match="missing or invalid field"):
            load_profile(_write_yaml(tmp_path / "x.yaml", data))

    def test_non_positive_delay(self, tmp_path: Path):
        with pytest.raises(ValueError, match="'fault_delay' must be positive"):
            load_profile(_write_yaml(tmp_path / "x.yaml", _variant(fault_delay=0)))

    def test_bad_rank(self, tmp_path: Path):
        with pytest.raises(ValueError, match="min_score"):
            load_profile(_write_yaml(tmp_path / "x.yaml", _variant(ranks=[{"label": "A", "min_score": "lots"}])))

    def test_empty_directory(self, tmp_path: Path):
        with pytest.raises(ValueError, match="No profile files"):
            ProfileRepository(tmp_path)

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ProfileRepository(tmp_path / "missing")
