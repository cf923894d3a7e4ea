from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from totemtrace.core.levels import (
    CHAOS,
    CHAOS_SYMBOLS_NEEDED,
    CHAOS_TOTAL_CARDS,
    STRUCTURED,
    TIER_KEYS,
    LevelCatalog,
    SymbolPool,
    Tier,
)
from totemtrace.core.summary import Rank

DEFAULT_PROFILE = "classic"

_DEFAULT_SESSION_SECONDS = 60
_DEFAULT_FAULT_DELAY = 1.0
_DEFAULT_REGENERATE_DELAY = 0.1


@dataclass(frozen=True)
class GenerationProfile:
    """Everything that distinguishes one themed variant of the puzzle."""

    key: str
    title: str
    pool: SymbolPool
    catalog: LevelCatalog
    masking: bool = False
    session_seconds: int = _DEFAULT_SESSION_SECONDS
    fault_delay: float = _DEFAULT_FAULT_DELAY
    regenerate_delay: float = _DEFAULT_REGENERATE_DELAY
    ranks: Tuple[Rank, ...] = field(default_factory=tuple)


class ProfileRepository:
    def __init__(self, base_dir: Optional[Path] = None) -> None:
        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent / "data" / "profiles"
        self._base_dir = base_dir
        self._profiles = self._load_profiles()

    def all(self) -> List[GenerationProfile]:
        return list(self._profiles.values())

    def get(self, key: str) -> GenerationProfile:
        return self._profiles[key]

    def keys(self) -> List[str]:
        return list(self._profiles)

    def _load_profiles(self) -> Dict[str, GenerationProfile]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Profiles directory not found: {self._base_dir}")

        profiles: Dict[str, GenerationProfile] = {}
        for path in sorted(self._base_dir.glob("*.yaml")):
            profile = load_profile(path)
            profiles[profile.key] = profile

        if not profiles:
            raise ValueError(f"No profile files (*.yaml) found in {self._base_dir}")
        return profiles


def load_profile(path: Path) -> GenerationProfile:
    """Load and validate one profile file; the file stem becomes its key."""
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML mapping with 'title', 'symbols' and 'tiers'")

    title = raw.get("title")
    if not title or not isinstance(title, str):
        raise ValueError(f"{path.name}: missing or invalid 'title'")

    symbols = raw.get("symbols")
    if not isinstance(symbols, list) or not symbols:
        raise ValueError(f"{path.name}: missing or invalid 'symbols'")
    symbols = [str(s).strip() for s in symbols]
    if any(not s for s in symbols):
        raise ValueError(f"{path.name}: 'symbols' contains a blank entry")
    if len(set(symbols)) != len(symbols):
        raise ValueError(f"{path.name}: 'symbols' contains duplicates")
    if len(symbols) < CHAOS_SYMBOLS_NEEDED:
        raise ValueError(
            f"{path.name}: 'symbols' needs at least {CHAOS_SYMBOLS_NEEDED} entries, got {len(symbols)}"
        )
    pool = SymbolPool(symbols)

    raw_tiers = raw.get("tiers")
    if not isinstance(raw_tiers, list):
        raise ValueError(f"{path.name}: missing or invalid 'tiers'")
    tiers = [_parse_tier(path, i, item, len(pool)) for i, item in enumerate(raw_tiers)]
    keys = tuple(t.key for t in tiers)
    if keys != TIER_KEYS:
        raise ValueError(f"{path.name}: 'tiers' must be {list(TIER_KEYS)} in order, got {list(keys)}")

    ranks = tuple(_parse_rank(path, item) for item in raw.get("ranks") or [])

    session_seconds = _positive(path, raw, "session_seconds", _DEFAULT_SESSION_SECONDS, int)
    fault_delay = _positive(path, raw, "fault_delay", _DEFAULT_FAULT_DELAY, float)
    regenerate_delay = _positive(path, raw, "regenerate_delay", _DEFAULT_REGENERATE_DELAY, float)

    return GenerationProfile(
        key=path.stem,
        title=title.strip(),
        pool=pool,
        catalog=LevelCatalog(tiers),
        masking=bool(raw.get("masking", False)),
        session_seconds=session_seconds,
        fault_delay=fault_delay,
        regenerate_delay=regenerate_delay,
        ranks=ranks,
    )


def _parse_tier(path: Path, index: int, item: Any, pool_size: int) -> Tier:
    if not isinstance(item, dict):
        raise ValueError(f"{path.name}: tier #{index} is not a mapping")
    key = item.get("key")
    if not key or not isinstance(key, str):
        raise ValueError(f"{path.name}: tier #{index} has a missing or invalid 'key'")

    family = item.get("family", STRUCTURED)
    if family not in (STRUCTURED, CHAOS):
        raise ValueError(f"{path.name}: tier {key} has unknown family {family!r}")
    if (family == CHAOS) != (key == "CHAOS"):
        raise ValueError(f"{path.name}: only the CHAOS tier uses the chaos family")

    try:
        order = int(item.get("order", index))
        total_cards = int(item["total_cards"])
        points = int(item["points"])
        target_types = int(item.get("target_types", 0))
        columns = int(item.get("columns", 3))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"{path.name}: tier {key} has a missing or invalid field: {e}") from e

    if order != index:
        raise ValueError(f"{path.name}: tier {key} has order {order}, expected {index}")
    if points <= 0:
        raise ValueError(f"{path.name}: tier {key} must award positive 'points'")

    if family == CHAOS:
        if total_cards != CHAOS_TOTAL_CARDS:
            raise ValueError(f"{path.name}: CHAOS tier must have {CHAOS_TOTAL_CARDS} cards")
        target_types = 0
    else:
        if target_types < 1:
            raise ValueError(f"{path.name}: tier {key} needs at least one target type")
        if total_cards < target_types * 2:
            raise ValueError(f"{path.name}: tier {key} has fewer cards than target copies")
        distinct_needed = total_cards - target_types
        if distinct_needed > pool_size:
            raise ValueError(
                f"{path.name}: tier {key} needs {distinct_needed} distinct symbols, pool has {pool_size}"
            )

    return Tier(
        key=key,
        name=str(item.get("name") or key.title()).strip(),
        order=order,
        family=family,
        total_cards=total_cards,
        target_types=target_types,
        point_value=points,
        columns=columns,
        icon=str(item.get("icon") or ""),
    )


def _parse_rank(path: Path, item: Any) -> Rank:
    if not isinstance(item, dict) or not item.get("label"):
        raise ValueError(f"{path.name}: each rank needs a 'label' and 'min_score'")
    try:
        min_score = int(item["min_score"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"{path.name}: rank {item.get('label')!r} has an invalid 'min_score'") from e
    return Rank(label=str(item["label"]), min_score=min_score)


def _positive(path: Path, raw: Dict[str, Any], name: str, default, cast):
    value = raw.get(name, default)
    try:
        value = cast(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{path.name}: invalid '{name}'") from e
    if value <= 0:
        raise ValueError(f"{path.name}: '{name}' must be positive")
    return value
