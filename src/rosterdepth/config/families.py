"""Statistic families that can feed the clustering pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class StatFamily:
    name: str
    features: Tuple[str, ...]
    default_columns: Mapping[str, str]
    primary_feature: str
    description: str = ""


_FAMILIES: Dict[str, StatFamily] = {
    "basic": StatFamily(
        name="basic",
        features=("points", "rebounds", "assists", "steals", "blocks", "efg_pct"),
        default_columns={
            "points": "PTS",
            "rebounds": "TRB",
            "assists": "AST",
            "steals": "STL",
            "blocks": "BLK",
            "efg_pct": "eFG%",
        },
        primary_feature="points",
        description="Per-game counting statistics",
    ),
    "advanced": StatFamily(
        name="advanced",
        features=("win_shares", "vorp"),
        default_columns={
            "win_shares": "WS",
            "vorp": "VORP",
        },
        primary_feature="win_shares",
        description="Win shares and value over replacement",
    ),
}


def iter_families() -> Iterable[StatFamily]:
    """Return an iterator of all configured statistic families."""

    return _FAMILIES.values()


def get_family(name: str) -> StatFamily:
    """Fetch a family by name, raising KeyError if missing."""

    key = name.strip().lower()
    if key not in _FAMILIES:
        raise KeyError(f"No statistic family configured for {name!r}")
    return _FAMILIES[key]
