"""Helpers to load statistic, roster and reference CSVs into canonical records."""

from __future__ import annotations

import csv
import logging
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from rosterdepth.config import StatFamily
from rosterdepth.errors import DataIntegrityError
from rosterdepth.models import PlayerRecord, RosterEntry


logger = logging.getLogger(__name__)

DEFAULT_SEASON_MAPPING = {
    "player_id": "Rk",
    "name": "Player",
    "team": "Team",
    "games_played": "G",
    "games_started": "GS",
}

DEFAULT_SUPPLEMENTARY_MAPPING = {
    "player_id": "Rk",
    "name": "Player",
}

DEFAULT_ROOKIE_MAPPING = {
    "player_id": "Rk",
    "name": "Player",
    "comparable": "Comparable",
}

DEFAULT_ROSTER_MAPPING = {
    "name": "Player",
    "team": "Team",
}

DEFAULT_REFERENCE_MAPPING = {
    "team": "Team",
    "rank": "Rank",
}

# Header spellings seen across season exports.
_COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "Team": ("Tm",),
    "Tm": ("Team",),
    "G": ("GP",),
    "GP": ("G",),
    "Rk": ("Id", "ID"),
}

_NAME_SUFFIX_TOKENS = {"jr", "sr", "ii", "iii", "iv", "v"}


def normalize_name(name: str) -> str:
    """Fold accents, case and punctuation so names from different sources compare equal."""

    decomposed = unicodedata.normalize("NFKD", name)
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = re.sub(r"[^a-z0-9]+", " ", ascii_only.lower())
    tokens = [tok for tok in cleaned.split() if tok and tok not in _NAME_SUFFIX_TOKENS]
    return "".join(tokens)


class StatRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_team: str = ""
    raw_games_played: Optional[str] = None
    raw_games_started: Optional[str] = None
    raw_stats: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, str],
        mapping: Mapping[str, str],
        features: Sequence[str],
    ) -> "StatRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return None
            value = row.get(column)
            return value.strip() if value is not None else None

        return cls(
            raw_id=extract("player_id") or None,
            raw_name=extract("name") or "",
            raw_team=extract("team") or "",
            raw_games_played=extract("games_played"),
            raw_games_started=extract("games_started"),
            raw_stats={feature: extract(feature) or "" for feature in features},
        )


@dataclass(frozen=True)
class RookieSubstitute:
    player_id: str
    name: str
    comparable: str


def _read_csv(path: Path) -> Tuple[List[str], List[Dict[str, str]]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        fieldnames = list(reader.fieldnames or [])
    return fieldnames, rows


def _resolve_columns(
    path: Path,
    fieldnames: Sequence[str],
    mapping: Mapping[str, str],
    *,
    required: Sequence[str],
) -> Dict[str, str]:
    """Map logical keys to headers present in the file, failing on missing required ones."""

    available = set(fieldnames)
    resolved: Dict[str, str] = {}
    missing: List[str] = []
    for key, column in mapping.items():
        if column in available:
            resolved[key] = column
            continue
        alias = next((alt for alt in _COLUMN_ALIASES.get(column, ()) if alt in available), None)
        if alias is not None:
            resolved[key] = alias
        elif key in required:
            missing.append(f"{key} ({column})")
    if missing:
        raise DataIntegrityError(f"{path.name} is missing required column(s): {', '.join(missing)}")
    return resolved


def _stat_mapping(
    family: StatFamily,
    base: Mapping[str, str],
    overrides: Mapping[str, str] | None,
) -> Dict[str, str]:
    mapping = dict(base)
    mapping.update(family.default_columns)
    mapping.update(overrides or {})
    return mapping


def _parse_stat(raw: str, *, feature: str, player: str) -> float:
    text = raw.strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        raise DataIntegrityError(
            f"{feature} value {raw!r} for {player} is not numeric"
        ) from None


def _parse_games(raw: Optional[str], *, field: str, player: str) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(float(raw))
    except ValueError:
        raise DataIntegrityError(f"{field} value {raw!r} for {player} is not numeric") from None


def load_stat_csv(
    path: Path,
    family: StatFamily,
    *,
    mapping: Mapping[str, str] | None = None,
) -> List[StatRow]:
    """Read a season statistics export for ``family``."""

    fieldnames, raw_rows = _read_csv(path)
    columns = _resolve_columns(
        path,
        fieldnames,
        _stat_mapping(family, DEFAULT_SEASON_MAPPING, mapping),
        required=("player_id", "name", "team", *family.features),
    )
    rows = [StatRow.from_mapping(row, columns, family.features) for row in raw_rows]
    logger.info("Loaded %d %s rows from %s", len(rows), family.name, path)
    return rows


def rows_to_records(
    rows: Sequence[StatRow],
    family: StatFamily,
    *,
    source: str = "season",
) -> List[PlayerRecord]:
    records: List[PlayerRecord] = []
    for row in rows:
        if not row.raw_name:
            raise DataIntegrityError(f"Row with id {row.raw_id!r} has no player name")
        stats = {
            feature: _parse_stat(row.raw_stats.get(feature, ""), feature=feature, player=row.raw_name)
            for feature in family.features
        }
        records.append(
            PlayerRecord(
                player_id=row.raw_id or row.raw_name,
                name=row.raw_name,
                team=row.raw_team.upper(),
                stats=stats,
                games_played=_parse_games(row.raw_games_played, field="games_played", player=row.raw_name),
                games_started=_parse_games(row.raw_games_started, field="games_started", player=row.raw_name),
                source=source,
            )
        )
    return records


def load_records_from_csv(
    path: Path,
    family: StatFamily,
    *,
    mapping: Mapping[str, str] | None = None,
) -> List[PlayerRecord]:
    return rows_to_records(load_stat_csv(path, family, mapping=mapping), family)


def load_supplementary_csv(
    path: Path,
    family: StatFamily,
    *,
    mapping: Mapping[str, str] | None = None,
) -> List[PlayerRecord]:
    """Read hand-curated stat lines for players who never appeared in the season table."""

    fieldnames, raw_rows = _read_csv(path)
    columns = _resolve_columns(
        path,
        fieldnames,
        _stat_mapping(family, DEFAULT_SUPPLEMENTARY_MAPPING, mapping),
        required=("name", *family.features),
    )
    rows = [StatRow.from_mapping(row, columns, family.features) for row in raw_rows]
    return rows_to_records(rows, family, source="supplementary")


def load_rookie_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RookieSubstitute]:
    fieldnames, raw_rows = _read_csv(path)
    columns = _resolve_columns(
        path,
        fieldnames,
        {**DEFAULT_ROOKIE_MAPPING, **(mapping or {})},
        required=("name", "comparable"),
    )
    rookies: List[RookieSubstitute] = []
    for row in raw_rows:
        name = (row.get(columns["name"]) or "").strip()
        comparable = (row.get(columns["comparable"]) or "").strip()
        if not name or not comparable:
            raise DataIntegrityError(f"{path.name}: rookie rows need both a name and a comparable")
        raw_id = (row.get(columns["player_id"]) or "").strip() if "player_id" in columns else ""
        rookies.append(RookieSubstitute(player_id=raw_id or name, name=name, comparable=comparable))
    return rookies


def load_roster_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RosterEntry]:
    """Read the upcoming-season roster table (UTF-8, accented names allowed)."""

    fieldnames, raw_rows = _read_csv(path)
    columns = _resolve_columns(
        path,
        fieldnames,
        {**DEFAULT_ROSTER_MAPPING, **(mapping or {})},
        required=("name", "team"),
    )
    entries: List[RosterEntry] = []
    for row in raw_rows:
        name = (row.get(columns["name"]) or "").strip()
        team = (row.get(columns["team"]) or "").strip().upper()
        if not name or not team:
            logger.debug("Skipping incomplete roster row %r", row)
            continue
        entries.append(RosterEntry(name=name, team=team))
    logger.info("Loaded %d roster entries from %s", len(entries), path)
    return entries


def validate_reference(ranks: Mapping[str, int]) -> Dict[str, int]:
    """Ensure reference ranks form a permutation of 1..n."""

    values = sorted(ranks.values())
    if values != list(range(1, len(values) + 1)):
        raise DataIntegrityError("Reference ranks must be a permutation of 1..number_of_teams")
    return dict(ranks)


def load_reference_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> Dict[str, int]:
    fieldnames, raw_rows = _read_csv(path)
    columns = _resolve_columns(
        path,
        fieldnames,
        {**DEFAULT_REFERENCE_MAPPING, **(mapping or {})},
        required=("team", "rank"),
    )
    ranks: Dict[str, int] = {}
    for row in raw_rows:
        team = (row.get(columns["team"]) or "").strip().upper()
        raw_rank = (row.get(columns["rank"]) or "").strip()
        if not team:
            continue
        if team in ranks:
            raise DataIntegrityError(f"{path.name}: team {team} ranked more than once")
        try:
            ranks[team] = int(raw_rank)
        except ValueError:
            raise DataIntegrityError(f"{path.name}: rank {raw_rank!r} for {team} is not an integer") from None
    return validate_reference(ranks)
