"""Roster normalization: collapse traded players, filter thin samples, add curated rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from rosterdepth.config import PipelineConfig
from rosterdepth.errors import DataIntegrityError
from rosterdepth.models import PlayerRecord

from .tables import RookieSubstitute, normalize_name


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationReport:
    raw_rows: int
    season_players: int
    merged_players: List[str]
    dropped_low_participation: List[str]
    supplementary_added: List[str]
    rookies_added: List[str]
    total_players: int


def deduplicate_season_rows(
    records: Sequence[PlayerRecord],
    *,
    total_markers: Iterable[str],
) -> Tuple[List[PlayerRecord], List[str]]:
    """Keep one row per (id, name), preferring the season-total row for traded players.

    Returns the surviving records in first-seen order and the names of players whose
    partial-team rows were discarded.
    """

    markers = {marker.upper() for marker in total_markers}
    groups: Dict[Tuple[str, str], List[PlayerRecord]] = {}
    for record in records:
        groups.setdefault(record.key, []).append(record)

    kept: List[PlayerRecord] = []
    merged: List[str] = []
    for (player_id, name), group in groups.items():
        if len(group) == 1:
            kept.append(group[0])
            continue
        totals = [record for record in group if record.team.upper() in markers]
        if len(totals) != 1:
            raise DataIntegrityError(
                f"{name} ({player_id}) has {len(group)} rows but {len(totals)} season-total rows"
            )
        kept.append(totals[0])
        merged.append(name)
    return kept, merged


def passes_participation(record: PlayerRecord, *, min_games_started: int, min_games_played: int) -> bool:
    if record.games_played is None or record.games_started is None:
        raise DataIntegrityError(
            f"{record.name} ({record.player_id}) has no games played/started; "
            "supply a participation table for this statistic family"
        )
    return record.games_started >= min_games_started or record.games_played > min_games_played


def attach_participation(
    records: Sequence[PlayerRecord],
    participation: Sequence[PlayerRecord],
) -> List[PlayerRecord]:
    """Fill missing games played/started from another table keyed by id, name and team."""

    lookup = {
        (record.player_id, normalize_name(record.name), record.team): record
        for record in participation
    }
    updated: List[PlayerRecord] = []
    for record in records:
        if record.games_played is not None and record.games_started is not None:
            updated.append(record)
            continue
        source = lookup.get((record.player_id, normalize_name(record.name), record.team))
        if source is None:
            updated.append(record)
            continue
        updated.append(
            record.model_copy(
                update={
                    "games_played": record.games_played if record.games_played is not None else source.games_played,
                    "games_started": record.games_started if record.games_started is not None else source.games_started,
                }
            )
        )
    return updated


def build_rookie_records(
    rookies: Sequence[RookieSubstitute],
    season_records: Sequence[PlayerRecord],
) -> List[PlayerRecord]:
    """Give each rookie the stat line of their comparable veteran."""

    by_name = {normalize_name(record.name): record for record in season_records}
    created: List[PlayerRecord] = []
    for rookie in rookies:
        comparable = by_name.get(normalize_name(rookie.comparable))
        if comparable is None:
            raise DataIntegrityError(
                f"Comparable {rookie.comparable!r} for rookie {rookie.name!r} not found in season table"
            )
        created.append(
            PlayerRecord(
                player_id=rookie.player_id,
                name=rookie.name,
                team="",
                stats=dict(comparable.stats),
                source="rookie",
            )
        )
    return created


def _check_unique(players: Sequence[PlayerRecord]) -> None:
    seen_keys: set[Tuple[str, str]] = set()
    for player in players:
        if player.key in seen_keys:
            raise DataIntegrityError(f"Duplicate player after normalization: {player.name} ({player.player_id})")
        seen_keys.add(player.key)


def normalize_roster(
    records: Sequence[PlayerRecord],
    *,
    config: PipelineConfig,
    supplementary: Sequence[PlayerRecord] = (),
    rookies: Sequence[RookieSubstitute] = (),
) -> Tuple[List[PlayerRecord], NormalizationReport]:
    """Return one row per surviving player plus a summary of what changed."""

    season, merged = deduplicate_season_rows(records, total_markers=config.season_total_markers)

    kept: List[PlayerRecord] = []
    dropped: List[str] = []
    for record in season:
        if passes_participation(
            record,
            min_games_started=config.min_games_started,
            min_games_played=config.min_games_played,
        ):
            kept.append(record)
        else:
            dropped.append(record.name)

    season_names = {normalize_name(record.name) for record in season}
    rookie_records = build_rookie_records(rookies, season)
    for extra in [*supplementary, *rookie_records]:
        if normalize_name(extra.name) in season_names:
            raise DataIntegrityError(
                f"{extra.source.capitalize()} player {extra.name!r} already appears in the season table"
            )

    players = [*kept, *supplementary, *rookie_records]
    _check_unique(players)

    report = NormalizationReport(
        raw_rows=len(records),
        season_players=len(season),
        merged_players=merged,
        dropped_low_participation=dropped,
        supplementary_added=[record.name for record in supplementary],
        rookies_added=[record.name for record in rookie_records],
        total_players=len(players),
    )
    logger.info(
        "Normalized %d rows into %d players (%d merged, %d dropped, %d supplementary, %d rookies)",
        report.raw_rows,
        report.total_players,
        len(merged),
        len(dropped),
        len(report.supplementary_added),
        len(report.rookies_added),
    )
    return players, report
