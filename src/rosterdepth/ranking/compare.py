"""Rank teams by depth and measure agreement with a reference ranking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from statistics import fmean
from typing import Dict, List, Mapping, Sequence, Tuple

from rosterdepth.errors import DataIntegrityError

from .depth import DepthTable


logger = logging.getLogger(__name__)

COMBINED = "combined"


@dataclass(frozen=True)
class TeamComparison:
    team: str
    reference_rank: int
    depth: Mapping[str, int]
    ranks: Mapping[str, int]
    differences: Mapping[str, int]


@dataclass(frozen=True)
class RankComparison:
    algorithms: Tuple[str, ...]
    teams: Tuple[TeamComparison, ...]
    fit: Mapping[str, float]

    def ranked(self, algorithm: str) -> List[TeamComparison]:
        return sorted(self.teams, key=lambda row: row.ranks[algorithm])

    def top_teams(self, algorithm: str, count: int) -> List[TeamComparison]:
        return self.ranked(algorithm)[:count]

    def bottom_teams(self, algorithm: str, count: int) -> List[TeamComparison]:
        if count <= 0:
            return []
        return self.ranked(algorithm)[-count:]


def rank_values(values: Mapping[str, float], *, descending: bool = True) -> Dict[str, int]:
    """Dense 1..n ranks; equal values are separated by team code."""

    sign = -1.0 if descending else 1.0
    ordered = sorted(values, key=lambda team: (sign * values[team], team))
    return {team: position for position, team in enumerate(ordered, start=1)}


def rank_depths(table: DepthTable) -> Dict[str, int]:
    return rank_values(table.depth_by_team(), descending=True)


def _check_team_sets(tables: Sequence[DepthTable], reference: Mapping[str, int]) -> None:
    expected = set(reference)
    for table in tables:
        teams = set(table.depth_by_team())
        if teams != expected:
            missing = sorted(expected - teams)
            extra = sorted(teams - expected)
            raise DataIntegrityError(
                f"{table.algorithm} depth teams differ from reference ranking "
                f"(missing: {missing or '-'}, unranked: {extra or '-'})"
            )


def compare_rankings(
    tables: Sequence[DepthTable],
    reference: Mapping[str, int],
) -> RankComparison:
    """Join per-algorithm depth ranks with the reference and compute fit metrics.

    Differences are ``reference_rank - depth_rank``; the combined ranking orders teams
    by their mean rank across algorithms. Fit is the mean absolute difference, lower
    is better.
    """

    if not tables:
        raise ValueError("At least one depth table is required")
    _check_team_sets(tables, reference)

    algorithms = tuple(table.algorithm for table in tables)
    ranks_by_algorithm = {table.algorithm: rank_depths(table) for table in tables}
    depth_by_algorithm = {table.algorithm: table.depth_by_team() for table in tables}
    mean_ranks = {
        team: fmean(ranks_by_algorithm[algorithm][team] for algorithm in algorithms)
        for team in reference
    }
    ranks_by_algorithm[COMBINED] = rank_values(mean_ranks, descending=False)

    rows: List[TeamComparison] = []
    for team in sorted(reference, key=lambda code: (reference[code], code)):
        ranks = {name: ranks_by_algorithm[name][team] for name in (*algorithms, COMBINED)}
        rows.append(
            TeamComparison(
                team=team,
                reference_rank=reference[team],
                depth={algorithm: depth_by_algorithm[algorithm][team] for algorithm in algorithms},
                ranks=ranks,
                differences={name: reference[team] - rank for name, rank in ranks.items()},
            )
        )

    fit = {
        name: fmean(abs(row.differences[name]) for row in rows)
        for name in (*algorithms, COMBINED)
    }
    for name, value in fit.items():
        logger.info("Mean absolute rank difference (%s): %.3f", name, value)
    return RankComparison(algorithms=algorithms, teams=tuple(rows), fit=fit)
