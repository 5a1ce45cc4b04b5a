"""Serialize pipeline results as a comparison CSV and a JSON report."""

from __future__ import annotations

import csv
from dataclasses import asdict
from io import StringIO
from typing import Any, Dict, List

from rosterdepth.pipeline import PipelineResult
from rosterdepth.ranking import COMBINED, RankComparison

from .schemas import (
    ClusterProfileResponse,
    ClusterSummary,
    ConvergenceIssueResponse,
    DepthPlayerResponse,
    DepthReport,
    NormalizationSummary,
    RosterIssueResponse,
    TeamComparisonResponse,
    TeamDepthResponse,
    UnmatchedPlayerResponse,
)


def comparison_to_csv(comparison: RankComparison) -> str:
    """One row per team in reference order with depth, rank and difference columns."""

    names = (*comparison.algorithms, COMBINED)
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    header = ["team", "reference_rank"]
    header.extend(f"{algorithm}_depth" for algorithm in comparison.algorithms)
    header.extend(f"{name}_rank" for name in names)
    header.extend(f"{name}_difference" for name in names)
    writer.writerow(header)

    for row in comparison.teams:
        values: List[object] = [row.team, row.reference_rank]
        values.extend(row.depth[algorithm] for algorithm in comparison.algorithms)
        values.extend(row.ranks[name] for name in names)
        values.extend(row.differences[name] for name in names)
        writer.writerow(values)
    return buffer.getvalue()


def _settings(result: PipelineResult) -> Dict[str, Any]:
    settings = asdict(result.config)
    settings["score_ladder"] = list(result.config.score_ladder)
    settings["season_total_markers"] = list(result.config.season_total_markers)
    settings["label_scores"] = {
        algorithm: {str(label): score for label, score in sorted(mapping.items())}
        for algorithm, mapping in sorted(result.config.label_scores.items())
    }
    return settings


def build_report(result: PipelineResult) -> DepthReport:
    config = result.config
    comparison = result.comparison
    names = (*comparison.algorithms, COMBINED)

    clusters: List[ClusterSummary] = []
    team_depths: List[TeamDepthResponse] = []
    for algorithm, outcome in result.outcomes.items():
        clusters.append(
            ClusterSummary(
                algorithm=algorithm,
                n_clusters=outcome.cluster.n_clusters,
                distinct_labels=outcome.cluster.distinct_labels,
                iterations=outcome.cluster.iterations,
                seed=outcome.cluster.seed,
                profiles=[
                    ClusterProfileResponse(
                        label=profile.label,
                        size=profile.size,
                        score=outcome.label_scores[profile.label],
                        centroid=dict(profile.centroid),
                        mean_stats=dict(profile.mean_stats),
                    )
                    for profile in outcome.profiles
                ],
            )
        )
        team_depths.extend(
            TeamDepthResponse(
                team=entry.team,
                algorithm=algorithm,
                depth=entry.depth,
                eligible=entry.eligible,
                players=[
                    DepthPlayerResponse(
                        player_id=score.player_id,
                        name=score.name,
                        label=score.label,
                        score=score.score,
                    )
                    for score in entry.players
                ],
            )
            for entry in outcome.depth.teams
        )

    return DepthReport(
        family=config.family,
        settings=_settings(result),
        features=list(result.scaled.features),
        normalization=NormalizationSummary(**asdict(result.normalization)),
        clusters=clusters,
        team_depths=team_depths,
        comparison=[
            TeamComparisonResponse(
                team=row.team,
                reference_rank=row.reference_rank,
                depth=dict(row.depth),
                ranks=dict(row.ranks),
                differences=dict(row.differences),
            )
            for row in comparison.teams
        ],
        fit=dict(comparison.fit),
        top_teams={
            name: [row.team for row in comparison.top_teams(name, config.report_teams)]
            for name in names
        },
        bottom_teams={
            name: [row.team for row in comparison.bottom_teams(name, config.report_teams)]
            for name in names
        },
        unmatched_players=[
            UnmatchedPlayerResponse(player_id=item.player_id, name=item.name)
            for item in result.unmatched
        ],
        roster_issues=[
            RosterIssueResponse(
                team=issue.team,
                algorithm=issue.algorithm,
                eligible=issue.eligible,
                required=issue.required,
            )
            for issue in result.roster_issues
        ],
        convergence_warnings=[
            ConvergenceIssueResponse(algorithm=item.algorithm, reason=item.reason)
            for item in result.convergence_warnings
        ],
    )


def report_to_json(result: PipelineResult) -> str:
    return build_report(result).model_dump_json(indent=2)


__all__ = [
    "build_report",
    "comparison_to_csv",
    "report_to_json",
]
