"""Linear depth pipeline: normalize, scale, cluster, score, aggregate, compare."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from rosterdepth.clustering import (
    HIERARCHICAL,
    PARTITION,
    ClusterResult,
    ScaledFeatures,
    cluster_hierarchical,
    cluster_partition,
    scale_features,
)
from rosterdepth.config import PipelineConfig, get_family
from rosterdepth.config_loader import ConfigProfile
from rosterdepth.errors import ClusterConvergenceWarning, InsufficientRosterError, UnmatchedPlayerWarning
from rosterdepth.ingest import (
    NormalizationReport,
    RookieSubstitute,
    attach_participation,
    load_records_from_csv,
    load_reference_csv,
    load_rookie_csv,
    load_roster_csv,
    load_supplementary_csv,
    normalize_roster,
)
from rosterdepth.models import PlayerRecord, RosterEntry
from rosterdepth.ranking import (
    ClusterProfile,
    DepthTable,
    PlayerScore,
    RankComparison,
    RosterAssignment,
    aggregate_depth,
    compare_rankings,
    match_rosters,
    profile_clusters,
    resolve_label_scores,
    score_players,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineInputs:
    season: Sequence[PlayerRecord]
    roster: Sequence[RosterEntry]
    reference: Mapping[str, int]
    supplementary: Sequence[PlayerRecord] = ()
    rookies: Sequence[RookieSubstitute] = ()
    participation: Sequence[PlayerRecord] = ()


@dataclass(frozen=True)
class PipelineSources:
    season: Path
    roster: Path
    reference: Path
    supplementary: Optional[Path] = None
    rookies: Optional[Path] = None
    participation: Optional[Path] = None


@dataclass(frozen=True)
class AlgorithmOutcome:
    cluster: ClusterResult
    profiles: Tuple[ClusterProfile, ...]
    label_scores: Mapping[int, int]
    scores: Tuple[PlayerScore, ...]
    depth: DepthTable


@dataclass(frozen=True)
class PipelineResult:
    config: PipelineConfig
    normalization: NormalizationReport
    scaled: ScaledFeatures
    assignment: RosterAssignment
    outcomes: Mapping[str, AlgorithmOutcome]
    comparison: RankComparison
    players: Tuple[PlayerRecord, ...] = field(default=())

    @property
    def unmatched(self) -> Tuple[UnmatchedPlayerWarning, ...]:
        return self.assignment.unmatched

    @property
    def roster_issues(self) -> List[InsufficientRosterError]:
        return [issue for outcome in self.outcomes.values() for issue in outcome.depth.issues]

    @property
    def convergence_warnings(self) -> List[ClusterConvergenceWarning]:
        return [warning for outcome in self.outcomes.values() for warning in outcome.cluster.warnings]


def load_inputs(
    sources: PipelineSources,
    config: PipelineConfig,
    profile: ConfigProfile | None = None,
) -> PipelineInputs:
    """Read every input table named in ``sources`` for the configured family."""

    profile = profile or ConfigProfile()
    family = config.stat_family
    season = load_records_from_csv(sources.season, family, mapping=profile.columns_for("season"))

    participation: List[PlayerRecord] = []
    if sources.participation is not None:
        participation = load_records_from_csv(
            sources.participation,
            get_family("basic"),
            mapping=profile.columns_for("participation"),
        )

    supplementary: List[PlayerRecord] = []
    if sources.supplementary is not None:
        supplementary = load_supplementary_csv(
            sources.supplementary, family, mapping=profile.columns_for("supplementary")
        )

    rookies: List[RookieSubstitute] = []
    if sources.rookies is not None:
        rookies = load_rookie_csv(sources.rookies, mapping=profile.columns_for("rookies"))

    return PipelineInputs(
        season=season,
        roster=load_roster_csv(sources.roster, mapping=profile.columns_for("roster")),
        reference=load_reference_csv(sources.reference, mapping=profile.columns_for("reference")),
        supplementary=supplementary,
        rookies=rookies,
        participation=participation,
    )


def _cluster(scaled: ScaledFeatures, config: PipelineConfig) -> Dict[str, ClusterResult]:
    return {
        HIERARCHICAL: cluster_hierarchical(scaled, config.n_clusters),
        PARTITION: cluster_partition(
            scaled,
            config.n_clusters,
            seed=config.seed,
            max_iter=config.kmeans_max_iter,
            n_init=config.kmeans_n_init,
            retries=config.kmeans_retries,
        ),
    }


def run_pipeline(inputs: PipelineInputs, config: PipelineConfig) -> PipelineResult:
    """Run every stage once; each stage consumes the previous stage's output."""

    config.validate()
    family = config.stat_family
    logger.info(
        "Running %s depth pipeline (K=%d, top %d, seed %d)",
        family.name,
        config.n_clusters,
        config.top_n,
        config.seed,
    )

    season = inputs.season
    if inputs.participation:
        season = attach_participation(season, inputs.participation)

    players, normalization = normalize_roster(
        season,
        config=config,
        supplementary=inputs.supplementary,
        rookies=inputs.rookies,
    )
    scaled = scale_features(players, family.features)
    assignment = match_rosters(players, inputs.roster)

    outcomes: Dict[str, AlgorithmOutcome] = {}
    for algorithm, cluster in _cluster(scaled, config).items():
        profiles = profile_clusters(scaled, cluster)
        label_scores = resolve_label_scores(
            profiles,
            ladder=config.score_ladder,
            primary_feature=family.primary_feature,
            static_scores=config.static_scores_for(algorithm),
        )
        scores = score_players(scaled, cluster, label_scores)
        depth = aggregate_depth(
            scores,
            assignment,
            algorithm=algorithm,
            top_n=config.top_n,
            strict=config.strict_rosters,
        )
        outcomes[algorithm] = AlgorithmOutcome(
            cluster=cluster,
            profiles=tuple(profiles),
            label_scores=label_scores,
            scores=tuple(scores),
            depth=depth,
        )

    comparison = compare_rankings([outcome.depth for outcome in outcomes.values()], inputs.reference)
    return PipelineResult(
        config=config,
        normalization=normalization,
        scaled=scaled,
        assignment=assignment,
        outcomes=outcomes,
        comparison=comparison,
        players=tuple(players),
    )
