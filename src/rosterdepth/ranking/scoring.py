"""Turn cluster membership into ordinal value scores."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from statistics import fmean
from typing import Dict, List, Mapping, Sequence, Tuple

from rosterdepth.clustering import ClusterResult, ScaledFeatures
from rosterdepth.errors import DataIntegrityError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterProfile:
    """Summary of one cluster used to decide how strong its members are."""

    label: int
    size: int
    centroid: Mapping[str, float]
    mean_stats: Mapping[str, float]

    @property
    def is_empty(self) -> bool:
        return self.size == 0


@dataclass(frozen=True)
class PlayerScore:
    player_id: str
    name: str
    label: int
    score: int
    order: int

    @property
    def key(self) -> Tuple[str, str]:
        return (self.player_id, self.name)


def profile_clusters(scaled: ScaledFeatures, result: ClusterResult) -> List[ClusterProfile]:
    """Centroid (scaled) and mean raw statistics for every label 1..K."""

    if len(result.labels) != scaled.n_players:
        raise DataIntegrityError("Cluster labels are not aligned with the feature matrix")

    profiles: List[ClusterProfile] = []
    for label in range(1, result.n_clusters + 1):
        members = result.members(label)
        if not members:
            profiles.append(ClusterProfile(label=label, size=0, centroid={}, mean_stats={}))
            continue
        centroid = scaled.matrix[members].mean(axis=0)
        means = scaled.raw[members].mean(axis=0)
        profiles.append(
            ClusterProfile(
                label=label,
                size=len(members),
                centroid={feature: float(value) for feature, value in zip(scaled.features, centroid)},
                mean_stats={feature: float(value) for feature, value in zip(scaled.features, means)},
            )
        )
    return profiles


def derive_label_scores(
    profiles: Sequence[ClusterProfile],
    ladder: Sequence[int],
    primary_feature: str,
) -> Dict[int, int]:
    """Hand out ``ladder`` to clusters ordered strongest first.

    Clusters are ordered by the centroid of ``primary_feature`` (descending), then by
    the mean of all centroid coordinates, then by label. Empty clusters sort last.
    """

    if len(ladder) != len(profiles):
        raise ValueError(f"score ladder has {len(ladder)} entries for {len(profiles)} clusters")

    def strength(profile: ClusterProfile) -> Tuple[bool, float, float, int]:
        if profile.is_empty:
            return (True, 0.0, 0.0, profile.label)
        if primary_feature not in profile.centroid:
            raise KeyError(f"Primary feature {primary_feature!r} is not a clustering feature")
        return (
            False,
            -profile.centroid[primary_feature],
            -fmean(profile.centroid.values()),
            profile.label,
        )

    ordered = sorted(profiles, key=strength)
    return {profile.label: int(score) for profile, score in zip(ordered, ladder)}


def resolve_label_scores(
    profiles: Sequence[ClusterProfile],
    *,
    ladder: Sequence[int],
    primary_feature: str,
    static_scores: Mapping[int, int] | None = None,
) -> Dict[int, int]:
    if static_scores:
        logger.info("Using configured label scores %s", dict(sorted(static_scores.items())))
        return {int(label): int(score) for label, score in static_scores.items()}
    return derive_label_scores(profiles, ladder, primary_feature)


def score_players(
    scaled: ScaledFeatures,
    result: ClusterResult,
    label_scores: Mapping[int, int],
) -> List[PlayerScore]:
    """One score per player, keeping the input order in ``PlayerScore.order``."""

    missing = sorted(set(result.labels) - set(label_scores))
    if missing:
        raise ValueError(f"No score configured for cluster label(s) {missing}")
    return [
        PlayerScore(
            player_id=player_id,
            name=name,
            label=label,
            score=label_scores[label],
            order=index,
        )
        for index, (player_id, name, label) in enumerate(
            zip(scaled.player_ids, scaled.names, result.labels)
        )
    ]
