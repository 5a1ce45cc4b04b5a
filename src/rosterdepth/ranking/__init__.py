"""Value scoring, team depth aggregation and rank comparison."""

from .compare import (
    COMBINED,
    RankComparison,
    TeamComparison,
    compare_rankings,
    rank_depths,
    rank_values,
)
from .depth import (
    DepthTable,
    RosterAssignment,
    TeamDepth,
    aggregate_depth,
    match_rosters,
    select_top_players,
)
from .scoring import (
    ClusterProfile,
    PlayerScore,
    derive_label_scores,
    profile_clusters,
    resolve_label_scores,
    score_players,
)

__all__ = [
    "COMBINED",
    "ClusterProfile",
    "DepthTable",
    "PlayerScore",
    "RankComparison",
    "RosterAssignment",
    "TeamComparison",
    "TeamDepth",
    "aggregate_depth",
    "compare_rankings",
    "derive_label_scores",
    "match_rosters",
    "profile_clusters",
    "rank_depths",
    "rank_values",
    "resolve_label_scores",
    "score_players",
    "select_top_players",
]
