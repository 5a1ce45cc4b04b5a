"""Run-level configuration for the depth pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from .families import StatFamily, get_family


logger = logging.getLogger(__name__)

ALGORITHMS: Tuple[str, ...] = ("hierarchical", "partition")

_SEED_ENV = "ROSTERDEPTH_SEED"
_TOP_N_ENV = "ROSTERDEPTH_TOP_N"

DEFAULT_SEASON_TOTAL_MARKERS: Tuple[str, ...] = ("TOT", "2TM", "3TM", "4TM", "5TM")
DEFAULT_SCORE_LADDER: Tuple[int, ...] = (15, 10, 5, 3, 1)


@dataclass(frozen=True)
class PipelineConfig:
    family: str = "basic"
    min_games_started: int = 5
    min_games_played: int = 15
    n_clusters: int = 5
    top_n: int = 9
    seed: int = 0
    kmeans_max_iter: int = 300
    kmeans_n_init: int = 10
    kmeans_retries: int = 3
    # Scores handed out to clusters ordered from strongest to weakest.
    score_ladder: Tuple[int, ...] = DEFAULT_SCORE_LADDER
    label_scores: Mapping[str, Mapping[int, int]] = field(default_factory=dict)
    strict_rosters: bool = True
    report_teams: int = 5
    season_total_markers: Tuple[str, ...] = DEFAULT_SEASON_TOTAL_MARKERS

    @property
    def stat_family(self) -> StatFamily:
        return get_family(self.family)

    def validate(self) -> "PipelineConfig":
        """Raise ValueError for settings the pipeline cannot honor."""

        get_family(self.family)
        if self.n_clusters < 1:
            raise ValueError("n_clusters must be at least 1")
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1")
        if self.min_games_started < 0 or self.min_games_played < 0:
            raise ValueError("participation thresholds must be non-negative")
        if self.kmeans_max_iter < 1 or self.kmeans_n_init < 1 or self.kmeans_retries < 0:
            raise ValueError("k-means iteration settings must be positive")
        if len(self.score_ladder) != self.n_clusters:
            raise ValueError(
                f"score_ladder has {len(self.score_ladder)} entries, expected {self.n_clusters}"
            )
        expected_labels = set(range(1, self.n_clusters + 1))
        for algorithm, mapping in self.label_scores.items():
            if algorithm not in ALGORITHMS:
                raise ValueError(f"label_scores references unknown algorithm {algorithm!r}")
            if set(mapping) != expected_labels:
                raise ValueError(
                    f"label_scores[{algorithm!r}] must cover labels 1..{self.n_clusters}"
                )
        return self

    def static_scores_for(self, algorithm: str) -> Optional[Mapping[int, int]]:
        return self.label_scores.get(algorithm)

    def with_overrides(self, **overrides: object) -> "PipelineConfig":
        """Return a copy with non-None overrides applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        return replace(self, **values)


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s=%d below minimum %d; using default %d", name, value, min_value, default)
        return default
    return value


def apply_environment(config: PipelineConfig) -> PipelineConfig:
    """Overlay ROSTERDEPTH_* environment overrides onto ``config``."""

    return replace(
        config,
        seed=_env_int(_SEED_ENV, config.seed, min_value=0),
        top_n=_env_int(_TOP_N_ENV, config.top_n, min_value=1),
    )


def default_ladder(n_clusters: int) -> Tuple[int, ...]:
    """Default scores for ``n_clusters`` tiers; tiers past the fifth repeat the lowest score."""

    if n_clusters <= len(DEFAULT_SCORE_LADDER):
        return DEFAULT_SCORE_LADDER[:n_clusters]
    extra = n_clusters - len(DEFAULT_SCORE_LADDER)
    return DEFAULT_SCORE_LADDER + (DEFAULT_SCORE_LADDER[-1],) * extra
