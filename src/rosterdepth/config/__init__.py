"""Configuration helpers for statistic families and pipeline settings."""

from .families import StatFamily, get_family, iter_families
from .pipeline import (
    ALGORITHMS,
    DEFAULT_SCORE_LADDER,
    DEFAULT_SEASON_TOTAL_MARKERS,
    PipelineConfig,
    apply_environment,
    default_ladder,
)

__all__ = [
    "ALGORITHMS",
    "DEFAULT_SCORE_LADDER",
    "DEFAULT_SEASON_TOTAL_MARKERS",
    "PipelineConfig",
    "StatFamily",
    "apply_environment",
    "default_ladder",
    "get_family",
    "iter_families",
]
