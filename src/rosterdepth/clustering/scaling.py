"""Feature selection and standardization ahead of clustering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from sklearn.preprocessing import StandardScaler

from rosterdepth.errors import DataIntegrityError, DegenerateFeatureError
from rosterdepth.models import PlayerRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScaledFeatures:
    """Standardized feature matrix; row i belongs to ``player_ids[i]``."""

    player_ids: Tuple[str, ...]
    names: Tuple[str, ...]
    features: Tuple[str, ...]
    raw: np.ndarray
    matrix: np.ndarray
    means: Tuple[float, ...]
    stds: Tuple[float, ...]

    @property
    def n_players(self) -> int:
        return len(self.player_ids)


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def scale_features(players: Sequence[PlayerRecord], features: Sequence[str]) -> ScaledFeatures:
    """Z-score each feature with population mean and standard deviation."""

    if not players:
        raise DataIntegrityError("No players left to scale")
    missing = sorted({f for p in players for f in features if f not in p.stats})
    if missing:
        raise DataIntegrityError(f"Players are missing statistic(s): {', '.join(missing)}")

    raw = np.array([[player.stat(feature) for feature in features] for player in players], dtype=float)
    variances = raw.var(axis=0)
    degenerate = [feature for feature, variance in zip(features, variances) if np.isclose(variance, 0.0)]
    if degenerate:
        raise DegenerateFeatureError(degenerate)

    scaler = StandardScaler()
    matrix = scaler.fit_transform(raw)
    logger.info("Scaled %d players on %d features (%s)", len(players), len(features), ", ".join(features))
    return ScaledFeatures(
        player_ids=tuple(player.player_id for player in players),
        names=tuple(player.name for player in players),
        features=tuple(features),
        raw=_frozen(raw),
        matrix=_frozen(matrix),
        means=tuple(float(value) for value in scaler.mean_),
        stds=tuple(float(value) for value in scaler.scale_),
    )
