"""Hierarchical and partition clustering over a scaled feature matrix."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np
from scipy.cluster.hierarchy import fcluster, linkage
from scipy.spatial.distance import pdist
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from rosterdepth.errors import ClusterConvergenceWarning, DataIntegrityError

from .scaling import ScaledFeatures


logger = logging.getLogger(__name__)

HIERARCHICAL = "hierarchical"
PARTITION = "partition"


@dataclass(frozen=True)
class ClusterResult:
    """Labels 1..K aligned with the rows of the scaled matrix."""

    algorithm: str
    n_clusters: int
    labels: Tuple[int, ...]
    iterations: Optional[int] = None
    seed: Optional[int] = None
    warnings: Tuple[ClusterConvergenceWarning, ...] = ()

    @property
    def distinct_labels(self) -> int:
        return len(set(self.labels))

    def members(self, label: int) -> List[int]:
        return [index for index, value in enumerate(self.labels) if value == label]


def _relabel_by_appearance(raw_labels: Iterable[int]) -> Tuple[int, ...]:
    """Renumber labels 1..m in order of first appearance."""

    mapping: dict[int, int] = {}
    relabeled: List[int] = []
    for value in raw_labels:
        key = int(value)
        if key not in mapping:
            mapping[key] = len(mapping) + 1
        relabeled.append(mapping[key])
    return tuple(relabeled)


def _check_population(scaled: ScaledFeatures, n_clusters: int) -> int:
    if scaled.n_players == 0:
        raise DataIntegrityError("Cannot cluster an empty population")
    if n_clusters < 1:
        raise ValueError("n_clusters must be at least 1")
    if scaled.n_players < n_clusters:
        logger.warning(
            "Only %d players for %d clusters; using %d",
            scaled.n_players,
            n_clusters,
            scaled.n_players,
        )
    return min(n_clusters, scaled.n_players)


def cluster_hierarchical(scaled: ScaledFeatures, n_clusters: int) -> ClusterResult:
    """Complete-linkage agglomeration on Euclidean distances, cut into K flat clusters."""

    effective = _check_population(scaled, n_clusters)
    if scaled.n_players == 1:
        return ClusterResult(algorithm=HIERARCHICAL, n_clusters=n_clusters, labels=(1,))

    tree = linkage(pdist(scaled.matrix, metric="euclidean"), method="complete")
    labels = _relabel_by_appearance(fcluster(tree, t=effective, criterion="maxclust"))

    conditions: Tuple[ClusterConvergenceWarning, ...] = ()
    found = len(set(labels))
    if found < effective:
        reason = f"dendrogram cut produced {found} clusters, {effective} requested"
        logger.warning("Hierarchical clustering: %s", reason)
        conditions = (ClusterConvergenceWarning(HIERARCHICAL, reason),)
    logger.info("Hierarchical clustering assigned %d players to %d clusters", scaled.n_players, found)
    return ClusterResult(
        algorithm=HIERARCHICAL,
        n_clusters=n_clusters,
        labels=labels,
        warnings=conditions,
    )


def _fit_kmeans(
    matrix: np.ndarray,
    n_clusters: int,
    *,
    seed: int,
    max_iter: int,
    n_init: int,
) -> Tuple[KMeans, np.ndarray, List[str]]:
    model = KMeans(
        n_clusters=n_clusters,
        init="k-means++",
        n_init=n_init,
        max_iter=max_iter,
        random_state=seed,
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        labels = model.fit_predict(matrix)
    messages: List[str] = []
    for item in caught:
        if issubclass(item.category, ConvergenceWarning):
            messages.append(str(item.message))
        else:
            warnings.warn(item.message, item.category, stacklevel=2)
    return model, labels, messages


def _assignment_is_stable(matrix: np.ndarray, labels: np.ndarray, centers: np.ndarray) -> bool:
    """True when every non-empty cluster's center is already the mean of its members.

    sklearn reports ``n_iter_ == max_iter`` both for runs cut off by the cap and for runs
    that settled on their final allowed step; only the former would move on another step.
    """

    for label in np.unique(labels):
        members = matrix[labels == label]
        if not np.allclose(members.mean(axis=0), centers[int(label)]):
            return False
    return True


def cluster_partition(
    scaled: ScaledFeatures,
    n_clusters: int,
    *,
    seed: int,
    max_iter: int = 300,
    n_init: int = 10,
    retries: int = 3,
) -> ClusterResult:
    """Lloyd's k-means with a recorded seed; re-seeds when a cluster comes back empty."""

    effective = _check_population(scaled, n_clusters)

    attempt_seed = seed
    for attempt in range(retries + 1):
        attempt_seed = seed + attempt
        model, raw_labels, messages = _fit_kmeans(
            scaled.matrix,
            effective,
            seed=attempt_seed,
            max_iter=max_iter,
            n_init=n_init,
        )
        found = len(set(int(value) for value in raw_labels))
        if found == effective:
            break
        logger.warning(
            "k-means seed %d left %d of %d clusters empty",
            attempt_seed,
            effective - found,
            effective,
        )

    conditions: List[ClusterConvergenceWarning] = [
        ClusterConvergenceWarning(PARTITION, message) for message in messages
    ]
    iterations = int(model.n_iter_)
    stable = _assignment_is_stable(scaled.matrix, raw_labels, model.cluster_centers_)
    if iterations >= max_iter and not stable:
        conditions.append(
            ClusterConvergenceWarning(PARTITION, f"reached iteration cap of {max_iter} without stabilizing")
        )
    if found < effective:
        conditions.append(
            ClusterConvergenceWarning(
                PARTITION,
                f"{effective - found} empty cluster(s) after {retries + 1} attempt(s)",
            )
        )
    for condition in conditions:
        logger.warning("Partition clustering: %s", condition.reason)

    logger.info(
        "Partition clustering converged in %d iterations (seed %d, %d clusters)",
        iterations,
        attempt_seed,
        found,
    )
    return ClusterResult(
        algorithm=PARTITION,
        n_clusters=n_clusters,
        labels=_relabel_by_appearance(raw_labels),
        iterations=iterations,
        seed=attempt_seed,
        warnings=tuple(conditions),
    )
