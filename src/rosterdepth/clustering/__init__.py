"""Feature scaling and clustering engines."""

from .engine import (
    HIERARCHICAL,
    PARTITION,
    ClusterResult,
    cluster_hierarchical,
    cluster_partition,
)
from .scaling import ScaledFeatures, scale_features

__all__ = [
    "HIERARCHICAL",
    "PARTITION",
    "ClusterResult",
    "ScaledFeatures",
    "cluster_hierarchical",
    "cluster_partition",
    "scale_features",
]
