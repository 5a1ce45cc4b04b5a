"""Error and warning types raised or reported by the depth pipeline."""

from __future__ import annotations

from typing import Sequence


class RosterDepthError(RuntimeError):
    """Base class for conditions that abort a pipeline run."""


class DataIntegrityError(RosterDepthError):
    """Raised when source rows are malformed or structurally inconsistent."""


class DegenerateFeatureError(RosterDepthError):
    """Raised when a clustering feature has no variance across the population."""

    def __init__(self, features: Sequence[str]):
        self.features = tuple(features)
        joined = ", ".join(self.features)
        super().__init__(
            f"Feature(s) with zero variance cannot be standardized: {joined}"
        )


class InsufficientRosterError(RosterDepthError):
    """Raised (or reported) when a team has fewer eligible players than required."""

    def __init__(self, team: str, eligible: int, required: int, algorithm: str | None = None):
        self.team = team
        self.eligible = eligible
        self.required = required
        self.algorithm = algorithm
        super().__init__(
            f"Team {team} has {eligible} eligible players, {required} required"
        )


class UnmatchedPlayerWarning(UserWarning):
    """A scored player with no current-team entry in the roster table."""

    def __init__(self, name: str, player_id: str):
        self.name = name
        self.player_id = player_id
        super().__init__(f"No roster entry for {name} ({player_id})")


class ClusterConvergenceWarning(UserWarning):
    """Partition clustering did not stabilize or left a cluster empty."""

    def __init__(self, algorithm: str, reason: str):
        self.algorithm = algorithm
        self.reason = reason
        super().__init__(f"{algorithm}: {reason}")


__all__ = [
    "ClusterConvergenceWarning",
    "DataIntegrityError",
    "DegenerateFeatureError",
    "InsufficientRosterError",
    "RosterDepthError",
    "UnmatchedPlayerWarning",
]
