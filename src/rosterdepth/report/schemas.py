"""Report models serialized to the JSON depth report."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class NormalizationSummary(BaseModel):
    raw_rows: int
    season_players: int
    merged_players: List[str]
    dropped_low_participation: List[str]
    supplementary_added: List[str]
    rookies_added: List[str]
    total_players: int


class ClusterProfileResponse(BaseModel):
    label: int
    size: int
    score: int
    centroid: Dict[str, float]
    mean_stats: Dict[str, float]


class ClusterSummary(BaseModel):
    algorithm: str
    n_clusters: int
    distinct_labels: int
    iterations: int | None = None
    seed: int | None = None
    profiles: List[ClusterProfileResponse]


class DepthPlayerResponse(BaseModel):
    player_id: str
    name: str
    label: int
    score: int


class TeamDepthResponse(BaseModel):
    team: str
    algorithm: str
    depth: int
    eligible: int
    players: List[DepthPlayerResponse]


class TeamComparisonResponse(BaseModel):
    team: str
    reference_rank: int
    depth: Dict[str, int]
    ranks: Dict[str, int]
    differences: Dict[str, int]


class UnmatchedPlayerResponse(BaseModel):
    player_id: str
    name: str


class RosterIssueResponse(BaseModel):
    team: str
    algorithm: str | None
    eligible: int
    required: int


class ConvergenceIssueResponse(BaseModel):
    algorithm: str
    reason: str


class DepthReport(BaseModel):
    family: str
    settings: Dict[str, Any]
    features: List[str]
    normalization: NormalizationSummary
    clusters: List[ClusterSummary]
    team_depths: List[TeamDepthResponse]
    comparison: List[TeamComparisonResponse]
    fit: Dict[str, float]
    top_teams: Dict[str, List[str]]
    bottom_teams: Dict[str, List[str]]
    unmatched_players: List[UnmatchedPlayerResponse] = Field(default_factory=list)
    roster_issues: List[RosterIssueResponse] = Field(default_factory=list)
    convergence_warnings: List[ConvergenceIssueResponse] = Field(default_factory=list)
