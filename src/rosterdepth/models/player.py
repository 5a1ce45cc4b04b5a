"""Canonical player models shared across ingestion and ranking layers."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerRecord(BaseModel):
    """One player's statistic line for a single statistic family."""

    player_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team: str = ""
    stats: Dict[str, float]
    games_played: Optional[int] = Field(default=None, ge=0)
    games_started: Optional[int] = Field(default=None, ge=0)
    source: str = "season"

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, str]:
        return (self.player_id, self.name)

    def stat(self, feature: str) -> float:
        return self.stats[feature]


class RosterEntry(BaseModel):
    """Association of a player name with a current-season team."""

    name: str = Field(..., min_length=1)
    team: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)
