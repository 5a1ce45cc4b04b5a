"""Player and roster models."""

from .player import PlayerRecord, RosterEntry

__all__ = ["PlayerRecord", "RosterEntry"]
