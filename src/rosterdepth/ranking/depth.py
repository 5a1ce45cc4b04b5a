"""Per-team depth values from the best N value scores on each roster."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from rosterdepth.errors import DataIntegrityError, InsufficientRosterError, UnmatchedPlayerWarning
from rosterdepth.ingest import normalize_name
from rosterdepth.models import PlayerRecord, RosterEntry

from .scoring import PlayerScore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterAssignment:
    """Current team for every matched player; unmatched players listed once."""

    teams: Tuple[str, ...]
    player_teams: Mapping[Tuple[str, str], str]
    unmatched: Tuple[UnmatchedPlayerWarning, ...]

    def team_for(self, key: Tuple[str, str]) -> str | None:
        return self.player_teams.get(key)


@dataclass(frozen=True)
class TeamDepth:
    team: str
    algorithm: str
    depth: int
    players: Tuple[PlayerScore, ...]
    eligible: int


@dataclass(frozen=True)
class DepthTable:
    algorithm: str
    top_n: int
    teams: Tuple[TeamDepth, ...]
    issues: Tuple[InsufficientRosterError, ...] = ()

    def depth_by_team(self) -> Dict[str, int]:
        return {entry.team: entry.depth for entry in self.teams}


def match_rosters(players: Sequence[PlayerRecord], roster: Sequence[RosterEntry]) -> RosterAssignment:
    """Left-join players onto the roster table by normalized name.

    Names that fold to the same key (``Marcus Morris`` / ``Marcus Morris Sr.``) are
    resolved by exact spelling; a roster slot may be claimed by at most one player.
    """

    exact_teams: Dict[str, str] = {}
    by_key: Dict[str, Dict[str, str]] = {}
    for entry in roster:
        existing = exact_teams.get(entry.name)
        if existing is not None and existing != entry.team:
            raise DataIntegrityError(f"{entry.name} is listed on both {existing} and {entry.team}")
        exact_teams[entry.name] = entry.team
        by_key.setdefault(normalize_name(entry.name), {})[entry.name] = entry.team

    players_by_key: Dict[str, List[PlayerRecord]] = {}
    for player in players:
        players_by_key.setdefault(normalize_name(player.name), []).append(player)

    player_teams: Dict[Tuple[str, str], str] = {}
    unmatched: List[UnmatchedPlayerWarning] = []
    for player in players:
        key = normalize_name(player.name)
        entries = by_key.get(key)
        if not entries:
            team = None
        elif len(entries) == 1 and len(players_by_key[key]) == 1:
            team = next(iter(entries.values()))
        else:
            team = _resolve_shared_name(player, entries, players_by_key[key])
        if team is None:
            unmatched.append(UnmatchedPlayerWarning(player.name, player.player_id))
        else:
            player_teams[player.key] = team

    if unmatched:
        logger.warning("%d players have no current team and are excluded", len(unmatched))
    return RosterAssignment(
        teams=tuple(sorted({entry.team for entry in roster})),
        player_teams=player_teams,
        unmatched=tuple(unmatched),
    )


def _resolve_shared_name(
    player: PlayerRecord,
    entries: Mapping[str, str],
    claimants: Sequence[PlayerRecord],
) -> str | None:
    if player.name in entries:
        same_spelling = [other for other in claimants if other.name == player.name]
        if len(same_spelling) > 1:
            raise DataIntegrityError(f"{player.name} matches more than one season player")
        return entries[player.name]
    unclaimed = [name for name in entries if all(other.name != name for other in claimants)]
    if unclaimed:
        raise DataIntegrityError(
            f"{player.name} is ambiguous against roster names {', '.join(sorted(entries))}"
        )
    return None


def select_top_players(eligible: Sequence[PlayerScore], top_n: int) -> List[PlayerScore]:
    """Highest scores first; equal scores keep input order."""

    ranked = sorted(eligible, key=lambda score: (-score.score, score.order))
    return ranked[:top_n]


def aggregate_depth(
    scores: Sequence[PlayerScore],
    assignment: RosterAssignment,
    *,
    algorithm: str,
    top_n: int,
    strict: bool = True,
) -> DepthTable:
    """Sum each team's top-N value scores.

    A team with fewer than ``top_n`` eligible players raises InsufficientRosterError
    when ``strict``; otherwise the condition is recorded on the returned table and the
    depth is computed from the players available.
    """

    by_team: Dict[str, List[PlayerScore]] = {team: [] for team in assignment.teams}
    for score in scores:
        team = assignment.team_for(score.key)
        if team is not None:
            by_team[team].append(score)

    teams: List[TeamDepth] = []
    issues: List[InsufficientRosterError] = []
    for team in sorted(by_team):
        eligible = by_team[team]
        if len(eligible) < top_n:
            issue = InsufficientRosterError(team, len(eligible), top_n, algorithm)
            if strict:
                raise issue
            logger.warning("%s (%s)", issue, algorithm)
            issues.append(issue)
        selected = select_top_players(eligible, top_n)
        teams.append(
            TeamDepth(
                team=team,
                algorithm=algorithm,
                depth=sum(score.score for score in selected),
                players=tuple(selected),
                eligible=len(eligible),
            )
        )
    return DepthTable(algorithm=algorithm, top_n=top_n, teams=tuple(teams), issues=tuple(issues))
