import pytest

from rosterdepth.config import PipelineConfig
from rosterdepth.errors import DataIntegrityError
from rosterdepth.ingest import (
    RookieSubstitute,
    attach_participation,
    deduplicate_season_rows,
    normalize_roster,
    passes_participation,
)
from rosterdepth.models import PlayerRecord


def _record(player_id, name, team, *, games=60, started=40, points=10.0, source="season"):
    return PlayerRecord(
        player_id=player_id,
        name=name,
        team=team,
        stats={"points": points},
        games_played=games,
        games_started=started,
        source=source,
    )


def test_deduplicate_keeps_season_total_row():
    records = [
        _record("1", "Solo Player", "BOS"),
        _record("2", "Traded Player", "TOT", games=70, points=14.0),
        _record("2", "Traded Player", "CHI", games=30, points=12.0),
        _record("2", "Traded Player", "MIA", games=40, points=15.5),
        _record("3", "Another Player", "DEN"),
    ]

    kept, merged = deduplicate_season_rows(records, total_markers=("TOT",))

    assert [record.name for record in kept] == ["Solo Player", "Traded Player", "Another Player"]
    assert kept[1].team == "TOT"
    assert kept[1].games_played == 70
    assert merged == ["Traded Player"]


def test_deduplicate_accepts_newer_total_markers():
    records = [
        _record("2", "Traded Player", "CHI"),
        _record("2", "Traded Player", "2TM"),
        _record("2", "Traded Player", "MIA"),
    ]
    kept, _ = deduplicate_season_rows(records, total_markers=("TOT", "2TM"))
    assert len(kept) == 1
    assert kept[0].team == "2TM"


def test_deduplicate_without_total_row_raises():
    records = [
        _record("2", "Traded Player", "CHI"),
        _record("2", "Traded Player", "MIA"),
    ]
    with pytest.raises(DataIntegrityError):
        deduplicate_season_rows(records, total_markers=("TOT",))


@pytest.mark.parametrize(
    ("games", "started", "expected"),
    [
        (3, 5, True),
        (16, 0, True),
        (15, 4, False),
        (82, 82, True),
    ],
)
def test_participation_is_inclusive_or(games, started, expected):
    record = _record("1", "Somebody", "BOS", games=games, started=started)
    assert passes_participation(record, min_games_started=5, min_games_played=15) is expected


def test_participation_requires_games_columns():
    record = PlayerRecord(player_id="1", name="No Games", team="BOS", stats={"points": 1.0})
    with pytest.raises(DataIntegrityError):
        passes_participation(record, min_games_started=5, min_games_played=15)


def test_normalize_roster_filters_and_appends_curated_rows():
    season = [
        _record("1", "Starter", "BOS", games=70, started=70, points=20.0),
        _record("2", "Cameo", "BOS", games=4, started=0, points=2.0),
        _record("3", "Veteran Comparable", "DEN", games=60, started=10, points=11.0),
    ]
    supplementary = [
        PlayerRecord(player_id="Hurt Star", name="Hurt Star", stats={"points": 25.0}, source="supplementary")
    ]
    rookies = [RookieSubstitute(player_id="Top Pick", name="Top Pick", comparable="Veteran Comparable")]

    players, report = normalize_roster(
        season,
        config=PipelineConfig(),
        supplementary=supplementary,
        rookies=rookies,
    )

    assert [player.name for player in players] == ["Starter", "Veteran Comparable", "Hurt Star", "Top Pick"]
    assert players[-1].stats == {"points": 11.0}
    assert players[-1].source == "rookie"
    assert report.dropped_low_participation == ["Cameo"]
    assert report.supplementary_added == ["Hurt Star"]
    assert report.rookies_added == ["Top Pick"]
    assert report.total_players == 4
    assert len({player.key for player in players}) == len(players)


def test_rookie_comparable_may_be_a_filtered_player():
    season = [
        _record("1", "Starter", "BOS", games=70, started=70),
        _record("2", "Cameo", "BOS", games=4, started=0, points=2.0),
    ]
    rookies = [RookieSubstitute(player_id="R", name="Raw Rookie", comparable="Cameo")]
    players, _ = normalize_roster(season, config=PipelineConfig(), rookies=rookies)
    assert players[-1].name == "Raw Rookie"
    assert players[-1].stats == {"points": 2.0}


def test_unknown_rookie_comparable_raises():
    season = [_record("1", "Starter", "BOS")]
    rookies = [RookieSubstitute(player_id="R", name="Rookie", comparable="Nobody")]
    with pytest.raises(DataIntegrityError):
        normalize_roster(season, config=PipelineConfig(), rookies=rookies)


def test_supplementary_player_already_in_season_raises():
    season = [_record("1", "Starter", "BOS")]
    supplementary = [PlayerRecord(player_id="x", name="Starter", stats={"points": 1.0}, source="supplementary")]
    with pytest.raises(DataIntegrityError):
        normalize_roster(season, config=PipelineConfig(), supplementary=supplementary)


def test_attach_participation_fills_missing_games():
    advanced = [
        PlayerRecord(player_id="1", name="Nikola Jokić", team="DEN", stats={"win_shares": 17.0}, games_played=79),
        PlayerRecord(player_id="2", name="Unknown", team="BOS", stats={"win_shares": 1.0}),
    ]
    per_game = [_record("1", "Nikola Jokic", "DEN", games=79, started=79)]

    updated = attach_participation(advanced, per_game)

    assert updated[0].games_started == 79
    assert updated[0].games_played == 79
    assert updated[1].games_started is None
    assert advanced[0].games_started is None
