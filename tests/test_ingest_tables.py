from pathlib import Path

import pytest

from rosterdepth.config import get_family
from rosterdepth.errors import DataIntegrityError
from rosterdepth.ingest import (
    StatRow,
    load_records_from_csv,
    load_reference_csv,
    load_rookie_csv,
    load_roster_csv,
    load_supplementary_csv,
    normalize_name,
    rows_to_records,
)

BASIC = get_family("basic")
ADVANCED = get_family("advanced")


def test_normalize_name_folds_accents_and_suffixes():
    assert normalize_name("Nikola Jokić") == normalize_name("Nikola Jokic")
    assert normalize_name("Gary Trent Jr.") == "garytrent"
    assert normalize_name("  Shai  Gilgeous-Alexander ") == "shaigilgeousalexander"


def test_stat_row_from_mapping_strips_values():
    row = StatRow.from_mapping(
        {"Rk": " 7 ", "Player": "Some One", "Team": "bos", "PTS": " 12.5"},
        {"player_id": "Rk", "name": "Player", "team": "Team", "points": "PTS"},
        ["points"],
    )
    assert row.raw_id == "7"
    assert row.raw_stats == {"points": "12.5"}
    assert row.raw_games_played is None


def test_rows_to_records_parses_blank_stats_as_zero():
    row = StatRow(
        raw_id="3",
        raw_name="Cold Shooter",
        raw_team="mia",
        raw_games_played="4",
        raw_games_started="",
        raw_stats={"win_shares": "", "vorp": "-0.2"},
    )
    record = rows_to_records([row], ADVANCED)[0]
    assert record.team == "MIA"
    assert record.stats == {"win_shares": 0.0, "vorp": pytest.approx(-0.2)}
    assert record.games_played == 4
    assert record.games_started is None


def test_rows_to_records_rejects_non_numeric_stats():
    row = StatRow(raw_id="1", raw_name="Bad Row", raw_stats={"win_shares": "n/a", "vorp": "1"})
    with pytest.raises(DataIntegrityError):
        rows_to_records([row], ADVANCED)


def test_load_season_csv_accepts_tm_header(tmp_path: Path):
    path = tmp_path / "advanced.csv"
    path.write_text(
        "Rk,Player,Tm,G,GS,WS,VORP\n"
        "1,Some Center,DEN,79,79,17.0,9.8\n",
        encoding="utf-8",
    )
    records = load_records_from_csv(path, ADVANCED)
    assert records[0].team == "DEN"
    assert records[0].games_started == 79
    assert records[0].stats["vorp"] == pytest.approx(9.8)


def test_load_season_csv_missing_feature_column_raises(tmp_path: Path):
    path = tmp_path / "basic.csv"
    path.write_text(
        "Rk,Player,Team,G,GS,PTS,TRB,AST,STL,BLK\n"
        "1,No Efg,BOS,70,70,20,5,5,1,1\n",
        encoding="utf-8",
    )
    with pytest.raises(DataIntegrityError, match="efg_pct"):
        load_records_from_csv(path, BASIC)


def test_load_season_csv_respects_column_overrides(tmp_path: Path):
    path = tmp_path / "advanced.csv"
    path.write_text(
        "Id,Name,Club,Games,Starts,WinShares,VORP\n"
        "9,Renamed Columns,PHX,60,55,5.5,1.1\n",
        encoding="utf-8",
    )
    records = load_records_from_csv(
        path,
        ADVANCED,
        mapping={
            "player_id": "Id",
            "name": "Name",
            "team": "Club",
            "games_played": "Games",
            "games_started": "Starts",
            "win_shares": "WinShares",
        },
    )
    assert records[0].player_id == "9"
    assert records[0].games_played == 60
    assert records[0].stats["win_shares"] == pytest.approx(5.5)


def test_load_supplementary_defaults_id_to_name(tmp_path: Path):
    path = tmp_path / "supplementary.csv"
    path.write_text("Player,WS,VORP\nInjured Star,9.0,4.0\n", encoding="utf-8")
    records = load_supplementary_csv(path, ADVANCED)
    assert records[0].player_id == "Injured Star"
    assert records[0].source == "supplementary"
    assert records[0].games_played is None


def test_load_rookie_csv(tmp_path: Path):
    path = tmp_path / "rookies.csv"
    path.write_text("Player,Comparable\nNew Guy,Old Guy\n", encoding="utf-8")
    rookies = load_rookie_csv(path)
    assert rookies[0].name == "New Guy"
    assert rookies[0].player_id == "New Guy"
    assert rookies[0].comparable == "Old Guy"


def test_load_roster_csv_reads_utf8_names(tmp_path: Path):
    path = tmp_path / "roster.csv"
    path.write_text("Player,Team\nLuka Dončić,dal\nDāvis Bertāns,cho\n,\n", encoding="utf-8")
    entries = load_roster_csv(path)
    assert [entry.name for entry in entries] == ["Luka Dončić", "Dāvis Bertāns"]
    assert entries[0].team == "DAL"


def test_load_reference_csv_requires_permutation(tmp_path: Path):
    good = tmp_path / "good.csv"
    good.write_text("Team,Rank\nBOS,1\nDEN,2\n", encoding="utf-8")
    assert load_reference_csv(good) == {"BOS": 1, "DEN": 2}

    gap = tmp_path / "gap.csv"
    gap.write_text("Team,Rank\nBOS,1\nDEN,3\n", encoding="utf-8")
    with pytest.raises(DataIntegrityError):
        load_reference_csv(gap)

    duplicate = tmp_path / "duplicate.csv"
    duplicate.write_text("Team,Rank\nBOS,1\nBOS,2\n", encoding="utf-8")
    with pytest.raises(DataIntegrityError):
        load_reference_csv(duplicate)
