from __future__ import annotations

from pathlib import Path

from roster.database import Database
from roster.photo_store import default_avatar_data_uri


def test_schema_is_created_on_open(tmp_path: Path) -> None:
    database = Database(tmp_path / "nested" / "roster.sqlite3")

    with database._connect() as conn:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        }
    assert {"teams", "team_members"} <= tables


def test_list_teams_groups_members_by_team(roster_db: Database) -> None:
    teams = roster_db.list_teams()

    assert [team["name"] for team in teams] == ["Away Eagles", "Home Lions"]
    away, home = teams
    assert home["id"] == "team-home"
    assert home["category"] == "U12"
    assert home["colorData"] == "#FF0000"
    assert [member["name"] for member in home["members"]] == ["Adam Stone", "Bea Keller"]
    assert away["colorData"] == "#2196F3"
    assert away["members"][0]["photo"] == "ccc-333_5.jpg"
    assert away["members"][0]["jerseyNumber"] is None


def test_list_teams_uses_default_avatar_without_photo(roster_db: Database) -> None:
    home = next(team for team in roster_db.list_teams() if team["id"] == "team-home")
    bea = next(member for member in home["members"] if member["id"] == "aaa-111")

    assert bea["jerseyNumber"] == 7
    assert bea["photo"] == default_avatar_data_uri("female")


def test_team_without_members_has_empty_list(roster_db: Database) -> None:
    roster_db.upsert_team("team-bench", "Bench")

    bench = next(team for team in roster_db.list_teams() if team["id"] == "team-bench")

    assert bench["members"] == []


def test_upsert_team_updates_existing_row(roster_db: Database) -> None:
    roster_db.upsert_team("team-away", "Away Hawks", captain_id="ccc-333")

    away = next(team for team in roster_db.list_teams() if team["id"] == "team-away")

    assert away["name"] == "Away Hawks"
    assert away["captainId"] == "ccc-333"


def test_apply_photo_map_updates_known_members_only(roster_db: Database) -> None:
    updated = roster_db.apply_photo_map(
        {"aaa-111": "aaa-111_10.jpg", "bbb-222": "bbb-222_3.png", "fff-999": "fff-999_1.jpg"}
    )

    assert updated == 2
    assert roster_db.get_member_photo("aaa-111") == "aaa-111_10.jpg"
    assert roster_db.get_member_photo("bbb-222") == "bbb-222_3.png"
    assert roster_db.get_member_photo("ccc-333") == "ccc-333_5.jpg"
    assert roster_db.apply_photo_map({}) == 0


def test_list_member_ids_sorted(roster_db: Database) -> None:
    assert roster_db.list_member_ids() == ["aaa-111", "bbb-222", "ccc-333"]
    assert [member.team_id for member in roster_db.list_members()] == [
        "team-home",
        "team-home",
        "team-away",
    ]
