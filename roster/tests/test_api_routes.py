import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster import app as app_module
from roster.database import Database


@pytest.fixture()
def client(tmp_path, monkeypatch):
    db_path = tmp_path / "roster.sqlite3"
    monkeypatch.setitem(app_module.app.config, "DB_PATH", str(db_path))
    monkeypatch.setitem(app_module.app.config, "PHOTO_DIR", str(tmp_path / "photos"))
    monkeypatch.setitem(app_module.app.config, "TESTING", True)

    database = Database(db_path)
    database.upsert_team("team-home", "Home Lions")
    database.add_member("aaa-111", "team-home", "Bea Keller", jersey_number=7, gender="female")

    with app_module.app.test_client() as test_client:
        yield test_client


def test_version_endpoint(client):
    response = client.get("/api/version")

    assert response.status_code == 200
    assert response.get_json() == {"version": "6.0.0"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_version_follows_configuration(client, monkeypatch):
    monkeypatch.setitem(app_module.app.config, "APP_VERSION", "6.1.0")

    assert client.get("/api/version").get_json()["version"] == "6.1.0"


def test_health_endpoint(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "OK"
    assert payload["version"] == "6.0.0"
    assert payload["database"] == "SQLite"
    assert payload["persistent"] is True
    assert payload["timestamp"]


def test_teams_endpoint(client):
    response = client.get("/api/teams")

    assert response.status_code == 200
    teams = response.get_json()
    assert len(teams) == 1
    assert teams[0]["name"] == "Home Lions"
    member = teams[0]["members"][0]
    assert member["id"] == "aaa-111"
    assert member["jerseyNumber"] == 7
    assert member["photo"].startswith("data:image/svg+xml;base64,")


def test_teams_endpoint_reports_database_failure(client, monkeypatch):
    def _broken(self):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(Database, "list_teams", _broken)

    response = client.get("/api/teams")

    assert response.status_code == 500
    assert response.get_json() == {"error": "database unavailable"}


def test_non_api_routes_have_no_cors_headers(client):
    response = client.get("/photos/default-male.svg")

    assert "Access-Control-Allow-Origin" not in response.headers
