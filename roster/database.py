"""SQLite helper utilities for the roster backend."""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .photo_store import default_avatar_data_uri

_LOGGER = logging.getLogger(__name__)


@dataclass
class TeamMember:
    id: str
    team_id: str
    name: str
    jersey_number: int | None
    gender: str | None
    photo: str | None


class Database:
    """Light-weight wrapper around SQLite used by the Flask backend."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    # ------------------------------------------------------------------
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS teams (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    category TEXT,
                    color TEXT DEFAULT '#2196F3',
                    description TEXT,
                    captain_id TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS team_members (
                    id TEXT PRIMARY KEY,
                    team_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    jersey_number INTEGER,
                    gender TEXT CHECK(gender IN ('male', 'female')),
                    photo TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    FOREIGN KEY(team_id) REFERENCES teams(id) ON DELETE CASCADE
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_team_members_team_id ON team_members(team_id)"
            )

    # ------------------------------------------------------------------
    def upsert_team(
        self,
        team_id: str,
        name: str,
        *,
        category: str | None = None,
        color: str | None = None,
        description: str | None = None,
        captain_id: str | None = None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO teams (id, name, category, color, description, captain_id)
                VALUES (?, ?, ?, COALESCE(?, '#2196F3'), ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    category = excluded.category,
                    color = excluded.color,
                    description = excluded.description,
                    captain_id = excluded.captain_id
                """,
                (team_id, name, category, color, description, captain_id),
            )

    def add_member(
        self,
        member_id: str,
        team_id: str,
        name: str,
        *,
        jersey_number: int | None = None,
        gender: str | None = None,
        photo: str | None = None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO team_members (id, team_id, name, jersey_number, gender, photo)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (member_id, team_id, name, jersey_number, gender, photo),
            )

    def list_members(self) -> list[TeamMember]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, team_id, name, jersey_number, gender, photo
                FROM team_members
                ORDER BY id
                """
            ).fetchall()
        return [
            TeamMember(
                id=row["id"],
                team_id=row["team_id"],
                name=row["name"],
                jersey_number=row["jersey_number"],
                gender=row["gender"],
                photo=row["photo"],
            )
            for row in rows
        ]

    def list_member_ids(self) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id FROM team_members ORDER BY id").fetchall()
        return [row["id"] for row in rows]

    def get_member_photo(self, member_id: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT photo FROM team_members WHERE id = ?", (member_id,)
            ).fetchone()
        return row["photo"] if row else None

    def list_teams(self) -> list[dict[str, object]]:
        """Return every team with its members, grouped from a single join."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT
                    t.id AS team_id,
                    t.name AS team_name,
                    t.category AS team_category,
                    t.color AS team_color,
                    t.description AS team_description,
                    t.captain_id AS team_captain_id,
                    tm.id AS member_id,
                    tm.name AS member_name,
                    tm.jersey_number,
                    tm.gender,
                    tm.photo
                FROM teams t
                LEFT JOIN team_members tm ON t.id = tm.team_id
                ORDER BY t.name, t.id, tm.name
                """
            ).fetchall()

        teams: list[dict[str, object]] = []
        current: dict[str, object] | None = None
        members: list[dict[str, object]] = []
        for row in rows:
            if current is None or current["id"] != row["team_id"]:
                members = []
                current = {
                    "id": row["team_id"],
                    "name": row["team_name"],
                    "category": row["team_category"],
                    "colorData": row["team_color"],
                    "description": row["team_description"],
                    "captainId": row["team_captain_id"],
                    "members": members,
                }
                teams.append(current)
            if row["member_id"] is None:
                continue
            members.append(
                {
                    "id": row["member_id"],
                    "name": row["member_name"],
                    "jerseyNumber": int(row["jersey_number"]) if row["jersey_number"] else None,
                    "gender": row["gender"],
                    "photo": row["photo"] or default_avatar_data_uri(row["gender"]),
                }
            )
        return teams

    def apply_photo_map(self, photo_map: Mapping[str, str]) -> int:
        """Point each member's ``photo`` column at its mapped file.

        Members missing from ``team_members`` are ignored. Returns the number
        of rows updated.
        """
        if not photo_map:
            return 0
        with self._connect() as conn:
            cursor = conn.executemany(
                "UPDATE team_members SET photo = ? WHERE id = ?",
                [(filename, member_id) for member_id, filename in photo_map.items()],
            )
            updated = cursor.rowcount
        _LOGGER.info("Updated photos for %d of %d mapped members", updated, len(photo_map))
        return updated
