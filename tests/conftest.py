import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster.database import Database  # noqa: E402


@pytest.fixture()
def photo_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "photos"
    directory.mkdir()
    return directory


@pytest.fixture()
def make_photos(photo_dir: Path):
    """Create empty files with the given names inside ``photo_dir``."""

    def _make(*names: str) -> Path:
        for name in names:
            (photo_dir / name).write_bytes(b"")
        return photo_dir

    return _make


@pytest.fixture()
def roster_db(tmp_path: Path) -> Database:
    database = Database(tmp_path / "roster.sqlite3")
    database.upsert_team("team-home", "Home Lions", category="U12", color="#FF0000")
    database.upsert_team("team-away", "Away Eagles")
    database.add_member("aaa-111", "team-home", "Bea Keller", jersey_number=7, gender="female")
    database.add_member("bbb-222", "team-home", "Adam Stone", jersey_number=9, gender="male")
    database.add_member("ccc-333", "team-away", "Chris Vale", gender="male", photo="ccc-333_5.jpg")
    return database
