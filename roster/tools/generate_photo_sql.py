"""CLI tool to turn the member photo store into roster photo updates."""
from __future__ import annotations

import argparse
import os
from pathlib import Path

from ..database import Database
from ..photo_updates import collect_photo_map, generate_bulk_update_sql, generate_individual_updates_sql

_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate SQL linking stored photos to members")
    parser.add_argument(
        "--photo-dir",
        default=os.environ.get("PHOTO_DIR", str(_DATA_DIR / "photos")),
        help="Directory holding <memberId>_<sequence>.<ext> files",
    )
    parser.add_argument(
        "--individual",
        action="store_true",
        help="Emit one UPDATE per member instead of a single CASE statement",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Write the photo map straight into the roster database",
    )
    parser.add_argument(
        "--db",
        default=os.environ.get("DB_PATH", str(_DATA_DIR / "roster.sqlite3")),
        help="SQLite database used with --apply",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.apply:
        photo_map = collect_photo_map(args.photo_dir)
        updated = Database(Path(args.db)).apply_photo_map(photo_map)
        print(f"Updated {updated} of {len(photo_map)} member photos in {args.db}")
        return 0

    if args.individual:
        print(generate_individual_updates_sql(args.photo_dir), end="")
    else:
        print(generate_bulk_update_sql(args.photo_dir), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
