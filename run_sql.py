from __future__ import annotations

import os
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "roster" / "data" / "roster.sqlite3"


def main(directory: Path | None = None) -> int:
    db_path = Path(os.environ.get("DB_PATH", str(DEFAULT_DB_PATH)))
    sql_files = sorted((directory or Path.cwd()).glob("*.sql"))

    if not sql_files:
        print("No SQL files found in the current directory.")
        return 0

    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        for sql_file in sql_files:
            statements = sql_file.read_text(encoding="utf-8")
            conn.executescript(statements)
            conn.commit()
            print(f"Successfully executed {sql_file.name}.")
    return len(sql_files)


if __name__ == "__main__":
    main()
