"""Match stored member photos to roster rows and emit the bulk UPDATE SQL."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

_LOGGER = logging.getLogger(__name__)

PHOTO_FILENAME_PATTERN = re.compile(
    r"^([0-9a-f\-]+)_(\d+)\.(jpg|jpeg|png|gif)$", re.IGNORECASE
)

IN_LIST_CHUNK_SIZE = 50

PhotoMap = dict[str, str]


@dataclass(frozen=True)
class PhotoFile:
    filename: str
    member_id: str
    sequence: int
    extension: str


def parse_photo_filename(name: str) -> PhotoFile | None:
    match = PHOTO_FILENAME_PATTERN.match(name)
    if match is None:
        return None
    return PhotoFile(
        filename=name,
        member_id=match.group(1),
        sequence=int(match.group(2)),
        extension=match.group(3).lower(),
    )


def _enumeration_key(photo: PhotoFile) -> tuple[int, str]:
    return photo.sequence, photo.filename


def scan_photo_directory(directory: Path | str) -> list[PhotoFile]:
    """Return the member photos found in *directory*.

    Entries come back ordered by ``(sequence, filename)`` so that the newest
    upload of a member is enumerated last. A missing directory is an empty
    store, not an error.
    """
    root = Path(directory)
    if not root.is_dir():
        _LOGGER.info("Photo directory %s does not exist; no photos to match", root)
        return []

    photos: list[PhotoFile] = []
    for entry in root.iterdir():
        if not entry.is_file():
            continue
        photo = parse_photo_filename(entry.name)
        if photo is None:
            _LOGGER.debug("Skipping %s: not a member photo", entry.name)
            continue
        photos.append(photo)
    photos.sort(key=_enumeration_key)
    return photos


def build_photo_map(photos: Iterable[PhotoFile]) -> PhotoMap:
    # Later photos overwrite earlier ones; the key keeps its first position.
    photo_map: PhotoMap = {}
    for photo in photos:
        photo_map[photo.member_id] = photo.filename
    return photo_map


def collect_photo_map(directory: Path | str) -> PhotoMap:
    return build_photo_map(scan_photo_directory(directory))


def chunk_member_ids(
    member_ids: Sequence[str], size: int = IN_LIST_CHUNK_SIZE
) -> list[list[str]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(member_ids[start : start + size]) for start in range(0, len(member_ids), size)]


def sql_quote(value: str) -> str:
    """Render *value* as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _timestamp(generated_at: datetime | None) -> str:
    return (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


def render_bulk_update(photo_map: PhotoMap, generated_at: datetime | None = None) -> str:
    """Render one ``UPDATE ... CASE`` statement covering every mapped member."""
    lines = [
        "-- Single Bulk Photo Update Statement",
        f"-- Generated on {_timestamp(generated_at)}",
        "",
        "UPDATE team_members SET photo = CASE",
    ]
    for member_id, filename in photo_map.items():
        lines.append(f"    WHEN id = {sql_quote(member_id)} THEN {sql_quote(filename)}")
    lines.extend(["    ELSE photo", "END", "WHERE id IN ("])

    groups = [
        ",\n".join(f"    {sql_quote(member_id)}" for member_id in chunk)
        for chunk in chunk_member_ids(list(photo_map))
    ]
    lines.append(",\n".join(groups))
    lines.extend([
        ");",
        "",
        f"-- This single statement will update all {len(photo_map)} member photos at once!",
    ])
    return "\n".join(lines) + "\n"


def render_individual_updates(
    photo_map: PhotoMap, generated_at: datetime | None = None
) -> str:
    """Render one ``UPDATE`` per member, the form used before the bulk statement."""
    lines = [
        "-- Photo Update SQL Statements",
        f"-- Generated on {_timestamp(generated_at)}",
        "",
    ]
    for member_id, filename in photo_map.items():
        lines.append(
            f"UPDATE team_members SET photo = {sql_quote(filename)} "
            f"WHERE id = {sql_quote(member_id)};"
        )
    lines.extend([
        "",
        f"-- Total UPDATE statements generated: {len(photo_map)}",
        "-- Run these against the roster database to update all member photos",
    ])
    return "\n".join(lines) + "\n"


def generate_bulk_update_sql(
    directory: Path | str, generated_at: datetime | None = None
) -> str:
    """Scan *directory* and return the bulk statement, or ``Error: <message>``."""
    try:
        return render_bulk_update(collect_photo_map(directory), generated_at)
    except Exception as exc:  # pylint: disable=broad-except
        _LOGGER.exception("Failed to generate bulk photo update from %s", directory)
        return f"Error: {exc}"


def generate_individual_updates_sql(
    directory: Path | str, generated_at: datetime | None = None
) -> str:
    try:
        return render_individual_updates(collect_photo_map(directory), generated_at)
    except Exception as exc:  # pylint: disable=broad-except
        _LOGGER.exception("Failed to generate photo updates from %s", directory)
        return f"Error: {exc}"
