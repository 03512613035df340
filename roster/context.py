"""Per-request access to the configured roster services."""
from __future__ import annotations

from pathlib import Path

from flask import current_app

from .database import Database
from .photo_store import PhotoStore


def current_database() -> Database:
    return Database(Path(current_app.config["DB_PATH"]))


def current_photo_dir() -> Path:
    return Path(current_app.config["PHOTO_DIR"])


def current_photo_store() -> PhotoStore:
    fallback = current_app.config.get("PHOTO_FALLBACK_DIR") or None
    return PhotoStore(current_photo_dir(), Path(fallback) if fallback else None)
