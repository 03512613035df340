"""Filesystem store for member photos and generated default avatars."""
from __future__ import annotations

import base64
import logging
import re
import time
from io import BytesIO
from pathlib import Path
from typing import Iterable

from PIL import Image, ImageOps, UnidentifiedImageError

from .photo_updates import parse_photo_filename

_LOGGER = logging.getLogger(__name__)

SERVABLE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-_.]+\.(jpg|jpeg|png|webp|svg)$", re.IGNORECASE)
MEMBER_ID_PATTERN = re.compile(r"^[0-9a-f\-]+$", re.IGNORECASE)
LISTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}

DEFAULT_AVATAR_NAMES = {
    "default-male.svg": "male",
    "default-female.svg": "female",
}

_AVATAR_COLOURS = {"female": "#FF69B4", "male": "#4F80FF"}

# Pillow format -> stored extension
_SAVE_FORMATS = {
    "JPEG": "jpg",
    "PNG": "png",
}

_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


class InvalidPhotoError(ValueError):
    """Raised when an upload is not a usable member photo."""


def is_valid_photo_name(name: str) -> bool:
    return bool(name) and SERVABLE_NAME_PATTERN.match(name) is not None


def default_avatar_svg(gender: str | None) -> str:
    colour = _AVATAR_COLOURS["female" if gender == "female" else "male"]
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg width="100" height="100" viewBox="0 0 100 100" xmlns="http://www.w3.org/2000/svg">\n'
        f'    <circle cx="50" cy="50" r="50" fill="{colour}"/>\n'
        '    <circle cx="50" cy="35" r="18" fill="white"/>\n'
        '    <ellipse cx="50" cy="75" rx="25" ry="20" fill="white"/>\n'
        "</svg>"
    )


def default_avatar_data_uri(gender: str | None) -> str:
    encoded = base64.b64encode(default_avatar_svg(gender).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


class PhotoStore:
    """Member photos kept as ``<member_id>_<timestamp>.<ext>`` files."""

    def __init__(self, directory: Path, fallback_directory: Path | None = None) -> None:
        self.directory = Path(directory)
        self.fallback_directory = Path(fallback_directory) if fallback_directory else None

    def _search_dirs(self) -> Iterable[Path]:
        yield self.directory
        if self.fallback_directory is not None:
            yield self.fallback_directory

    def resolve_photo_path(self, name: str) -> Path | None:
        if not is_valid_photo_name(name):
            return None
        for directory in self._search_dirs():
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def save_member_photo(
        self, member_id: str, image_bytes: bytes, now: float | None = None
    ) -> str:
        """Normalise an uploaded image and store it for *member_id*.

        Returns the stored filename. The image is re-encoded after applying
        its EXIF orientation so browsers render it upright.
        """
        if not member_id or MEMBER_ID_PATTERN.match(member_id) is None:
            raise InvalidPhotoError("member id must contain only hex digits and hyphens")
        if not image_bytes:
            raise InvalidPhotoError("empty image payload")

        try:
            with Image.open(BytesIO(image_bytes)) as image:
                source_format = (image.format or "").upper()
                normalized = ImageOps.exif_transpose(image)
                extension = _SAVE_FORMATS.get(source_format, "png")
                if extension == "jpg" and normalized.mode not in ("RGB", "L"):
                    normalized = normalized.convert("RGB")
                elif extension == "png" and normalized.mode not in _PNG_MODES:
                    has_alpha = "A" in normalized.getbands()
                    normalized = normalized.convert("RGBA" if has_alpha else "RGB")
                buffer = BytesIO()
                normalized.save(buffer, format="JPEG" if extension == "jpg" else "PNG")
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidPhotoError(f"unreadable image: {exc}") from exc

        timestamp = int(now if now is not None else time.time())
        filename = f"{member_id}_{timestamp}.{extension}"
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / filename).write_bytes(buffer.getvalue())
        _LOGGER.info("Stored photo %s for member %s", filename, member_id)
        return filename

    def list_photos(self) -> list[dict[str, object]]:
        photos: list[dict[str, object]] = []
        for directory in self._search_dirs():
            if not directory.is_dir():
                continue
            for entry in sorted(directory.iterdir()):
                if not entry.is_file() or entry.suffix.lower() not in LISTED_EXTENSIONS:
                    continue
                parsed = parse_photo_filename(entry.name)
                photos.append(
                    {
                        "file": entry.name,
                        "path": str(entry),
                        "member_id": parsed.member_id if parsed else entry.stem,
                        "size": entry.stat().st_size,
                    }
                )
        return photos
