"""HTTP routes for the member photo store and the photo SQL generators."""
from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory, url_for

from ..context import current_database, current_photo_dir, current_photo_store
from ..photo_reports import build_integration_report, find_orphaned_photos
from ..photo_store import DEFAULT_AVATAR_NAMES, InvalidPhotoError, default_avatar_svg, is_valid_photo_name
from ..photo_updates import (
    build_photo_map,
    generate_bulk_update_sql,
    generate_individual_updates_sql,
    scan_photo_directory,
)

photos_blueprint = Blueprint("photos", __name__)

_ONE_YEAR = 31536000
_IMMUTABLE_CACHE = f"public, max-age={_ONE_YEAR}, immutable"


def _plain_text(body: str) -> Response:
    return Response(body, status=200, mimetype="text/plain")


@photos_blueprint.get("/photos/members/bulk-photo-update")
def bulk_photo_update():
    """Single ``UPDATE ... CASE`` statement for every photo in the store."""
    return _plain_text(generate_bulk_update_sql(current_photo_dir()))


@photos_blueprint.get("/photos/members/photo-updates")
def individual_photo_updates():
    return _plain_text(generate_individual_updates_sql(current_photo_dir()))


@photos_blueprint.get("/photos/<path:filename>")
def serve_photo(filename: str):
    if not is_valid_photo_name(filename):
        return Response("Invalid filename", status=400, mimetype="text/plain")

    gender = DEFAULT_AVATAR_NAMES.get(filename)
    if gender is not None:
        response = Response(default_avatar_svg(gender), mimetype="image/svg+xml")
        response.headers["Cache-Control"] = _IMMUTABLE_CACHE
        return response

    path = current_photo_store().resolve_photo_path(filename)
    if path is None:
        return Response("Photo not found", status=404, mimetype="text/plain")

    response = send_from_directory(path.parent, path.name, conditional=True, max_age=_ONE_YEAR)
    response.headers["Cache-Control"] = _IMMUTABLE_CACHE
    return response


@photos_blueprint.post("/api/photos/<member_id>")
def upload_member_photo(member_id: str):
    upload = request.files.get("photo")
    image_bytes = upload.read() if upload is not None else request.get_data()

    try:
        filename = current_photo_store().save_member_photo(member_id, image_bytes)
    except InvalidPhotoError as exc:
        return jsonify({"status": "error", "message": str(exc)}), 400

    updated = current_database().apply_photo_map({member_id: filename})
    return (
        jsonify(
            {
                "status": "ok",
                "filename": filename,
                "url": url_for("photos.serve_photo", filename=filename),
                "member_updated": updated > 0,
            }
        ),
        201,
    )


@photos_blueprint.get("/api/photos")
def list_photos():
    photos = current_photo_store().list_photos()
    return jsonify({"total_photos": len(photos), "photos": photos})


@photos_blueprint.get("/api/photos/integration")
def photo_integration():
    try:
        photos = scan_photo_directory(current_photo_dir())
        members = current_database().list_members()
    except Exception as exc:  # pylint: disable=broad-except
        current_app.logger.exception("Failed to build photo integration report")
        return jsonify({"error": str(exc)}), 500
    return jsonify(build_integration_report(photos, members))


@photos_blueprint.get("/api/photos/orphans")
def orphaned_photos():
    try:
        photo_map = build_photo_map(scan_photo_directory(current_photo_dir()))
        member_ids = current_database().list_member_ids()
    except Exception as exc:  # pylint: disable=broad-except
        current_app.logger.exception("Failed to detect orphaned photos")
        return jsonify({"error": str(exc)}), 500

    orphans = find_orphaned_photos(photo_map, member_ids)
    return jsonify(
        {
            "total_photos": len(photo_map),
            "existing_members": len(member_ids),
            "orphaned_count": len(orphans),
            "orphans": [
                {"uuid": member_id, "file": filename} for member_id, filename in orphans.items()
            ],
        }
    )
