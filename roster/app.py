# roster/app.py
"""Flask backend for the team roster view app and member photo store."""
from __future__ import annotations

import logging
import os
import platform
from datetime import datetime
from pathlib import Path

from flask import Flask, jsonify, request

from .context import current_database
from .routes import photos_blueprint

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Paths & Config
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.environ.get("DB_PATH", str(DATA_DIR / "roster.sqlite3")))
PHOTO_DIR = Path(os.environ.get("PHOTO_DIR", str(DATA_DIR / "photos")))
PHOTO_FALLBACK_DIR = os.environ.get("PHOTO_FALLBACK_DIR", "")
APP_VERSION = os.environ.get("APP_VERSION", "6.0.0")

app = Flask(__name__)
app.config["JSON_AS_ASCII"] = False
app.config["DB_PATH"] = str(DB_PATH)
app.config["PHOTO_DIR"] = str(PHOTO_DIR)
app.config["PHOTO_FALLBACK_DIR"] = PHOTO_FALLBACK_DIR
app.config["APP_VERSION"] = APP_VERSION
app.register_blueprint(photos_blueprint)


@app.after_request
def _allow_cross_origin(response):
    if request.path.startswith("/api/"):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    return response


@app.get("/api/health")
def health():
    return jsonify(
        {
            "status": "OK",
            "version": app.config["APP_VERSION"],
            "timestamp": datetime.now().astimezone().isoformat(timespec="seconds"),
            "database": "SQLite",
            "python_version": platform.python_version(),
            "persistent": True,
        }
    )


@app.get("/api/version")
def version():
    return jsonify({"version": app.config["APP_VERSION"]})


@app.get("/api/teams")
def list_teams():
    try:
        teams = current_database().list_teams()
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Failed to load teams")
        return jsonify({"error": str(exc)}), 500
    return jsonify(teams)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
