"""Route blueprints for the roster backend."""

from .photos import photos_blueprint

__all__ = ["photos_blueprint"]
