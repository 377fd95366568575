"""Serve files stored by the local media backend."""

from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

from app.api.deps import timing

bp = Blueprint("media", __name__)


@bp.get("/media/<path:filename>")
@timing
def media_file(filename: str):
    return send_from_directory(current_app.config["MEDIA_ROOT"], filename)
