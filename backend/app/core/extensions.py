"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, cast

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

if TYPE_CHECKING:  # pragma: no cover
    from app.services._shared.ports import MediaUploader

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

MEDIA_UPLOADER_KEY = "media_uploader"


def _sync_jwt_settings(app: Flask) -> None:
    """Derive ``flask-jwt-extended`` settings from the token configuration."""
    app.config["JWT_SECRET_KEY"] = app.config["ACCESS_TOKEN_SECRET"]
    app.config.setdefault(
        "JWT_ACCESS_TOKEN_EXPIRES",
        timedelta(minutes=int(app.config.get("ACCESS_TOKEN_EXPIRES_MINUTES", 15))),
    )
    app.config.setdefault(
        "JWT_REFRESH_TOKEN_EXPIRES",
        timedelta(days=int(app.config.get("REFRESH_TOKEN_EXPIRES_DAYS", 10))),
    )


def _build_media_uploader(app: Flask) -> MediaUploader:
    """Instantiate the upload adapter selected by ``MEDIA_BACKEND``."""
    backend = str(app.config.get("MEDIA_BACKEND", "local")).strip().lower()

    if backend == "cloudinary":
        from app.infra.media.cloudinary_uploader import CloudinaryMediaUploader

        return CloudinaryMediaUploader(
            cloud_name=app.config["CLOUDINARY_CLOUD_NAME"],
            api_key=app.config["CLOUDINARY_API_KEY"],
            api_secret=app.config["CLOUDINARY_API_SECRET"],
            timeout=int(app.config.get("CLOUDINARY_TIMEOUT", 30)),
        )
    if backend == "local":
        from app.infra.media.local_uploader import LocalMediaUploader

        api_base = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")
        return LocalMediaUploader(
            root=app.config["MEDIA_ROOT"],
            base_url=f"{api_base}/v1/media",
        )
    raise RuntimeError(f"Unknown MEDIA_BACKEND {backend!r}")


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the media uploader.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`app.models` package to ensure SQLAlchemy metadata is ready for
        migrations.
    """
    _sync_jwt_settings(app)

    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from app import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    app.extensions[MEDIA_UPLOADER_KEY] = _build_media_uploader(app)


def get_media_uploader() -> MediaUploader:
    """Return the upload adapter bound to the current application."""
    uploader = current_app.extensions.get(MEDIA_UPLOADER_KEY)
    if uploader is None:
        raise RuntimeError("Media uploader is not initialized. Call init_app() first.")
    return cast("MediaUploader", uploader)
