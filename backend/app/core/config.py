"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"", "CHANGE_ME", "CHANGE_ME_ACCESS", "CHANGE_ME_REFRESH"}
)

# Load .env in development (no-op when missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    ACCESS_TOKEN_SECRET: str
        Signing key for access tokens. Mirrored into ``JWT_SECRET_KEY`` by
        :func:`app.core.extensions.init_app` so ``flask-jwt-extended``
        verifies access tokens with it.
    REFRESH_TOKEN_SECRET: str
        Separate signing key for refresh tokens.
    ACCESS_TOKEN_EXPIRES_MINUTES: int
        Access token lifetime.
    REFRESH_TOKEN_EXPIRES_DAYS: int
        Refresh token lifetime.
    JWT_TOKEN_LOCATION: list[str]
        Access tokens are accepted from the ``Authorization`` header or the
        ``accessToken`` cookie.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    MEDIA_BACKEND: str
        ``"local"`` stores uploads under ``MEDIA_ROOT``; ``"cloudinary"``
        pushes them to Cloudinary.
    UPLOAD_TMP_DIR: str
        Scratch directory where incoming multipart files land before upload.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    ACCESS_TOKEN_EXPIRES_MINUTES = env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15)
    REFRESH_TOKEN_EXPIRES_DAYS = env_int("REFRESH_TOKEN_EXPIRES_DAYS", 10)

    # flask-jwt-extended (JWT_SECRET_KEY is mirrored from ACCESS_TOKEN_SECRET at init)
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "accessToken"
    JWT_REFRESH_COOKIE_NAME = "refreshToken"
    JWT_COOKIE_SECURE = env_bool("JWT_COOKIE_SECURE", True)
    JWT_COOKIE_CSRF_PROTECT = env_bool("JWT_COOKIE_CSRF_PROTECT", False)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Media
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "local")
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./media")
    UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR", "./public/temp")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_TIMEOUT = env_int("CLOUDINARY_TIMEOUT", 30)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and allows cookies over plain HTTP unless
    ``JWT_COOKIE_SECURE`` is set explicitly.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_COOKIE_SECURE = env_bool("JWT_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. :func:`ensure_secrets` refuses to
    boot with placeholder signing keys.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    JWT_COOKIE_SECURE = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def ensure_secrets(config: Mapping[str, Any]) -> None:
    """Fail fast when token secrets are missing outside debug/testing.

    :param config: Loaded Flask configuration.
    :raises RuntimeError: If a signing secret is missing, a placeholder, or
        both token types share the same key.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    access = str(config.get("ACCESS_TOKEN_SECRET") or "")
    refresh = str(config.get("REFRESH_TOKEN_SECRET") or "")
    missing = [
        name
        for name, value in (("ACCESS_TOKEN_SECRET", access), ("REFRESH_TOKEN_SECRET", refresh))
        if value in PLACEHOLDER_SECRETS
    ]
    if missing:
        raise RuntimeError(f"Missing token secrets: {', '.join(missing)}")
    if access == refresh:
        raise RuntimeError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ.")
