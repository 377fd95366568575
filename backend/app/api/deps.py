"""Shared API helpers for request parsing, service wiring and cross-cutting concerns."""

from __future__ import annotations

import functools
import os
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar
from uuid import uuid4

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from app.core.extensions import get_media_uploader
from app.core.logger import ensure_request_id
from app.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from app.schemas.common import build_envelope
from app.services._shared.base import ServiceContext
from app.services._shared.errors import UnauthorizedError
from app.services.auth.dto import AuthTokenConfig
from app.services.auth.service import AuthService
from app.services.channels.service import ChannelService
from app.services.identity.service import IdentityService
from app.services.registration.service import UserRegistrationService

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def api_response(data: Any, message: str, *, status: int = 200) -> Response:
    """Wrap ``data`` in the ``{statusCode, data, message, success}`` envelope."""

    return json_response(build_envelope(data, message, status), status=status)


# --------------------------------------------------------------------------- #
# Auth
# --------------------------------------------------------------------------- #


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        g.authenticated = True
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    """Return the authenticated user id taken from the access token subject."""

    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError) as exc:
        raise UnauthorizedError("Invalid access token") from exc


def service_context() -> ServiceContext:
    """Build the request-scoped context handed to services.

    The actor is only known on routes guarded by :func:`require_auth`.
    """

    actor: int | None = None
    if g.get("authenticated"):
        actor = current_user_id()
    return ServiceContext(actor_id=actor, request_id=ensure_request_id())


# --------------------------------------------------------------------------- #
# Uploads
# --------------------------------------------------------------------------- #


def save_upload(field: str) -> str | None:
    """Persist the multipart file ``field`` into ``UPLOAD_TMP_DIR``.

    The stored name is prefixed with a random token so two concurrent
    uploads of ``avatar.png`` never collide. Returns ``None`` when the field
    is absent or empty.
    """

    storage: FileStorage | None = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    tmp_dir = current_app.config["UPLOAD_TMP_DIR"]
    os.makedirs(tmp_dir, exist_ok=True)
    name = secure_filename(storage.filename) or "upload"
    path = os.path.join(tmp_dir, f"{uuid4().hex[:12]}-{name}")
    storage.save(path)
    return path


def discard_upload(path: str | None) -> None:
    """Remove a temporary upload that never reached the uploader."""

    if path and os.path.exists(path):
        os.remove(path)


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def token_config() -> AuthTokenConfig:
    cfg = current_app.config
    return AuthTokenConfig(
        access_expires=timedelta(minutes=int(cfg["ACCESS_TOKEN_EXPIRES_MINUTES"])),
        refresh_expires=timedelta(days=int(cfg["REFRESH_TOKEN_EXPIRES_DAYS"])),
    )


def auth_service() -> AuthService:
    cfg = current_app.config
    provider = JWTTokenProvider(
        refresh_secret=cfg["REFRESH_TOKEN_SECRET"],
        algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
    )
    return AuthService(token_provider=provider, token_cfg=token_config(), ctx=service_context())


def registration_service() -> UserRegistrationService:
    return UserRegistrationService(uploader=get_media_uploader(), ctx=service_context())


def identity_service() -> IdentityService:
    return IdentityService(uploader=get_media_uploader(), ctx=service_context())


def channel_service() -> ChannelService:
    return ChannelService(ctx=service_context())


# --------------------------------------------------------------------------- #
# Instrumentation
# --------------------------------------------------------------------------- #


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
