# app/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt as pyjwt

from app.services._shared.ports import InvalidTokenError, TokenError, TokenProvider

REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Token adapter backed by Flask-JWT-Extended and PyJWT.

    Access tokens are minted by Flask-JWT-Extended (``JWT_SECRET_KEY``, which
    mirrors ``ACCESS_TOKEN_SECRET``) so its request guards can verify them.
    Refresh tokens are signed with PyJWT using the separate refresh secret,
    which means an access token never verifies as a refresh token and vice
    versa.

    .. note::
       Access token creation requires an active Flask app context.
    """

    refresh_secret: str
    algorithm: str = "HS256"
    default_refresh_expires: timedelta = timedelta(days=10)

    def create_access_token(
        self,
        *,
        identity: str | int,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        try:
            return cast(
                str,
                _create_access(
                    identity=str(identity),
                    additional_claims=additional_claims or {},
                    expires_delta=expires_delta,
                ),
            )
        except pyjwt.PyJWTError as exc:
            raise TokenError(f"Could not sign access token: {exc}") from exc

    def create_refresh_token(
        self,
        *,
        identity: str | int,
        expires_delta: timedelta | None = None,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(identity),
            "type": REFRESH_TOKEN_TYPE,
            # Random jti keeps two tokens minted in the same second distinct
            "jti": uuid4().hex,
            "iat": now,
            "nbf": now,
            "exp": now + (expires_delta or self.default_refresh_expires),
        }
        try:
            return pyjwt.encode(payload, self.refresh_secret, algorithm=self.algorithm)
        except (pyjwt.PyJWTError, TypeError, ValueError) as exc:
            raise TokenError(f"Could not sign refresh token: {exc}") from exc

    def decode_refresh_token(self, token: str) -> dict[str, Any]:
        try:
            payload = cast(
                dict[str, Any],
                pyjwt.decode(
                    token,
                    self.refresh_secret,
                    algorithms=[self.algorithm],
                    options={"require": ["exp", "sub"]},
                ),
            )
        except pyjwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Refresh token has expired") from exc
        except pyjwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid refresh token") from exc

        if payload.get("type") != REFRESH_TOKEN_TYPE:
            raise InvalidTokenError("Invalid refresh token")
        return payload
