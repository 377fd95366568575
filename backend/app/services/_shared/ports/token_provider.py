from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenError(Exception):
    """Base error raised by token providers when signing or decoding fails."""


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, expired, of the wrong type or badly signed."""


class TokenProvider(Protocol):
    """Port for signing access tokens and signing/verifying refresh tokens."""

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: int | str,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode_refresh_token(self, token: str) -> dict[str, Any]: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests."""

    def __init__(self, *, fail_signing: bool = False) -> None:
        self._now = datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}
        self.fail_signing = fail_signing

    def _mk(
        self,
        *,
        identity: int | str,
        ttype: str,
        exp_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        if self.fail_signing:
            raise TokenError("signing backend unavailable")
        self._seq += 1
        jti = f"jti-{self._seq}"
        token = f"{ttype}.{identity}.{jti}"
        payload: dict[str, Any] = {
            "sub": str(identity),
            "type": ttype,
            "jti": jti,
            "exp": int((self._now + exp_delta).timestamp()),
        }
        if additional_claims:
            payload.update(additional_claims)
        self._issued[token] = payload
        return token

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype="access",
            exp_delta=expires_delta or timedelta(minutes=15),
            additional_claims=additional_claims,
        )

    def create_refresh_token(
        self,
        *,
        identity: int | str,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype="refresh",
            exp_delta=expires_delta or timedelta(days=10),
        )

    def decode_refresh_token(self, token: str) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None:
            raise InvalidTokenError("Invalid refresh token")
        if payload["type"] != "refresh":
            raise InvalidTokenError("Invalid token type")
        return payload
