# app/services/auth/service.py
from __future__ import annotations

from datetime import timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from app.core.security import verify_password
from app.repositories.user import UserRepository
from app.services._shared.base import BaseService
from app.services._shared.errors import (
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.services._shared.policies.common import is_blank
from app.services._shared.ports.token_provider import TokenError, TokenProvider
from app.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)
from app.services.identity.dto import UserPublicOut

TOKEN_REUSED = "Refresh token is expired or used"


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Tokens are signed through a pluggable :class:`TokenProvider`. Each user
    row holds a single refresh-token slot: login and refresh overwrite it,
    logout clears it, and refresh rotation is a compare-and-swap on that slot
    so a refresh token can be exchanged at most once.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        token_cfg: AuthTokenConfig | None = None,
        **kwargs,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for signing/verifying JWTs.
        :param token_cfg: Access/Refresh expiry configuration.
        """
        super().__init__(**kwargs)
        self.tokens = token_provider
        self.cfg = token_cfg or AuthTokenConfig(
            access_expires=timedelta(minutes=15),
            refresh_expires=timedelta(days=10),
        )

    # ------------------------------------------------------------------ #
    # Token issuance
    # ------------------------------------------------------------------ #

    def issue_token_pair(self, user_id: int, *, rotating: str | None = None) -> TokenPairOut:
        """
        Sign a new access/refresh pair and persist the refresh token.

        :param user_id: Owner of the pair.
        :param rotating: Refresh token being exchanged. When given, the slot
            is only overwritten while it still holds this exact value.
        :returns: The new token pair.
        :raises NotFoundError: If the user does not exist.
        :raises UnauthorizedError: If ``rotating`` no longer matches the slot.
        :raises InternalError: If signing or persistence fails.
        """
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)

                claims: dict[str, Any] = {
                    "email": user.email,
                    "username": user.username,
                    "full_name": user.full_name,
                }
                access = self.tokens.create_access_token(
                    identity=user.id,
                    additional_claims=claims,
                    expires_delta=self.cfg.access_expires,
                )
                refresh = self.tokens.create_refresh_token(
                    identity=user.id,
                    expires_delta=self.cfg.refresh_expires,
                )

                if not repo.store_refresh_token(user.id, refresh, expected=rotating):
                    raise UnauthorizedError(TOKEN_REUSED)
        except (SQLAlchemyError, TokenError) as exc:
            self.log.error(
                "Token issuance failed for user %s",
                user_id,
                exc_info=exc,
                extra={"user_id": user_id},
            )
            raise InternalError("Something went wrong while generating tokens") from exc

        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Sanitized user plus access/refresh token pair.
        :raises ValidationFailedError: If neither username nor email is given.
        :raises NotFoundError: If no user matches.
        :raises UnauthorizedError: If the password is wrong.
        """
        if is_blank(dto.username) and is_blank(dto.email):
            raise ValidationFailedError("username or email is required")

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.find_by_username_or_email(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User does not exist")
            if not verify_password(user.password_hash, dto.password):
                raise UnauthorizedError("Invalid user credentials")
            user_id = user.id

        tokens = self.issue_token_pair(user_id)

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            public = UserPublicOut.from_model(user)

        self.log.info("User logged in", extra={"user_id": user_id})
        return LoginOut(user=public, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh with single-use rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair.

        Security
        --------
        - The token must verify against the refresh secret.
        - It must equal the value stored on the user row.
        - Rotation is a compare-and-swap, so concurrent exchanges of the
          same token cannot both succeed.
        """
        rt = dto.refresh_token
        if is_blank(rt):
            raise UnauthorizedError("Unauthorized request")

        try:
            payload = self.tokens.decode_refresh_token(str(rt))
        except TokenError as exc:
            raise UnauthorizedError(str(exc) or "Invalid refresh token") from exc

        user_id = self._coerce_user_id(payload.get("sub"))

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise UnauthorizedError("Invalid refresh token")
            if user.refresh_token != rt:
                raise UnauthorizedError(TOKEN_REUSED)

        tokens = self.issue_token_pair(user_id, rotating=str(rt))
        self.log.info("Refresh token rotated", extra={"user_id": user_id})
        return tokens

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int | None = None) -> None:
        """
        Clear the user's refresh-token slot.

        :param user_id: Target user; defaults to the context actor.
        :raises NotFoundError: If the user does not exist.
        """
        user_id = self.resolve_actor(user_id)
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if not repo.clear_refresh_token(user_id):
                raise NotFoundError("User", user_id)
        self.log.info("User logged out", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _coerce_user_id(subject: Any) -> int:
        """Ensure the JWT subject can be treated as an integer user id."""
        if isinstance(subject, int):
            return subject
        if isinstance(subject, str) and subject.isdigit():
            return int(subject)
        raise UnauthorizedError("Invalid refresh token")
