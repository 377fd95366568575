# app/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from app.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. At least one identifier must be non-blank.

    :param username: Handle (matched case-insensitively).
    :type username: str | None
    :param email: User email (normalized before lookup).
    :type email: str | None
    :param password: Raw password (to be verified).
    :type password: str | None
    """

    username: str | None
    email: str | None
    password: str | None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT, from cookie or body.
    :type refresh_token: str | None
    """

    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param user: Sanitized user record.
    :type user: UserPublicOut
    :param tokens: Freshly issued token pair.
    :type tokens: TokenPairOut
    """

    user: UserPublicOut
    tokens: TokenPairOut


# ------------------------ Config DTO --------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta
    refresh_expires: timedelta
