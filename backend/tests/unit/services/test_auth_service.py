# tests/unit/services/test_auth_service.py
from __future__ import annotations

from datetime import timedelta

import pytest
from app.models.user import User
from app.services._shared.base import ServiceContext
from app.services._shared.errors import (
    ErrorKind,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.services._shared.ports.token_provider import StubTokenProvider
from app.services.auth.dto import AuthTokenConfig, LoginIn, LoginOut, RefreshIn, TokenPairOut
from app.services.auth.service import TOKEN_REUSED, AuthService
from tests.factories.user import UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def tokens() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def service(tokens) -> AuthService:
    """Build an AuthService wired to the deterministic token double."""
    return AuthService(
        token_provider=tokens,
        token_cfg=AuthTokenConfig(
            access_expires=timedelta(minutes=15),
            refresh_expires=timedelta(days=10),
        ),
    )


@pytest.fixture()
def user(session) -> User:
    return UserFactory(username="viewer", email="viewer@example.com", password="s3cret!")


def _stored_token(session, user_id: int) -> str | None:
    session.expire_all()
    return session.get(User, user_id).refresh_token


# -------------------------------- Login ----------------------------------- #
def test_login_by_username_issues_pair_and_stores_refresh(service, tokens, user, session):
    out = service.login(LoginIn(username="Viewer", email=None, password="s3cret!"))

    assert isinstance(out, LoginOut)
    assert isinstance(out.tokens, TokenPairOut)
    assert out.tokens.access_token.startswith(f"access.{user.id}.")
    assert out.tokens.refresh_token.startswith(f"refresh.{user.id}.")
    assert out.user.id == user.id
    assert out.user.username == "viewer"
    assert _stored_token(session, user.id) == out.tokens.refresh_token


def test_login_by_email(service, user):
    out = service.login(LoginIn(username=None, email="VIEWER@example.com", password="s3cret!"))
    assert out.user.email == "viewer@example.com"


def test_access_token_carries_profile_claims(service, tokens, user):
    out = service.login(LoginIn(username="viewer", email=None, password="s3cret!"))

    claims = tokens._issued[out.tokens.access_token]
    assert claims["sub"] == str(user.id)
    assert claims["email"] == "viewer@example.com"
    assert claims["username"] == "viewer"
    assert claims["full_name"] == user.full_name


def test_login_sanitized_user_has_no_secrets(service, user):
    out = service.login(LoginIn(username="viewer", email=None, password="s3cret!"))
    assert not hasattr(out.user, "password_hash")
    assert not hasattr(out.user, "refresh_token")


def test_login_requires_an_identifier(service):
    with pytest.raises(ValidationFailedError, match="username or email is required"):
        service.login(LoginIn(username="  ", email=None, password="x"))


def test_login_unknown_user(service, session):
    with pytest.raises(NotFoundError, match="User does not exist"):
        service.login(LoginIn(username="ghost", email=None, password="x"))


def test_login_wrong_password(service, user):
    with pytest.raises(UnauthorizedError, match="Invalid user credentials") as exc:
        service.login(LoginIn(username="viewer", email=None, password="nope"))
    assert exc.value.kind is ErrorKind.UNAUTHORIZED


def test_second_login_revokes_previous_refresh(service, user):
    first = service.login(LoginIn(username="viewer", email=None, password="s3cret!"))
    service.login(LoginIn(username="viewer", email=None, password="s3cret!"))

    with pytest.raises(UnauthorizedError, match=TOKEN_REUSED):
        service.refresh(RefreshIn(refresh_token=first.tokens.refresh_token))


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_rotates_and_blocks_reuse(service, user, session):
    pair1 = service.login(LoginIn(username="viewer", email=None, password="s3cret!")).tokens

    pair2 = service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    assert pair2.refresh_token != pair1.refresh_token
    assert _stored_token(session, user.id) == pair2.refresh_token

    with pytest.raises(UnauthorizedError, match=TOKEN_REUSED):
        service.refresh(RefreshIn(refresh_token=pair1.refresh_token))


def test_refresh_without_token(service):
    with pytest.raises(UnauthorizedError, match="Unauthorized request"):
        service.refresh(RefreshIn(refresh_token=None))


def test_refresh_with_unverifiable_token(service):
    with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
        service.refresh(RefreshIn(refresh_token="garbage"))


def test_refresh_rejects_access_token(service, user):
    pair = service.login(LoginIn(username="viewer", email=None, password="s3cret!")).tokens
    with pytest.raises(UnauthorizedError):
        service.refresh(RefreshIn(refresh_token=pair.access_token))


def test_refresh_for_deleted_user(service, tokens, session):
    orphan = tokens.create_refresh_token(identity=424242)
    with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
        service.refresh(RefreshIn(refresh_token=orphan))


def test_refresh_loses_compare_and_swap(service, user, session):
    """A concurrent rotation that lands first makes this exchange fail."""
    pair = service.login(LoginIn(username="viewer", email=None, password="s3cret!")).tokens

    with pytest.raises(UnauthorizedError, match=TOKEN_REUSED):
        service.issue_token_pair(user.id, rotating="someone-else-rotated-this")

    # The slot keeps the token that was actually stored
    assert _stored_token(session, user.id) == pair.refresh_token


# ------------------------------- Logout ----------------------------------- #
def test_logout_clears_slot_and_blocks_refresh(service, user, session):
    pair = service.login(LoginIn(username="viewer", email=None, password="s3cret!")).tokens

    service.logout(user.id)

    assert _stored_token(session, user.id) is None
    with pytest.raises(UnauthorizedError, match=TOKEN_REUSED):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_logout_unknown_user(service, session):
    with pytest.raises(NotFoundError):
        service.logout(987654)


def test_logout_uses_context_actor(tokens, user, session):
    service = AuthService(token_provider=tokens, ctx=ServiceContext(actor_id=user.id))
    service.issue_token_pair(user.id)

    service.logout()

    assert _stored_token(session, user.id) is None


def test_logout_without_actor_is_unauthorized(service, session):
    with pytest.raises(UnauthorizedError):
        service.logout()


# ------------------------------- Failures --------------------------------- #
def test_signing_failure_is_internal(user):
    service = AuthService(token_provider=StubTokenProvider(fail_signing=True))
    with pytest.raises(InternalError, match="Something went wrong while generating tokens"):
        service.login(LoginIn(username="viewer", email=None, password="s3cret!"))
