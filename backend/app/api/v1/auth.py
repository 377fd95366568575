"""Authentication endpoints: registration, login, logout, refresh and password change."""

from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import set_access_cookies, set_refresh_cookies, unset_jwt_cookies

from app.api.deps import (
    api_response,
    auth_service,
    discard_upload,
    identity_service,
    registration_service,
    require_auth,
    save_upload,
    timing,
)
from app.schemas import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from app.services.auth.dto import LoginIn, RefreshIn, TokenPairOut
from app.services.identity.dto import PasswordChangeIn
from app.services.registration.dto import UserRegistrationIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()


def _set_token_cookies(response, tokens: TokenPairOut):
    set_access_cookies(response, tokens.access_token)
    set_refresh_cookies(response, tokens.refresh_token)
    return response


@bp.post("/register")
@timing
def register():
    """Create an account from multipart form fields plus ``avatar``/``coverImage`` files."""

    data = register_schema.load(request.form.to_dict())
    avatar_path = save_upload("avatar")
    cover_path = save_upload("coverImage")
    try:
        user = registration_service().register(
            UserRegistrationIn(
                full_name=data["full_name"],
                email=data["email"],
                username=data["username"],
                password=data["password"],
                avatar_local_path=avatar_path,
                cover_image_local_path=cover_path,
            )
        )
    finally:
        # Anything the uploader did not consume is left behind on rejection.
        discard_upload(avatar_path)
        discard_upload(cover_path)
    return api_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate by username or email and issue a token pair as cookies and body."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = auth_service().login(
        LoginIn(username=data["username"], email=data["email"], password=data["password"])
    )
    body = login_response_schema.dump(
        {
            "user": result.user,
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )
    response = api_response(body, "User logged in successfully")
    return _set_token_cookies(response, result.tokens)


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Clear the stored refresh token and both auth cookies."""

    auth_service().logout()
    response = api_response({}, "User logged out")
    unset_jwt_cookies(response)
    return response


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token taken from the cookie or the JSON body."""

    token = request.cookies.get(current_app.config["JWT_REFRESH_COOKIE_NAME"])
    if not token:
        data = refresh_schema.load(request.get_json(silent=True) or {})
        token = data["refresh_token"]
    tokens = auth_service().refresh(RefreshIn(refresh_token=token))
    response = api_response(token_pair_schema.dump(tokens), "Access token refreshed")
    return _set_token_cookies(response, tokens)


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(request.get_json(silent=True) or {})
    identity_service().change_password(
        PasswordChangeIn(
            old_password=data["old_password"],
            new_password=data["new_password"],
            confirm_password=data["confirm_password"],
        )
    )
    return api_response({}, "Password changed successfully")
