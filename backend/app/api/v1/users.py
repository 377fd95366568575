"""Endpoints for the authenticated user's account and public channel profiles."""

from __future__ import annotations

from flask import Blueprint, request

from app.api.deps import (
    api_response,
    channel_service,
    discard_upload,
    identity_service,
    require_auth,
    save_upload,
    timing,
)
from app.schemas import AccountUpdateSchema, ChannelProfileSchema, UserSchema
from app.services.identity.dto import AccountUpdateIn

bp = Blueprint("users", __name__)

account_update_schema = AccountUpdateSchema()
user_schema = UserSchema()
channel_profile_schema = ChannelProfileSchema()


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    """Return the authenticated user's sanitized record."""

    user = identity_service().get_current_user()
    return api_response(user_schema.dump(user), "Current user fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    """Update full name and email; both are required."""

    data = account_update_schema.load(request.get_json(silent=True) or {})
    user = identity_service().update_account_details(
        AccountUpdateIn(full_name=data["full_name"], email=data["email"]),
    )
    return api_response(user_schema.dump(user), "Account details updated successfully")


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    path = save_upload("avatar")
    try:
        user = identity_service().update_avatar(path)
    finally:
        discard_upload(path)
    return api_response(user_schema.dump(user), "Avatar image updated successfully")


@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    path = save_upload("coverImage")
    try:
        user = identity_service().update_cover_image(path)
    finally:
        discard_upload(path)
    return api_response(user_schema.dump(user), "Cover image updated successfully")


@bp.get("/c/<username>")
@require_auth
@timing
def channel_profile(username: str):
    """Return the channel profile for ``username`` as seen by the current user."""

    profile = channel_service().get_channel_profile(username)
    return api_response(channel_profile_schema.dump(profile), "User channel fetched successfully")
