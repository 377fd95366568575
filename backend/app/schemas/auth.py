"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import InputSchema
from .user import UserSchema


class RegisterSchema(InputSchema):
    """Multipart form fields for account registration (files are read separately)."""

    full_name = fields.String(load_default=None, allow_none=True, data_key="fullName")
    email = fields.String(load_default=None, allow_none=True)
    username = fields.String(load_default=None, allow_none=True)
    password = fields.String(load_default=None, allow_none=True)


class LoginSchema(InputSchema):
    """Input payload for authenticating a user by username or email."""

    username = fields.String(load_default=None, allow_none=True)
    email = fields.String(load_default=None, allow_none=True)
    password = fields.String(load_default=None, allow_none=True)


class RefreshSchema(InputSchema):
    """Body fallback for clients that cannot send the refresh cookie."""

    refresh_token = fields.String(load_default=None, allow_none=True, data_key="refreshToken")


class ChangePasswordSchema(InputSchema):
    """Input payload for changing the current user's password."""

    old_password = fields.String(load_default=None, allow_none=True, data_key="oldPassword")
    new_password = fields.String(load_default=None, allow_none=True, data_key="newPassword")
    confirm_password = fields.String(
        load_default=None, allow_none=True, data_key="confirmPassword"
    )


class TokenPairSchema(Schema):
    """Response payload containing a freshly issued token pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class LoginResponseSchema(TokenPairSchema):
    """Response payload for login: the sanitized user plus both tokens."""

    user = fields.Nested(UserSchema, required=True)
