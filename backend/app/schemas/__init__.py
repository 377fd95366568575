"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .common import ApiResponseSchema, InputSchema, build_envelope
from .user import AccountUpdateSchema, ChannelProfileSchema, UserSchema

__all__ = [
    "ApiResponseSchema",
    "InputSchema",
    "build_envelope",
    "RegisterSchema",
    "LoginSchema",
    "RefreshSchema",
    "ChangePasswordSchema",
    "TokenPairSchema",
    "LoginResponseSchema",
    "UserSchema",
    "AccountUpdateSchema",
    "ChannelProfileSchema",
]
