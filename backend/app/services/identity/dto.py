"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountUpdateIn:
    """
    Input DTO for updating account details.

    :param full_name: New display name (required).
    :type full_name: str | None
    :param email: New login email (required, shape-checked).
    :type email: str | None
    """

    full_name: str | None
    email: str | None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param old_password: Current password.
    :type old_password: str | None
    :param new_password: New password (raw).
    :type new_password: str | None
    :param confirm_password: Repetition of ``new_password``.
    :type confirm_password: str | None
    :param user_id: Target user; ``None`` means the authenticated actor.
    :type user_id: int | None
    """

    old_password: str | None
    new_password: str | None
    confirm_password: str | None
    user_id: int | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Sanitized user record: never carries the password hash or refresh token.

    :param id: User identifier.
    :type id: int
    :param username: Lowercased handle.
    :type username: str
    :param email: Email address.
    :type email: str
    :param full_name: Display name.
    :type full_name: str
    :param avatar: Hosted avatar URL.
    :type avatar: str
    :param cover_image: Hosted cover URL or empty string.
    :type cover_image: str
    :param created_at: Creation timestamp.
    :type created_at: datetime | None
    :param updated_at: Last update timestamp.
    :type updated_at: datetime | None
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: Any) -> UserPublicOut:
        """Project an ORM ``User`` onto the sanitized shape."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image or "",
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
