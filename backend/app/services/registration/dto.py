"""
DTOs for UserRegistrationService.

Contracts for the self-registration flow that uploads the profile images
and creates the ``User`` row.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegistrationIn:
    """
    Input payload for the registration process.

    :param full_name: Display name.
    :type full_name: str | None
    :param email: Login email (will be normalized to lowercase+trim).
    :type email: str | None
    :param username: Public handle (unique, case-insensitive).
    :type username: str | None
    :param password: Raw password (the model setter hashes it).
    :type password: str | None
    :param avatar_local_path: Temporary avatar file written by the HTTP layer.
    :type avatar_local_path: str | None
    :param cover_image_local_path: Optional temporary cover image file.
    :type cover_image_local_path: str | None
    """

    full_name: str | None
    email: str | None
    username: str | None
    password: str | None
    avatar_local_path: str | None = None
    cover_image_local_path: str | None = None
