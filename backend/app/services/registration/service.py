"""
UserRegistrationService
=======================

Process-level service that registers a new identity:

- Validates the submitted fields and rejects taken usernames/emails.
- Pushes the avatar (required) and cover image (optional) to media storage.
- Creates the ``User`` in a single transaction and returns its sanitized
  projection re-read in a fresh read-only scope.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from app.repositories.user import UserRepository
from app.services._shared.base import BaseService
from app.services._shared.errors import (
    ConflictError,
    InternalError,
    UploadFailedError,
    ValidationFailedError,
    violates,
)
from app.services._shared.policies.common import ensure_email, ensure_required, is_blank
from app.services._shared.ports.media_uploader import MediaUploader
from app.services.identity.dto import UserPublicOut
from app.services.registration.dto import UserRegistrationIn

DUPLICATE_USER = "User with email or username already exists"


class UserRegistrationService(BaseService):
    """
    Orchestrates the user registration process (uploads + user row).
    """

    def __init__(self, *, uploader: MediaUploader, **kwargs) -> None:
        super().__init__(**kwargs)
        self.uploader = uploader

    def register(self, dto: UserRegistrationIn) -> UserPublicOut:
        """
        Register a user.

        Checks run in order and stop at the first failure: required fields,
        email shape, uniqueness, avatar presence, avatar upload.

        :param dto: Registration input.
        :type dto: :class:`UserRegistrationIn`
        :returns: Sanitized user record.
        :rtype: :class:`UserPublicOut`
        :raises ValidationFailedError: On blank fields, bad email or missing avatar.
        :raises ConflictError: When the username or email is already taken.
        :raises UploadFailedError: When the avatar upload yields no URL.
        :raises InternalError: When the created row cannot be read back.
        """
        ensure_required(dto.full_name, dto.email, dto.username, dto.password)
        ensure_email(dto.email or "")

        email = (dto.email or "").strip().lower()
        username = (dto.username or "").strip().lower()

        with self.ro_uow() as uow_ro:
            repo_ro: UserRepository = uow_ro.users
            if repo_ro.exists_by_username_or_email(username=username, email=email):
                raise ConflictError("User", DUPLICATE_USER)

        if is_blank(dto.avatar_local_path):
            raise ValidationFailedError("Avatar file is required")

        avatar = self.uploader.upload(str(dto.avatar_local_path))
        if avatar is None or not avatar.url:
            raise UploadFailedError("Avatar file upload failed")

        cover_url = ""
        if not is_blank(dto.cover_image_local_path):
            cover = self.uploader.upload(str(dto.cover_image_local_path))
            if cover is None:
                self.log.warning("Cover image upload failed for %s; stored empty", username)
            else:
                cover_url = cover.url

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.model(
                    full_name=dto.full_name,
                    email=email,
                    username=username,
                    password=dto.password,  # model setter hashes
                    avatar=avatar.url,
                    cover_image=cover_url,
                )
                repo.add(user)
                user_id = user.id
        except IntegrityError as exc:
            # Lost a race against a concurrent registration
            if violates(exc, "uq_users_email") or violates(exc, "uq_users_username"):
                raise ConflictError("User", DUPLICATE_USER) from exc
            raise

        with self.ro_uow() as uow_ro:
            created = uow_ro.users.get(user_id)
            if created is None:
                raise InternalError("Something went wrong while registering the user")
            out = UserPublicOut.from_model(created)

        self.log.info("Registered user %s", out.username, extra={"user_id": out.id})
        return out
