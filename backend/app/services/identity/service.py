"""
IdentityService
===============

Aggregate service responsible for the authenticated user's own record:
- Current-user lookup
- Account details (full name, email)
- Avatar and cover image replacement
- Password lifecycle
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from app.core.security import verify_password
from app.repositories.user import UserRepository
from app.services._shared.base import BaseService
from app.services._shared.errors import (
    ConflictError,
    NotFoundError,
    UploadFailedError,
    ValidationFailedError,
    violates,
)
from app.services._shared.policies.common import ensure_email, ensure_required, is_blank
from app.services._shared.ports.media_uploader import MediaUploader
from app.services.identity.dto import AccountUpdateIn, PasswordChangeIn, UserPublicOut


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Retrieve the authenticated user's sanitized record.
    - Update account details ensuring email uniqueness.
    - Replace hosted images through the media uploader.
    - Manage password lifecycle.
    """

    def __init__(self, *, uploader: MediaUploader | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.uploader = uploader

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_current_user(self, user_id: int | None = None) -> UserPublicOut:
        """
        Retrieve the authenticated user.

        :param user_id: User primary key; defaults to the context actor.
        :type user_id: int | None
        :returns: Sanitized user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If user does not exist.
        """

        user_id = self.resolve_actor(user_id)
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Account details
    # --------------------------------------------------------------------- #

    def update_account_details(
        self, dto: AccountUpdateIn, *, user_id: int | None = None
    ) -> UserPublicOut:
        """
        Replace full name and email.

        :param dto: Input DTO containing new values.
        :type dto: AccountUpdateIn
        :param user_id: User identifier; defaults to the context actor.
        :type user_id: int | None
        :returns: Updated user DTO.
        :rtype: UserPublicOut
        :raises ValidationFailedError: When a field is blank or the email is malformed.
        :raises ConflictError: When another user owns the email.
        :raises NotFoundError: When user not found.
        """
        ensure_required(dto.full_name, dto.email)
        ensure_email(dto.email or "")
        user_id = self.resolve_actor(user_id)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if repo.exists_by_email(dto.email or "", exclude_id=user_id):
                raise ConflictError("User", "Email is already in use")

            try:
                repo.update(user, full_name=dto.full_name, email=dto.email)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "Email is already in use") from exc
                raise

            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Images
    # --------------------------------------------------------------------- #

    def update_avatar(
        self, local_path: str | None, *, user_id: int | None = None
    ) -> UserPublicOut:
        """
        Upload a new avatar and store its URL.

        :param local_path: Temporary file written by the HTTP layer.
        :param user_id: User identifier; defaults to the context actor.
        :returns: Updated user DTO.
        :raises ValidationFailedError: When no file was provided.
        :raises UploadFailedError: When the uploader returns no URL.
        """
        return self._replace_image(
            local_path, user_id, field="avatar", missing="Avatar file is missing"
        )

    def update_cover_image(
        self, local_path: str | None, *, user_id: int | None = None
    ) -> UserPublicOut:
        """Upload a new cover image and store its URL."""
        return self._replace_image(
            local_path, user_id, field="cover_image", missing="Cover image file is missing"
        )

    def _replace_image(
        self, local_path: str | None, user_id: int | None, *, field: str, missing: str
    ) -> UserPublicOut:
        user_id = self.resolve_actor(user_id)
        if is_blank(local_path):
            raise ValidationFailedError(missing)
        if self.uploader is None:
            raise RuntimeError("IdentityService requires a media uploader for image updates.")

        uploaded = self.uploader.upload(str(local_path))
        if uploaded is None or not uploaded.url:
            raise UploadFailedError(f"Error while uploading {field.replace('_', ' ')}")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            # Previously hosted asset is left in place
            repo.update(user, **{field: uploaded.url})
            self.log.info("User %s replaced %s", user_id, field, extra={"user_id": user_id})
            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Change a user's password after verifying the old one.

        Checks run in order: new password present, old password correct,
        confirmation equal to the new password.

        :param dto: Input DTO containing old, new and confirmation passwords;
            ``dto.user_id`` defaults to the context actor.
        :type dto: PasswordChangeIn
        :raises ValidationFailedError: When the new password is blank, the
            old password is wrong, or the confirmation differs.
        :raises NotFoundError: When user not found.
        """
        if is_blank(dto.new_password):
            raise ValidationFailedError("New password is required")
        user_id = self.resolve_actor(dto.user_id)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if not verify_password(user.password_hash, dto.old_password):
                raise ValidationFailedError("Invalid old password")
            if dto.new_password != dto.confirm_password:
                raise ValidationFailedError("New password and confirmation do not match")

            repo.update_password(user_id, str(dto.new_password))
            self.log.info("Password changed", extra={"user_id": user_id})
