"""User model definition for the channel accounts backend."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.core.extensions import db
from app.core.security import hash_password

from .base import PKMixin, ReprMixin, TimestampMixin


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity which doubles as a public channel.

    Fields
    ------
    username : str
        Public handle. Stored lowercase and trimmed, unique per system.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    full_name : str
        Display name.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    avatar : str
        Hosted avatar URL (required).
    cover_image : str
        Hosted cover image URL; empty string when absent.
    refresh_token : str | None
        Single active refresh token slot. ``NULL`` after logout.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"
    __repr_label__ = "username"

    # Columns
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    avatar: Mapped[str] = mapped_column(String(500), nullable=False)
    cover_image: Mapped[str] = mapped_column(
        String(500), nullable=False, default="", server_default=""
    )
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_email", "email"),
        Index("ix_users_username", "username"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValueError: If ``raw`` is empty.
        """
        self.password_hash = hash_password(raw)

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens in the services.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Normalize and validate username.

        :param key: Field name (``username``).
        :type key: str
        :param value: Username to normalize.
        :type value: str
        :returns: Trimmed, lowercased username.
        :rtype: str
        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str):
            raise ValueError("Username is required.")
        v = value.strip().lower()
        if not v:
            raise ValueError("Username is required.")
        return v

    @validates("full_name")
    def _normalize_full_name(self, key: str, value: str) -> str:
        """Trim the display name; it may not be blank."""
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Full name is required.")
        return value.strip()
