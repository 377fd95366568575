"""User repository for persistence and refresh-token slot operations."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from app.models.user import User
from app.repositories.base import BaseRepository


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository focuses on safe lookup and single-column writes.
    It NEVER signs tokens or verifies passwords; services do that through
    stateless capabilities.
    """

    model = User

    # ---------------------------- Whitelist ----------------------------

    def _updatable_fields(self):
        """Publicly allowed updatable fields (not including password or token)."""
        return {"full_name", "email", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def find_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Return the first user matching either identifier.

        Blank identifiers are ignored; when both are blank nothing matches.

        :param username: Candidate username (lowercased before matching).
        :type username: str | None
        :param email: Candidate email (normalized before matching).
        :type email: str | None
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        clauses = []
        if _normalize(username):
            clauses.append(User.username == _normalize(username))
        if _normalize(email):
            clauses.append(User.email == _normalize(email))
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id.asc()).limit(1)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_username_or_email(self, *, username: str, email: str) -> bool:
        """Return ``True`` when the username or the email is already taken."""
        stmt = select(User.id).where(
            or_(User.username == _normalize(username), User.email == _normalize(email))
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another user already owns ``email``.

        :param email: Email address to normalise and search.
        :type email: str
        :param exclude_id: User id to ignore (the caller's own row).
        :type exclude_id: int | None
        :rtype: bool
        """
        stmt = select(User.id).where(User.email == _normalize(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Refresh-token slot ----------------------------

    def store_refresh_token(
        self, user_id: int, token: str, *, expected: str | None = None
    ) -> bool:
        """Write ``token`` into the user's refresh-token slot.

        A single ``UPDATE`` that skips model validators. When ``expected`` is
        given the write only happens while the slot still holds that value,
        so two concurrent rotations of the same token cannot both succeed.

        :param user_id: Identifier of the user.
        :type user_id: int
        :param token: New refresh token.
        :type token: str
        :param expected: Previously stored token the caller is rotating.
        :type expected: str | None
        :returns: ``True`` when a row was updated.
        :rtype: bool
        """
        stmt = update(User).where(User.id == user_id)
        if expected is not None:
            stmt = stmt.where(User.refresh_token == expected)
        result = self.session.execute(
            stmt.values(refresh_token=token).execution_options(synchronize_session="evaluate")
        )
        return bool(result.rowcount)

    def clear_refresh_token(self, user_id: int) -> bool:
        """Null the refresh-token slot. Returns ``False`` for unknown users."""
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None)
            .execution_options(synchronize_session="evaluate")
        )
        return bool(result.rowcount)

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: int, new_password: str) -> None:
        """Update a user's password and flush the session.

        :param user_id: Identifier of the user.
        :type user_id: int
        :param new_password: Raw password to assign; model handles hashing.
        :type new_password: str
        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.flush()
