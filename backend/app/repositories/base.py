"""Shared persistence helpers for the account repositories.

Repositories stage and read rows; they never commit or roll back. The
unit of work that created them owns the transaction.

Updates go through a per-repository whitelist (``_updatable_fields``) so a
request payload can never reach columns such as ``password_hash`` or
``refresh_token``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for one mapped class.

    Subclasses set ``model`` and, when they allow updates, override
    ``_updatable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Bind the repository to ``session``, or to the Flask-scoped one.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def _updatable_fields(self) -> set[str]:
        """Attribute names callers may assign through :meth:`assign_updates`."""
        return set()

    def _sanitize_update_fields(self, fields: Mapping[str, Any], *, strict: bool) -> dict[str, Any]:
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def get(self, entity_id: int) -> E | None:
        """Return the row with primary key ``entity_id``, or ``None``."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is populated.

        :param instance: New, transient entity.
        :type instance: E
        :returns: The same instance, now persistent.
        :rtype: E
        :raises sqlalchemy.exc.IntegrityError: When a constraint rejects the row.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted ``fields`` onto ``instance``.

        Assignment goes through ``setattr`` so model ``@validates`` hooks run
        (lowercasing the email, trimming the full name).

        :param instance: Entity to mutate.
        :type instance: E
        :param fields: Attribute name to new value.
        :type fields: Mapping[str, Any]
        :param strict: Raise instead of skipping keys outside the whitelist.
        :type strict: bool
        :param flush: Flush after assigning.
        :type flush: bool
        :returns: The mutated instance.
        :rtype: E
        :raises ValueError: If ``strict`` and a key is not updatable.
        """
        for key, value in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance

    def update(self, instance: E, **fields: Any) -> E:
        """Strict, flushing shorthand for :meth:`assign_updates`."""
        return self.assign_updates(instance, fields)
