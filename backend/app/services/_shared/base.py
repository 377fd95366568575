# app/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass

from app.core.logger import bind_logger
from app.services._shared.errors import UnauthorizedError
from app.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids).

    :param actor_id: Authenticated user identifier; the subject of every
        "my account" operation.
    :param request_id: Correlation id stamped on the service's log records.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Resolve the acting user from the request context.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services raise :class:`~app.services._shared.errors.ServiceError`
      subclasses; HTTP mapping happens in ``app.core.errors``.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()
        self.log = bind_logger(
            type(self).__module__,
            request_id=self.ctx.request_id,
            actor_id=self.ctx.actor_id,
        )

    def resolve_actor(self, user_id: int | None = None) -> int:
        """
        Return the user an account operation acts on.

        ``user_id`` defaults to the context actor. When the context does carry
        an actor, naming any other account is refused.

        :param user_id: Explicit target, used by callers without a request.
        :type user_id: int | None
        :raises UnauthorizedError: When no actor is known, or ``user_id``
            differs from the authenticated one.
        """
        actor = self.ctx.actor_id
        if user_id is None:
            user_id = actor
        elif actor is not None and user_id != actor:
            raise UnauthorizedError()
        if user_id is None:
            raise UnauthorizedError()
        return user_id

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :type isolation: str | None
        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )
