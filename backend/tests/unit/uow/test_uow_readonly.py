import pytest
from app.models.user import User
from app.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from app.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)
from sqlalchemy import text
from tests.factories.user import UserFactory


class _RecordingSession:
    def __init__(self):
        self.statements: list[str] = []

    def execute(self, statement):
        self.statements.append(str(statement))


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            user = UserFactory.build()  # not persisted
            uow.session.add(user)
            uow.session.flush()

    def test_blocks_core_dml(self, session):
        """
        Ensure that raw SQL DML is blocked inside the RO UoW.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("UPDATE users SET refresh_token = NULL WHERE id = :id"), {"id": 1}
            )

    def test_allows_reads(self, session):
        """
        Read operations should work normally within RO UoW.
        """
        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        with ROuow() as uow:
            count = uow.session.query(User).count()
            assert count >= 1

    def test_disallows_commit(self, session):
        """
        RO UoW must reject commit().
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_always_rolls_back_changes(self, session):
        """
        Any attempted modifications must not persist after RO UoW exits.
        """
        with RWuow() as uow:
            user = UserFactory.build()
            uow.users.add(user)
            user_id = user.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            original_email = u.email
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            persisted = uow.session.get(User, user_id)
            assert persisted.email == original_email

    def test_skips_set_transaction_on_sqlite(self, session):
        """SQLite has no ``SET TRANSACTION``; only guards are installed."""
        uow = ROuow()
        uow.session = _RecordingSession()
        uow._apply_directives("sqlite")
        assert uow.session.statements == []

    def test_emits_directives_on_postgresql(self, session):
        uow = ROuow(isolation_level="serializable")
        uow.session = _RecordingSession()
        uow._apply_directives("postgresql")
        assert uow.session.statements == [
            "SET TRANSACTION ISOLATION LEVEL SERIALIZABLE",
            "SET TRANSACTION READ ONLY",
        ]
