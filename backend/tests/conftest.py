"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. No application
context is held across tests: HTTP tests get a fresh context (and a fresh
``flask.g``) per request, the same way a deployed worker does.
"""

from __future__ import annotations

import os

import pytest
from app.core.config import TestingConfig
from app.core.extensions import MEDIA_UPLOADER_KEY
from app.core.extensions import db as _db  # Flask-SQLAlchemy instance
from app.factory import create_app  # application factory under test
from app.services._shared.ports import StubMediaUploader
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Cookies are allowed over plain HTTP so the test client keeps them.
    - Avoids hitting external services (local media backend, replaced by a
      stub per test).
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    JWT_COOKIE_SECURE = False
    MEDIA_BACKEND = "local"
    LOG_LEVEL = "WARNING"
    USE_PROXYFIX = False
    CORS_ORIGINS = "http://localhost:5173"


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    base = tmp_path_factory.mktemp("storage")
    app = create_app(TestConfig, instance_relative_config=False)
    app.config.update(
        MEDIA_ROOT=str(base / "media"),
        UPLOAD_TMP_DIR=str(base / "tmp"),
    )
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Parameters
    ----------
    app: flask.Flask
        Application fixture ensuring the Flask context is available.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Parameters
    ----------
    db: flask_sqlalchemy.SQLAlchemy
        Database extension used to retrieve the engine.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by nested transactions in each test.
    """
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Parameters
    ----------
    db: flask_sqlalchemy.SQLAlchemy
        Database extension whose ``session`` attribute is temporarily
        reassigned.
    connection: sqlalchemy.engine.Connection
        Shared connection maintaining the outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The session joins the connection's SAVEPOINT, so ``commit()`` in the code
    under test only releases an inner SAVEPOINT and the outer transaction is
    still rolled back at teardown.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def app_ctx(app):
    """Push an application context for code that needs ``current_app``."""
    with app.app_context():
        yield app


@pytest.fixture()
def uploader(app):
    """Install an in-memory media uploader for the duration of a test."""
    original = app.extensions[MEDIA_UPLOADER_KEY]
    stub = StubMediaUploader()
    app.extensions[MEDIA_UPLOADER_KEY] = stub
    try:
        yield stub
    finally:
        app.extensions[MEDIA_UPLOADER_KEY] = original


@pytest.fixture()
def client(app, uploader):
    """Return a cookie-less Flask test client; tests pass tokens explicitly."""
    return app.test_client(use_cookies=False)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
