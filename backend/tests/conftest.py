"""Shared fixtures: one app per run, one rolled-back transaction per test.

The in-memory SQLite database lives on a single connection for the whole run.
Each test opens an outer transaction on it, and every session commit inside
the test (units of work, factories) only releases a SAVEPOINT. Rolling back
the outer transaction at teardown leaves the next test with empty tables.
Every test also runs in its own app context, so ``flask.g`` starts empty.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from shopauth.core.config import TestingConfig
from shopauth.core.extensions import db as _db
from shopauth.factory import create_app


def _enable_sqlite_savepoints(engine) -> None:
    """Make pysqlite emit BEGIN itself so SAVEPOINTs nest correctly."""

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):  # pragma: no cover - driver hook
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def app():
    """The application under :class:`TestingConfig`, with the real SQL store."""
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture(scope="session")
def db(app):
    """Create the schema once; drop it when the run ends.

    The setup and teardown contexts are short-lived, so no ``flask.g``
    outlives a single test.
    """
    with app.app_context():
        if _db.engine.dialect.name == "sqlite":
            _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    """The single connection every test session is bound to."""
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture()
def session(app, db, connection):
    """A scoped session inside this test's outer transaction.

    ``db.session`` is swapped for it, so application code, repositories and
    factories all share it. ``expire_on_commit=False`` keeps factory objects
    readable after code under test commits. Each test also gets its own app
    context, and with it an empty ``flask.g``.
    """
    ctx = app.app_context()
    ctx.push()
    outer = connection.begin()
    scoped = scoped_session(
        sessionmaker(
            bind=connection,
            join_transaction_mode="create_savepoint",
            expire_on_commit=False,
            autoflush=False,
        )
    )

    app_session = db.session
    app_session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = app_session
        outer.rollback()
        ctx.pop()


@pytest.fixture()
def client(app, session):
    return app.test_client()


@pytest.fixture()
def auth_service(app):
    """The :class:`AuthService` the app built at startup."""
    return app.extensions["auth_service"]


@pytest.fixture(scope="session")
def faker():
    """Seeded :class:`faker.Faker` for generated but repeatable input."""
    from faker import Faker

    Faker.seed(1337)
    return Faker()


@pytest.fixture(autouse=True)
def _factories_session(session):
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
