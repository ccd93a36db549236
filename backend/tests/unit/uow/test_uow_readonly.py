"""Unit tests for SQLAlchemyReadOnlyUnitOfWork."""

from __future__ import annotations

import pytest

from shopauth.models.user import User
from shopauth.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from shopauth.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db, session):
        """Flushing new objects inside the RO UoW must raise."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_allows_reads(self, db, session):
        user = UserFactory()

        with ROuow() as uow:
            fetched = uow.users.get_by_email(user.email)

        assert fetched is not None
        assert fetched.id == user.id

    def test_disallows_commit(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_mutations_do_not_persist(self, db, session):
        user = UserFactory()
        original_email = user.email

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            loaded = uow.session.get(User, user.id)
            loaded.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            session.expire_all()
            assert uow.users.get(user.id).email == original_email

    def test_guard_is_removed_on_exit(self, db, session):
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(UserFactory.build())
