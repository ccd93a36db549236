"""
Units of work over the Flask-scoped SQLAlchemy session.

The credential store opens one per operation::

    with SQLAlchemyUnitOfWork() as uow:
        uow.refresh_tokens.add(RefreshToken(token=token, user_id=user_id))

Writers commit when the block exits cleanly. Readers never write.
"""

from __future__ import annotations

import logging

from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from shopauth.core.extensions import db
from shopauth.repositories import RefreshTokenRepository, UserRepository
from shopauth.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# Dialects that accept SET TRANSACTION READ ONLY
READ_ONLY_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})


class SQLAlchemyRepositoryContainer:
    """Build the repositories on one shared session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)
        self.refresh_tokens = RefreshTokenRepository(session=session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """Read-write unit of work: commit on success, roll back on any exception."""

    def __init__(self, session: Session | None = None) -> None:
        super().__init__(session=session or db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only unit of work.

    - Any flush of new, dirty or deleted objects raises ``RuntimeError``.
    - ``commit()`` raises ``RuntimeError``.
    - On exit the transaction it opened is rolled back.
    - On PostgreSQL and MySQL the transaction is also marked
      ``READ ONLY`` so raw SQL writes fail in the database.

    When the session is already inside a transaction the unit of work joins
    it. The flush guard still applies; ending the transaction is left to its
    owner.
    """

    def __init__(self, session: Session | None = None, *, enforce_db_readonly: bool = True) -> None:
        super().__init__(session=session or db.session)
        self.enforce_db_readonly = enforce_db_readonly
        self._txn: SessionTransaction | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._txn = self.session.begin()
        except InvalidRequestError:
            self._txn = None

        if self._txn is not None and self.enforce_db_readonly:
            self._mark_read_only()

        event.listen(self.session, "before_flush", self._block_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        event.remove(self.session, "before_flush", self._block_flush)
        if self._txn is not None:
            txn, self._txn = self._txn, None
            if txn.is_active:
                txn.rollback()

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def _mark_read_only(self) -> None:
        if self.session.get_bind().dialect.name not in READ_ONLY_DIALECTS:
            return
        try:
            self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION READ ONLY failed (%s); relying on the flush guard", exc)

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )
