"""Shared persistence helpers for the SQLAlchemy repositories.

Repositories only stage and query rows. They never commit or roll back; the
unit of work that owns the session does.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from shopauth.core.extensions import db

E = TypeVar("E")  # mapped entity


class BaseRepository(Generic[E]):
    """Lookups, inserts and sorted listing for one mapped ``model``.

    Subclasses set ``model`` and may expose sort keys through ``sortable``.
    Keys outside that map are ignored.
    """

    model: type[E]
    sortable: Mapping[str, str] = {}

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session of the enclosing unit of work. Defaults to
            the Flask-scoped ``db.session``.
        """
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _column(self, name: str) -> InstrumentedAttribute[Any]:
        return getattr(self.model, name)

    # --------------------------------- Writes --------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush, so ids, defaults and constraints apply.

        :raises sqlalchemy.exc.IntegrityError: On a constraint violation.
        """
        self.session.add(instance)
        self.session.flush()
        return instance

    # --------------------------------- Reads ---------------------------------

    def get(self, entity_id: Any) -> E | None:
        """Return the entity with primary key ``entity_id``, or ``None``."""
        stmt = select(self.model).where(self._column("id") == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def list(self, *, sort: Iterable[str] = ()) -> list[E]:
        """List every entity.

        :param sort: Keys from ``sortable``; a ``-`` prefix sorts descending.
            The primary key is always the final tiebreaker.
        """
        stmt: Select[Any] = select(self.model)
        for token in sort:
            key = token.lstrip("-+")
            if key in self.sortable:
                column = self._column(self.sortable[key])
                stmt = stmt.order_by(column.desc() if token.startswith("-") else column.asc())
        stmt = stmt.order_by(self._column("id").asc())
        return list(self.session.execute(stmt).scalars().all())
