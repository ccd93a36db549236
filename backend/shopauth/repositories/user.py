"""User repository: lookups by id and email."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from shopauth.models.user import User
from shopauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never hashes passwords or issues tokens; the auth service does.
    """

    model = User
    sortable = {"created_at": "created_at"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email.

        :param email: Email address as stored.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email)
        return self.session.execute(stmt).first() is not None
