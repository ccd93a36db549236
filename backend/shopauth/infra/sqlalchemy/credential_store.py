"""
Relational credential store.

Every operation runs inside its own unit of work: reads in a read-only UoW,
writes in a read-write UoW that commits on success. ORM instances never leave
this module; callers receive frozen read-models.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shopauth.models.refresh_token import RefreshToken
from shopauth.models.user import Role, User
from shopauth.services._shared.errors import ConflictError, StoreError, violates
from shopauth.services._shared.ports import (
    DUPLICATE_EMAIL_MESSAGE,
    CredentialStore,
    StoredRefreshToken,
    UserRecord,
)
from shopauth.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        role=Role(user.role),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Wrap driver failures in :class:`StoreError`, chaining the cause."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"{operation} failed") from exc


class SQLAlchemyCredentialStore(CredentialStore):
    """
    Credential store backed by the ``users`` and ``refresh_tokens`` tables.

    :param rw_uow_factory: Builds read-write units of work.
    :param ro_uow_factory: Builds read-only units of work.
    """

    def __init__(
        self,
        *,
        rw_uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self.rw_uow = rw_uow_factory
        self.ro_uow = ro_uow_factory

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #

    def create_user(self, email: str, password_hash: str, role: Role = Role.USER) -> UserRecord:
        """
        Insert a user and commit.

        :raises ConflictError: When ``uq_users_email`` rejects the insert.
        :raises StoreError: On any other database failure.
        """
        try:
            with self.rw_uow() as uow:
                user = uow.users.add(User(email=email, password_hash=password_hash, role=Role(role)))
                # Load server defaults before the commit expires the instance
                record = _to_record(user)
            return record
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
            raise StoreError("create_user failed") from exc
        except SQLAlchemyError as exc:
            raise StoreError("create_user failed") from exc

    def find_by_email(self, email: str) -> UserRecord | None:
        with _store_errors("find_by_email"), self.ro_uow() as uow:
            user = uow.users.get_by_email(email)
            return _to_record(user) if user else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with _store_errors("find_by_id"), self.ro_uow() as uow:
            user = uow.users.get(user_id)
            return _to_record(user) if user else None

    def email_exists(self, email: str) -> bool:
        with _store_errors("email_exists"), self.ro_uow() as uow:
            return uow.users.exists_by_email(email)

    def list_users(self) -> list[UserRecord]:
        with _store_errors("list_users"), self.ro_uow() as uow:
            return [_to_record(u) for u in uow.users.list(sort=["created_at"])]

    # ------------------------------------------------------------------ #
    # Refresh tokens
    # ------------------------------------------------------------------ #

    def save_refresh_token(self, token: str, user_id: str) -> None:
        with _store_errors("save_refresh_token"), self.rw_uow() as uow:
            uow.refresh_tokens.add(RefreshToken(token=token, user_id=user_id))

    def find_refresh_token(self, token: str) -> StoredRefreshToken | None:
        with _store_errors("find_refresh_token"), self.ro_uow() as uow:
            row = uow.refresh_tokens.get_by_token(token)
            if row is None:
                return None
            return StoredRefreshToken(token=row.token, user_id=row.user_id, created_at=row.created_at)

    def delete_refresh_token(self, token: str) -> None:
        with _store_errors("delete_refresh_token"), self.rw_uow() as uow:
            uow.refresh_tokens.delete_by_token(token)
