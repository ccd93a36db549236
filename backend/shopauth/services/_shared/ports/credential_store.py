from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from shopauth.models.user import Role
from shopauth.services._shared.errors import ConflictError

DUPLICATE_EMAIL_MESSAGE = "email already registered"


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model of a stored user, detached from any session.

    :ivar id: UUID4 string identifier.
    :ivar email: Login email as stored.
    :ivar password_hash: bcrypt hash (never serialized to clients).
    :ivar role: Authorization level.
    :ivar created_at: Creation timestamp set by the store.
    """

    id: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class StoredRefreshToken:
    """A persisted refresh token and its owner."""

    token: str
    user_id: str
    created_at: datetime | None = None


class CredentialStore(Protocol):
    """
    Persistence port for users and refresh tokens.

    Every method raises :class:`~shopauth.services._shared.errors.StoreError`
    when the backing store fails for reasons unrelated to the input.
    """

    def create_user(self, email: str, password_hash: str, role: Role = Role.USER) -> UserRecord:
        """
        Persist a new user.

        :raises ConflictError: If the email is already registered. This is the
            authoritative duplicate signal, even when a prior ``email_exists``
            check returned ``False``.
        """

    def find_by_email(self, email: str) -> UserRecord | None: ...

    def find_by_id(self, user_id: str) -> UserRecord | None: ...

    def email_exists(self, email: str) -> bool: ...

    def save_refresh_token(self, token: str, user_id: str) -> None: ...

    def find_refresh_token(self, token: str) -> StoredRefreshToken | None: ...

    def delete_refresh_token(self, token: str) -> None:
        """Delete ``token`` if present. Deleting an unknown token is a no-op."""

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by creation time."""


class InMemoryCredentialStore(CredentialStore):
    """
    Dict-backed credential store used in unit tests.

    .. note::
       A single lock makes the uniqueness check and the insert atomic, the
       same guarantee the SQL store gets from ``uq_users_email``.
    """

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._ids_by_email: dict[str, str] = {}
        self._tokens: dict[str, StoredRefreshToken] = {}
        self._lock = threading.Lock()

    def create_user(self, email: str, password_hash: str, role: Role = Role.USER) -> UserRecord:
        with self._lock:
            if email in self._ids_by_email:
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
            now = datetime.now(UTC)
            record = UserRecord(
                id=str(uuid4()),
                email=email,
                password_hash=password_hash,
                role=Role(role),
                created_at=now,
                updated_at=now,
            )
            self._users[record.id] = record
            self._ids_by_email[email] = record.id
            return record

    def find_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._users.get(user_id) if user_id else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with self._lock:
            return self._users.get(user_id)

    def email_exists(self, email: str) -> bool:
        with self._lock:
            return email in self._ids_by_email

    def save_refresh_token(self, token: str, user_id: str) -> None:
        with self._lock:
            self._tokens[token] = StoredRefreshToken(
                token=token, user_id=user_id, created_at=datetime.now(UTC)
            )

    def find_refresh_token(self, token: str) -> StoredRefreshToken | None:
        with self._lock:
            return self._tokens.get(token)

    def delete_refresh_token(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    def list_users(self) -> list[UserRecord]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.created_at)

    # Test helpers

    def set_role(self, user_id: str, role: Role) -> UserRecord:
        """Change a user's role; there is no HTTP operation for this."""
        with self._lock:
            record = replace(self._users[user_id], role=Role(role))
            self._users[user_id] = record
            return record

    def remove_user(self, user_id: str) -> None:
        """Drop a user and its refresh tokens, like ``ON DELETE CASCADE``."""
        with self._lock:
            record = self._users.pop(user_id, None)
            if record is not None:
                self._ids_by_email.pop(record.email, None)
            self._tokens = {k: v for k, v in self._tokens.items() if v.user_id != user_id}
