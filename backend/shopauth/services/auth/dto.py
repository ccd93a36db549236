# shopauth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopauth.models.user import Role
from shopauth.services._shared.ports import UserRecord

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email, stored as given.
    :type email: str
    :param password: Raw password (hashed before storage).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Encoded refresh JWT to forget.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public view of a user; the password hash is never included."""

    id: str
    email: str
    role: Role
    created_at: datetime

    @classmethod
    def from_record(cls, record: UserRecord) -> UserOut:
        return cls(id=record.id, email=record.email, role=record.role, created_at=record.created_at)


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """Result of register/login: the user and a fresh token pair."""

    user: UserOut
    tokens: TokenPairOut
