"""User model: the credential record owned by the auth service."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from shopauth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .refresh_token import RefreshToken


class Role(str, enum.Enum):
    """Authorization level carried by a user and its access tokens."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    email : str
        Login email, stored exactly as submitted.
    password_hash : str
        bcrypt hash of the password. Plaintext is never stored.
    role : Role
        ``USER`` by default. Only the CLI can create ``ADMIN`` users.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=Role.USER,
        server_default=Role.USER.value,
    )

    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        """
        Reject empty emails. Format validation happens at the API layer.

        :raises ValueError: If email is missing or blank.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        return value
