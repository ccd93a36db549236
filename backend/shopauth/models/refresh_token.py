"""Persisted refresh tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopauth.core.extensions import db

from .base import CreatedAtMixin, ReprMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User


class RefreshToken(UUIDPKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    A refresh token issued to a user and not yet logged out.

    Rows are created on register/login and deleted on logout. Expired rows are
    left in place; the token's own signature and ``exp`` claim reject them.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(512), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_tokens_token"),)
