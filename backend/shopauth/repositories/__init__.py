"""Repositories for the ``users`` and ``refresh_tokens`` tables."""

from __future__ import annotations

from shopauth.repositories.base import BaseRepository
from shopauth.repositories.refresh_token import RefreshTokenRepository
from shopauth.repositories.user import UserRepository

__all__ = ["BaseRepository", "RefreshTokenRepository", "UserRepository"]
