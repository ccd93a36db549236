"""
Abstract Unit of Work contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopauth.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    Transaction boundary around one credential-store operation.

    Used as a context manager. Both repositories share the session of the
    unit of work, so a user and its refresh token are written atomically.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None:
        """Make the staged changes durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard the staged changes."""
