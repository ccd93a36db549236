"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are the contract between the credential store, the token
issuer and the auth service.

The translation to HTTP responses (RFC 7807) is handled by
``shopauth.core.errors`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message. SQLite only
    reports the offending columns, so ``columns`` are matched as a fallback
    (``"users.email"``).

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>" as printed by SQLite
    name = constraint_name.lower()
    if not name.startswith("uq_"):
        return False
    table, _, column = name[3:].rpartition("_")
    return bool(table) and f"{table}.{column}" in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``code`` is a stable, machine-readable identifier.
    - ``message`` is safe to show to clients.
    """

    code = "bad_request"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Malformed or unacceptable input that the caller can correct."""

    code = "validation_error"
    default_message = "Validation failed"


class ConflictError(ValidationError):
    """Input collides with existing state (e.g., a registered email)."""

    code = "conflict"
    default_message = "Conflict"


class UnauthorizedError(ServiceError):
    """Bad credentials, or an invalid, expired or revoked token."""

    code = "unauthorized"
    default_message = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    """A token failed signature, structure or expiry verification."""

    code = "invalid_token"
    default_message = "invalid token"


class ForbiddenError(ServiceError):
    """The caller is authenticated but lacks the required role."""

    code = "forbidden"
    default_message = "Forbidden"


class StoreError(ServiceError):
    """
    The credential store failed for reasons unrelated to the input.

    The original driver exception is chained via ``__cause__``; the message
    itself is never shown to clients.
    """

    code = "store_error"
    default_message = "Credential store unavailable"


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when a referenced entity is absent.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    code = "not_found"

    def __post_init__(self) -> None:
        ServiceError.__init__(self, f"{self.entity} not found: {self.key}")

    def __str__(self) -> str:
        return self.message
