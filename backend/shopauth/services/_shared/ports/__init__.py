"""
shopauth.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) the auth service depends on.

Modules
-------
- :mod:`credential_store`:
    Defines :class:`~.CredentialStore`, its read-models and
    :class:`~.InMemoryCredentialStore` (unit-test double).

- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer` and the verified claim types.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`.

Concrete adapters live under ``shopauth.infra``.
"""

from __future__ import annotations

from .credential_store import (
    DUPLICATE_EMAIL_MESSAGE,
    CredentialStore,
    InMemoryCredentialStore,
    StoredRefreshToken,
    UserRecord,
)
from .password_hasher import PasswordHasher
from .token_issuer import AccessTokenClaims, RefreshTokenClaims, TokenIssuer

__all__ = [
    "DUPLICATE_EMAIL_MESSAGE",
    "AccessTokenClaims",
    "CredentialStore",
    "InMemoryCredentialStore",
    "PasswordHasher",
    "RefreshTokenClaims",
    "StoredRefreshToken",
    "TokenIssuer",
    "UserRecord",
]
