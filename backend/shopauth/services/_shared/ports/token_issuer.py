from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from shopauth.models.user import Role


@dataclass(frozen=True, slots=True)
class AccessTokenClaims:
    """
    Verified payload of an access token.

    :ivar user_id: Subject of the token.
    :ivar role: Role snapshot taken at issuance.
    :ivar issued_at: ``iat`` claim.
    :ivar expires_at: ``exp`` claim; the token is valid strictly before it.
    """

    user_id: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class RefreshTokenClaims:
    """Verified payload of a refresh token."""

    user_id: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer(Protocol):
    """
    Port for signing and verifying access/refresh JWTs.

    Verification methods raise
    :class:`~shopauth.services._shared.errors.InvalidTokenError` on bad
    signature, malformed structure, missing claims or expiry.
    """

    def issue_access_token(self, user_id: str, role: Role) -> str: ...

    def issue_refresh_token(self, user_id: str) -> str: ...

    def verify_access_token(self, token: str) -> AccessTokenClaims: ...

    def verify_refresh_token(self, token: str) -> RefreshTokenClaims: ...
