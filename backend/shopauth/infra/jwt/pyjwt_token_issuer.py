# shopauth/infra/jwt/pyjwt_token_issuer.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from shopauth.models.user import Role
from shopauth.services._shared.errors import InvalidTokenError
from shopauth.services._shared.ports import AccessTokenClaims, RefreshTokenClaims, TokenIssuer

DEFAULT_ACCESS_EXPIRES = timedelta(hours=1)
DEFAULT_REFRESH_EXPIRES = timedelta(days=7)


class PyJWTTokenIssuer(TokenIssuer):
    """
    HS256 token issuer backed by PyJWT.

    Access and refresh tokens are signed with two different secrets, so a
    token of one kind never verifies as the other.

    :param access_secret: Key for access tokens.
    :param refresh_secret: Key for refresh tokens; must differ from ``access_secret``.
    :param access_expires: Access token lifetime (default 1 hour).
    :param refresh_expires: Refresh token lifetime (default 7 days).
    :param algorithm: JWS algorithm (default ``HS256``).
    :raises ValueError: If a secret is empty or both secrets are equal.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_expires: timedelta = DEFAULT_ACCESS_EXPIRES,
        refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES,
        algorithm: str = "HS256",
    ) -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Access and refresh secrets are required.")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self.algorithm = algorithm

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_access_token(self, user_id: str, role: Role) -> str:
        payload = self._base_claims(user_id, self.access_expires)
        payload["role"] = Role(role).value
        return jwt.encode(payload, self._access_secret, algorithm=self.algorithm)

    def issue_refresh_token(self, user_id: str) -> str:
        payload = self._base_claims(user_id, self.refresh_expires)
        return jwt.encode(payload, self._refresh_secret, algorithm=self.algorithm)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        payload = self._decode(token, self._access_secret, required=("sub", "role", "iat", "exp"))
        try:
            role = Role(payload["role"])
        except ValueError as exc:
            raise InvalidTokenError() from exc
        return AccessTokenClaims(
            user_id=str(payload["sub"]),
            role=role,
            issued_at=_from_timestamp(payload["iat"]),
            expires_at=_from_timestamp(payload["exp"]),
        )

    def verify_refresh_token(self, token: str) -> RefreshTokenClaims:
        payload = self._decode(token, self._refresh_secret, required=("sub", "iat", "exp"))
        return RefreshTokenClaims(
            user_id=str(payload["sub"]),
            issued_at=_from_timestamp(payload["iat"]),
            expires_at=_from_timestamp(payload["exp"]),
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _base_claims(user_id: str, lifetime: timedelta) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(user_id),
            "iat": now,
            "exp": now + lifetime,
            # Two tokens minted in the same second must still differ
            "jti": uuid4().hex,
        }

    def _decode(self, token: str, secret: str, *, required: tuple[str, ...]) -> dict[str, Any]:
        """
        Decode ``token`` and enforce signature, expiry and required claims.

        PyJWT rejects a token once ``now >= exp``, so tokens are valid strictly
        before their expiry instant.

        :raises InvalidTokenError: On any verification failure.
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": list(required)},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc
        if not isinstance(payload.get("sub"), str) or not payload["sub"]:
            raise InvalidTokenError()
        return payload


def _from_timestamp(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=UTC)
