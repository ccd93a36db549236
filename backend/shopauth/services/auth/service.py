# shopauth/services/auth/service.py
from __future__ import annotations

from shopauth.models.user import Role
from shopauth.services._shared.base import BaseService
from shopauth.services._shared.errors import (
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
)
from shopauth.services._shared.ports import (
    DUPLICATE_EMAIL_MESSAGE,
    AccessTokenClaims,
    CredentialStore,
    PasswordHasher,
    TokenIssuer,
    UserRecord,
)
from shopauth.services.auth.dto import (
    AuthResultOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserOut,
)

INVALID_CREDENTIALS = "invalid credentials"
INVALID_REFRESH_TOKEN = "invalid refresh token"
INVALID_TOKEN = "invalid token"
USER_NOT_FOUND = "user not found"


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    The service holds no per-request state: one instance is built at startup
    and shared across requests. Users and refresh tokens live in the
    :class:`CredentialStore`; JWTs come from the :class:`TokenIssuer`.

    Refresh tokens are not rotated: ``refresh`` returns the presented refresh
    token unchanged alongside a new access token.
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        tokens: TokenIssuer,
        hasher: PasswordHasher,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param store: Users and refresh-token persistence.
        :param tokens: Adapter for issuing/verifying JWTs.
        :param hasher: Password hashing adapter.
        """
        super().__init__()
        self.store = store
        self.tokens = tokens
        self.hasher = hasher

    # ------------------------------------------------------------------ #
    # Register / Login
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create a ``USER`` account and sign it in.

        :param dto: Registration input.
        :returns: The new user and a token pair.
        :raises ConflictError: If the email is already registered.
        """
        # Fast path; the unique constraint behind create_user is authoritative
        if self.store.email_exists(dto.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        password_hash = self.hasher.hash(dto.password)
        user = self.store.create_user(dto.email, password_hash, Role.USER)
        tokens = self._issue_pair(user)
        self.log.info("user registered", extra={"event": "auth.register", "user_id": user.id})
        return AuthResultOut(user=UserOut.from_record(user), tokens=tokens)

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Verify credentials and issue a fresh token pair.

        Unknown email and wrong password are indistinguishable to the caller.

        :raises UnauthorizedError: ``invalid credentials``.
        """
        user = self.store.find_by_email(dto.email)
        if user is None or not self.hasher.verify(dto.password, user.password_hash):
            self.log.warning("login rejected", extra={"event": "auth.login_failed"})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        tokens = self._issue_pair(user)
        self.log.info("user logged in", extra={"event": "auth.login", "user_id": user.id})
        return AuthResultOut(user=UserOut.from_record(user), tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh / Logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a stored, valid refresh token for a new access token.

        :returns: New access token and the same refresh token.
        :raises UnauthorizedError: ``invalid refresh token`` when the JWT fails
            verification, is not stored, or is stored for another user;
            ``user not found`` when its owner no longer exists.
        """
        try:
            claims = self.tokens.verify_refresh_token(dto.refresh_token)
        except InvalidTokenError as exc:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN) from exc

        stored = self.store.find_refresh_token(dto.refresh_token)
        if stored is None or stored.user_id != claims.user_id:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        user = self.store.find_by_id(claims.user_id)
        if user is None:
            raise UnauthorizedError(USER_NOT_FOUND)

        access = self.tokens.issue_access_token(user.id, user.role)
        self.log.info("access token refreshed", extra={"event": "auth.refresh", "user_id": user.id})
        return TokenPairOut(access_token=access, refresh_token=dto.refresh_token)

    def logout(self, dto: LogoutIn) -> None:
        """Forget the refresh token. Unknown tokens are ignored."""
        self.store.delete_refresh_token(dto.refresh_token)
        self.log.info("refresh token revoked", extra={"event": "auth.logout"})

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """
        Verify an access token for the auth gate.

        :raises UnauthorizedError: ``invalid token`` on any verification failure.
        """
        try:
            return self.tokens.verify_access_token(token)
        except InvalidTokenError as exc:
            raise UnauthorizedError(INVALID_TOKEN) from exc

    def get_profile(self, user_id: str) -> UserOut:
        """
        Return the authenticated user's profile.

        :raises UnauthorizedError: ``user not found`` if the user was removed
            after the token was issued.
        """
        user = self.store.find_by_id(user_id)
        if user is None:
            raise UnauthorizedError(USER_NOT_FOUND)
        return UserOut.from_record(user)

    # ------------------------------------------------------------------ #
    # Administration
    # ------------------------------------------------------------------ #

    def list_users(self) -> list[UserOut]:
        return [UserOut.from_record(u) for u in self.store.list_users()]

    def get_user(self, user_id: str) -> UserOut:
        """:raises NotFoundError: If no user has ``user_id``."""
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return UserOut.from_record(user)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user: UserRecord) -> TokenPairOut:
        """Issue an access/refresh pair and persist the refresh token."""
        access = self.tokens.issue_access_token(user.id, user.role)
        refresh = self.tokens.issue_refresh_token(user.id)
        self.store.save_refresh_token(refresh, user.id)
        return TokenPairOut(access_token=access, refresh_token=refresh)
