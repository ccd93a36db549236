# tests/unit/services/test_auth_service.py
from __future__ import annotations

import logging

import pytest

from shopauth.infra.jwt import PyJWTTokenIssuer
from shopauth.infra.security import BcryptPasswordHasher
from shopauth.models.user import Role
from shopauth.services._shared.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from shopauth.services._shared.ports import InMemoryCredentialStore
from shopauth.services.auth.dto import (
    AuthResultOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from shopauth.services.auth.service import AuthService

PASSWORD = "Sup3rSecret"


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def service(store) -> AuthService:
    """Build an AuthService wired to the in-memory store and real JWT/bcrypt adapters."""
    return AuthService(
        store=store,
        tokens=PyJWTTokenIssuer(access_secret="unit-access", refresh_secret="unit-refresh"),
        hasher=BcryptPasswordHasher(rounds=4),
    )


@pytest.fixture()
def registered(service) -> AuthResultOut:
    return service.register(RegisterIn(email="alice@example.com", password=PASSWORD))


# ------------------------------ Register ---------------------------------- #
class TestRegister:
    def test_returns_user_and_verifiable_tokens(self, service, store, registered):
        assert registered.user.email == "alice@example.com"
        assert registered.user.role is Role.USER

        claims = service.verify_access_token(registered.tokens.access_token)
        assert claims.user_id == registered.user.id
        assert claims.role is Role.USER

        stored = store.find_refresh_token(registered.tokens.refresh_token)
        assert stored is not None
        assert stored.user_id == registered.user.id

    def test_password_is_hashed(self, store, registered):
        record = store.find_by_id(registered.user.id)

        assert record.password_hash != PASSWORD
        assert record.password_hash.startswith("$2b$")

    def test_user_out_has_no_password_field(self, registered):
        assert not hasattr(registered.user, "password_hash")

    def test_duplicate_email_fails_without_mutation(self, service, store, registered):
        with pytest.raises(ConflictError, match="email already registered") as excinfo:
            service.register(RegisterIn(email="alice@example.com", password="Other1234"))

        assert isinstance(excinfo.value, ValidationError)
        assert len(store.list_users()) == 1
        assert service.login(LoginIn(email="alice@example.com", password=PASSWORD))

    def test_store_conflict_wins_over_stale_existence_check(self, service, store, monkeypatch):
        store.create_user("race@example.com", "hash")
        monkeypatch.setattr(store, "email_exists", lambda email: False)

        with pytest.raises(ConflictError):
            service.register(RegisterIn(email="race@example.com", password=PASSWORD))

        assert len(store.list_users()) == 1

    def test_email_is_stored_as_given(self, service):
        result = service.register(RegisterIn(email="Mixed@Example.com", password=PASSWORD))

        assert result.user.email == "Mixed@Example.com"

    def test_logs_event_without_secrets(self, service, caplog):
        with caplog.at_level(logging.INFO):
            result = service.register(RegisterIn(email="log@example.com", password=PASSWORD))

        events = [getattr(r, "event", None) for r in caplog.records]
        assert "auth.register" in events
        assert PASSWORD not in caplog.text
        assert result.tokens.refresh_token not in caplog.text


# -------------------------------- Login ----------------------------------- #
class TestLogin:
    def test_success_issues_fresh_pair(self, service, store, registered):
        result = service.login(LoginIn(email="alice@example.com", password=PASSWORD))

        assert isinstance(result.tokens, TokenPairOut)
        assert result.user.id == registered.user.id
        assert result.tokens.refresh_token != registered.tokens.refresh_token
        assert service.verify_access_token(result.tokens.access_token).user_id == registered.user.id
        assert store.find_refresh_token(result.tokens.refresh_token) is not None

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, service, registered):
        with pytest.raises(UnauthorizedError) as wrong_pw:
            service.login(LoginIn(email="alice@example.com", password="Wrong1234"))
        with pytest.raises(UnauthorizedError) as unknown:
            service.login(LoginIn(email="nobody@example.com", password=PASSWORD))

        assert wrong_pw.value.message == unknown.value.message == "invalid credentials"
        assert wrong_pw.value.code == unknown.value.code == "unauthorized"
        assert type(wrong_pw.value) is type(unknown.value)

    def test_failed_login_stores_no_token(self, service, store, registered):
        before = dict(store._tokens)

        with pytest.raises(UnauthorizedError):
            service.login(LoginIn(email="alice@example.com", password="Wrong1234"))

        assert store._tokens == before


# ------------------------------- Refresh ---------------------------------- #
class TestRefresh:
    def test_returns_new_access_and_same_refresh(self, service, registered):
        pair = service.refresh(RefreshIn(refresh_token=registered.tokens.refresh_token))

        assert pair.refresh_token == registered.tokens.refresh_token
        assert pair.access_token != registered.tokens.access_token
        claims = service.verify_access_token(pair.access_token)
        assert claims.user_id == registered.user.id

    def test_uses_current_role(self, service, store, registered):
        store.set_role(registered.user.id, Role.ADMIN)

        pair = service.refresh(RefreshIn(refresh_token=registered.tokens.refresh_token))

        assert service.verify_access_token(pair.access_token).role is Role.ADMIN

    def test_never_issued_token_is_rejected(self, service, registered):
        forged = service.tokens.issue_refresh_token(registered.user.id)

        with pytest.raises(UnauthorizedError, match="invalid refresh token"):
            service.refresh(RefreshIn(refresh_token=forged))

    def test_garbage_token_is_rejected(self, service):
        with pytest.raises(UnauthorizedError, match="invalid refresh token"):
            service.refresh(RefreshIn(refresh_token="garbage"))

    def test_access_token_is_not_a_refresh_token(self, service, registered):
        with pytest.raises(UnauthorizedError, match="invalid refresh token"):
            service.refresh(RefreshIn(refresh_token=registered.tokens.access_token))

    def test_owner_mismatch_is_rejected(self, service, store, registered):
        other = service.register(RegisterIn(email="bob@example.com", password=PASSWORD))
        # Store alice's token under bob's id
        token = registered.tokens.refresh_token
        store.delete_refresh_token(token)
        store.save_refresh_token(token, other.user.id)

        with pytest.raises(UnauthorizedError, match="invalid refresh token"):
            service.refresh(RefreshIn(refresh_token=token))

    def test_deleted_user_is_rejected(self, service, store, registered):
        token = registered.tokens.refresh_token
        store.remove_user(registered.user.id)
        store.save_refresh_token(token, registered.user.id)

        with pytest.raises(UnauthorizedError, match="user not found"):
            service.refresh(RefreshIn(refresh_token=token))


# -------------------------------- Logout ---------------------------------- #
class TestLogout:
    def test_refresh_fails_after_logout(self, service, registered):
        token = registered.tokens.refresh_token

        service.logout(LogoutIn(refresh_token=token))

        with pytest.raises(UnauthorizedError, match="invalid refresh token"):
            service.refresh(RefreshIn(refresh_token=token))

    def test_logout_is_idempotent(self, service, store, registered):
        token = registered.tokens.refresh_token

        service.logout(LogoutIn(refresh_token=token))
        service.logout(LogoutIn(refresh_token=token))
        service.logout(LogoutIn(refresh_token="never-issued"))

        assert store.find_refresh_token(token) is None

    def test_logout_only_revokes_one_session(self, service, registered):
        second = service.login(LoginIn(email="alice@example.com", password=PASSWORD))

        service.logout(LogoutIn(refresh_token=registered.tokens.refresh_token))

        pair = service.refresh(RefreshIn(refresh_token=second.tokens.refresh_token))
        assert pair.refresh_token == second.tokens.refresh_token

    def test_access_token_survives_logout(self, service, registered):
        service.logout(LogoutIn(refresh_token=registered.tokens.refresh_token))

        assert service.verify_access_token(registered.tokens.access_token).user_id == registered.user.id


# ------------------------------- Identity --------------------------------- #
class TestIdentity:
    def test_verify_access_token_failure_is_unauthorized(self, service):
        with pytest.raises(UnauthorizedError, match="invalid token"):
            service.verify_access_token("nope")

    def test_get_profile(self, service, registered):
        profile = service.get_profile(registered.user.id)

        assert profile == registered.user

    def test_get_profile_for_missing_user(self, service):
        with pytest.raises(UnauthorizedError, match="user not found"):
            service.get_profile("missing")


# ---------------------------- Administration ------------------------------ #
class TestAdministration:
    def test_list_users(self, service, registered):
        service.register(RegisterIn(email="bob@example.com", password=PASSWORD))

        emails = [u.email for u in service.list_users()]

        assert emails == ["alice@example.com", "bob@example.com"]

    def test_get_user(self, service, registered):
        assert service.get_user(registered.user.id).email == "alice@example.com"

    def test_get_missing_user_is_not_found(self, service):
        with pytest.raises(NotFoundError) as excinfo:
            service.get_user("missing")

        assert excinfo.value.message == "User not found: missing"
