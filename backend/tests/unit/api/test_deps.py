"""Unit tests for the auth gate decorators."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask import g

from shopauth.api.deps import (
    current_identity,
    optional_auth,
    parse_bearer,
    require_admin,
    require_auth,
)
from shopauth.core.errors import Forbidden, Unauthorized
from shopauth.models.user import Role
from tests.helpers.auth import bearer, forge_access_token


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        (None, None),
        ("", None),
        ("Bearer ", None),
        ("Bearer", None),
        ("bearer abc", None),
        ("Basic abc", None),
        ("Bearer  abc", None),
        ("Bearer abc def", None),
        ("Token Bearer abc", None),
    ],
)
def test_parse_bearer(header, expected):
    assert parse_bearer(header) == expected


@require_auth
def _protected():
    return current_identity()


@require_auth
@require_admin
def _admin_only():
    return "ok"


@optional_auth
def _maybe():
    return current_identity()


class TestRequireAuth:
    def test_valid_token_sets_identity(self, app):
        token = forge_access_token("user-1", Role.USER)
        with app.test_request_context(headers=bearer(token)):
            identity = _protected()

            assert identity.user_id == "user-1"
            assert g.identity is identity

    def test_missing_header(self, app):
        with app.test_request_context(), pytest.raises(Unauthorized) as excinfo:
            _protected()

        assert excinfo.value.message == "access token required"

    @pytest.mark.parametrize("header", ["Token abc", "Bearer ", "bearer abc"])
    def test_malformed_header(self, app, header):
        with app.test_request_context(headers={"Authorization": header}):
            with pytest.raises(Unauthorized) as excinfo:
                _protected()

        assert excinfo.value.message == "invalid token format"

    def test_expired_token(self, app):
        token = forge_access_token("user-1", expires_delta=timedelta(seconds=-5))
        with app.test_request_context(headers=bearer(token)):
            with pytest.raises(Unauthorized) as excinfo:
                _protected()

        assert excinfo.value.code == "invalid_token"

    def test_token_signed_with_other_secret(self, app):
        token = forge_access_token("user-1", secret="someone-else")
        with app.test_request_context(headers=bearer(token)), pytest.raises(Unauthorized):
            _protected()


class TestRequireAdmin:
    def test_admin_passes(self, app):
        token = forge_access_token("admin-1", Role.ADMIN)
        with app.test_request_context(headers=bearer(token)):
            assert _admin_only() == "ok"

    def test_user_is_forbidden(self, app):
        token = forge_access_token("user-1", Role.USER)
        with app.test_request_context(headers=bearer(token)), pytest.raises(Forbidden):
            _admin_only()

    def test_without_identity_is_forbidden(self, app):
        guarded = require_admin(lambda: "ok")
        with app.test_request_context(), pytest.raises(Forbidden):
            guarded()


class TestOptionalAuth:
    def test_valid_token_sets_identity(self, app):
        token = forge_access_token("user-1", Role.USER)
        with app.test_request_context(headers=bearer(token)):
            assert _maybe().user_id == "user-1"

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Basic abc"}, {"Authorization": "Bearer not-a-jwt"}],
    )
    def test_failures_leave_identity_empty(self, app, headers):
        with app.test_request_context(headers=headers):
            assert _maybe() is None
            assert g.identity is None
