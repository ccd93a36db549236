"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from shopauth.api.deps import (
    current_identity,
    get_auth_service,
    json_response,
    optional_auth,
    require_auth,
    timing,
)
from shopauth.schemas import (
    AuthResultSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    SessionSchema,
    TokenPairSchema,
    UserSchema,
)
from shopauth.services.auth import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
auth_result_schema = AuthResultSchema()
token_pair_schema = TokenPairSchema()
user_schema = UserSchema()
session_schema = SessionSchema()


@bp.post("/register")
@timing
def register():
    """Create a USER account and return it with a token pair."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().register(RegisterIn(**payload))
    return json_response({"data": auth_result_schema.dump(result)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(LoginIn(**payload))
    return json_response({"data": auth_result_schema.dump(result)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new access token."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().refresh(RefreshIn(refresh_token=payload["refresh_token"]))
    return json_response({"data": token_pair_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Forget a refresh token. Succeeds for unknown tokens too."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    get_auth_service().logout(LogoutIn(refresh_token=payload["refresh_token"]))
    return json_response({"data": {}})


@bp.get("/profile")
@require_auth
@timing
def profile():
    """Return the authenticated user's profile."""

    identity = current_identity()
    user = get_auth_service().get_profile(identity.user_id)
    return json_response({"data": {"user": user_schema.dump(user)}})


@bp.get("/session")
@optional_auth
@timing
def session():
    """Report whether the caller is signed in, without requiring it."""

    identity = current_identity()
    if identity is None:
        body = {"authenticated": False}
    else:
        body = {"authenticated": True, "user_id": identity.user_id, "role": identity.role}
    return json_response({"data": session_schema.dump(body)})
