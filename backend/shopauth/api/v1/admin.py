"""Administrator-only user endpoints."""

from __future__ import annotations

from flask import Blueprint

from shopauth.api.deps import get_auth_service, json_response, require_admin, require_auth, timing
from shopauth.schemas import UserSchema

bp = Blueprint("admin", __name__)

user_schema = UserSchema()
users_schema = UserSchema(many=True)


@bp.get("/users")
@require_auth
@require_admin
@timing
def list_users():
    """List every registered user, oldest first."""

    users = get_auth_service().list_users()
    return json_response({"data": {"users": users_schema.dump(users)}})


@bp.get("/users/<string:user_id>")
@require_auth
@require_admin
@timing
def get_user(user_id: str):
    """Return a single user by id."""

    user = get_auth_service().get_user(user_id)
    return json_response({"data": {"user": user_schema.dump(user)}})
