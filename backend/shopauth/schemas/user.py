"""User response schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from shopauth.models.user import Role


class UserSchema(Schema):
    """Public user representation; the password hash is never exposed."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    role = fields.Enum(Role, by_value=True, required=True)
    created_at = fields.DateTime(required=True, data_key="createdAt")
