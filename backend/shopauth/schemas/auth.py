"""Authentication-related Marshmallow schemas.

Wire names are camelCase (``refreshToken``, ``accessToken``); loaded data uses
snake_case attribute names.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from shopauth.models.user import Role

from .user import UserSchema

# At least one lowercase letter, one uppercase letter and one digit
PASSWORD_COMPLEXITY = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).+$"


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(
        required=True,
        validate=[
            validate.Length(min=8, error="Password must be at least 8 characters."),
            validate.Regexp(
                PASSWORD_COMPLEXITY,
                error="Password must contain a lowercase letter, an uppercase letter and a digit.",
            ),
        ],
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(
        required=True, validate=validate.Length(min=1, error="Password is required.")
    )


class RefreshTokenSchema(Schema):
    """Input payload for ``/refresh`` and ``/logout``."""

    refresh_token = fields.String(
        required=True,
        data_key="refreshToken",
        validate=validate.Length(min=1, error="Refresh token is required."),
    )


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthResultSchema(Schema):
    """Response payload for register/login."""

    user = fields.Nested(UserSchema, required=True)
    tokens = fields.Nested(TokenPairSchema, required=True)


class SessionSchema(Schema):
    """Response payload for the optional-auth session probe."""

    authenticated = fields.Boolean(required=True)
    user_id = fields.String(data_key="userId")
    role = fields.Enum(Role, by_value=True)
