"""Convenience exports for API schemas."""

from __future__ import annotations

from .auth import (
    AuthResultSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    SessionSchema,
    TokenPairSchema,
)
from .user import UserSchema

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "SessionSchema",
    "TokenPairSchema",
    "UserSchema",
]
