from shopauth.services.auth.dto import (
    AuthResultOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserOut,
)
from shopauth.services.auth.service import AuthService

__all__ = [
    "AuthResultOut",
    "AuthService",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "RegisterIn",
    "TokenPairOut",
    "UserOut",
]
