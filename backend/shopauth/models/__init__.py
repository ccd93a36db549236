"""Model package exports."""

from .refresh_token import RefreshToken
from .user import Role, User

__all__ = ["RefreshToken", "Role", "User"]
