"""bcrypt implementation of the password hasher port."""

from __future__ import annotations

import bcrypt

from shopauth.services._shared.ports import PasswordHasher

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72
DEFAULT_ROUNDS = 12


class BcryptPasswordHasher(PasswordHasher):
    """
    Salted bcrypt hashing with a configurable cost factor.

    :param rounds: Cost factor, 4..31. Production uses 12.
    :raises ValueError: If ``rounds`` is out of range.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= int(rounds) <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31.")
        self.rounds = int(rounds)

    def hash(self, password: str) -> str:
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False
