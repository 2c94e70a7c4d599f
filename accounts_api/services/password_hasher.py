"""Password hashing and verification backed by bcrypt."""

import bcrypt


class PasswordHasher:
    """Salted, adaptive one-way hashing of account passwords."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        if not isinstance(password, str):
            raise TypeError("password must be a string")
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False
