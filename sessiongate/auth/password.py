"""Password hashing and verification using bcrypt."""

from typing import Optional

import bcrypt


def hash_password(plain: str, rounds: Optional[int] = None) -> str:
    """Hash a plain password. Returns bcrypt hash string."""
    if not plain:
        raise ValueError("password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds) if rounds else bcrypt.gensalt()
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plain password against stored hash."""
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


class BcryptPasswordHasher:
    """The password primitive handed to the session orchestrator."""

    def __init__(self, rounds: Optional[int] = None):
        if rounds is None:
            from config.settings import settings
            rounds = settings.auth.bcrypt_rounds
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, plain: str) -> str:
        return hash_password(plain, rounds=self.rounds)

    def verify(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def dummy_verify(self, plain: str) -> bool:
        """Spend one verification against a throwaway hash; always False."""
        if self._dummy_hash is None:
            self._dummy_hash = hash_password("dummy-password", rounds=self.rounds)
        verify_password(plain or "x", self._dummy_hash)
        return False
