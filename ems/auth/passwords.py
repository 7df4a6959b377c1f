"""Password hashing and verification.

Wraps a passlib bcrypt context so callers never touch hash formats directly.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12


class PasswordHasher:
    """bcrypt based credential verifier."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        return self.context.hash(password)

    def verify(self, password: str, stored_hash: str) -> bool:
        """Check a plaintext password against a stored hash.

        A stored value passlib cannot identify is treated as a mismatch.
        """
        if not password or not stored_hash:
            return False
        try:
            return self.context.verify(password, stored_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def dummy_verify(self) -> None:
        """Spend the same work as a real verify when no user matched."""
        self.context.dummy_verify()
