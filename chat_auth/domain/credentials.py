"""
Credential hashing - bcrypt password hashing and verification.
"""

import logging

import bcrypt

from .exceptions import HashingError

logger = logging.getLogger(__name__)

DEFAULT_COST = 12


class CredentialHasher:
    """
    One-way password hashing with a fixed bcrypt cost factor.

    bcrypt embeds the salt and cost in its output, so verify() needs
    nothing but the stored hash.
    """

    def __init__(self, rounds: int = DEFAULT_COST) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password for storage.

        Raises:
            HashingError: If bcrypt rejects the input (e.g. over-long password)
        """
        try:
            return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()
        except ValueError as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise HashingError("password hashing failed") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a password against a stored hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            # Malformed stored hash or input bcrypt refuses
            return False
