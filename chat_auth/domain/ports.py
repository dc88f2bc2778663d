"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from contextlib import AbstractContextManager
from typing import Protocol
from uuid import UUID


class AccountStore(Protocol):
    """Port interface for account and verification secret persistence."""

    def exists_by_email(self, email: str) -> bool:
        """Return True if an account is registered under this email."""
        ...

    def insert_account(self, email: str, password_hash: str) -> UUID:
        """
        Insert a new unverified account.

        Args:
            email: Email address as submitted
            password_hash: bcrypt hashed password

        Returns:
            Generated account id

        Raises:
            AccountAlreadyExists: If the email unique constraint is violated
            StoreUnavailable: On any other persistence failure
        """
        ...

    def get_password_hash(self, email: str) -> str | None:
        """Return the stored password hash, or None if no such account."""
        ...

    def set_verified(self, account_id: UUID, verified: bool) -> None:
        """Set the account's verified flag (no-op if already at that value)."""
        ...

    def insert_verification_secret(self, account_id: UUID, secret: str) -> None:
        """Persist the verification secret owned by an account."""
        ...

    def get_verification_secret(self, account_id: UUID) -> str | None:
        """Return the account's verification secret, or None if absent."""
        ...


class AccountRepository(AccountStore, Protocol):
    """
    Account store that can group operations into one unit of work.

    Each plain operation runs in its own short transaction. Operations
    performed on the store yielded by transaction() share one connection
    and commit together on normal exit; any exception rolls all of them back.
    """

    def transaction(self) -> AbstractContextManager[AccountStore]:
        """Open a unit of work."""
        ...
