"""
Registration domain service - Account creation and token issuance.

Registration Flow (linear, early exit on failure)
=================================================

1. Existence check by email        -> AccountAlreadyExists, nothing written
2. Password hashing                -> HashingError
3. Unit of work (single transaction):
   a. insert account               -> AccountAlreadyExists (lost race) / StoreUnavailable
   b. generate verification secret
   c. issue access token           -> TokenSigningError
   d. persist verification secret  -> StoreUnavailable
   e. issue verification token     -> TokenSigningError
4. Return both tokens

Any failure inside step 3 rolls back the account insert, so an account
never exists without a verification secret. The existence check in step 1
is only a fast path: the database unique constraint is what guarantees
uniqueness under concurrent registrations.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from .credentials import CredentialHasher
from .exceptions import AccountAlreadyExists
from .ports import AccountRepository
from .tokens import TokenIssuer
from .verification_secret import generate_verification_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    """Artifacts of a completed registration."""

    account_id: UUID
    access_token: str
    verification_token: str


@dataclass
class RegistrationService:
    """
    Domain service for account registration.

    Access tokens are signed with the service-wide access_token_secret;
    verification tokens with the account's own freshly generated secret.
    """

    repository: AccountRepository
    hasher: CredentialHasher
    tokens: TokenIssuer
    access_token_secret: str

    def register(self, email: str, password: str) -> RegistrationResult:
        """
        Register a new, unverified account.

        Args:
            email: Email address (stored as given)
            password: Plaintext password (only its hash is stored)

        Returns:
            RegistrationResult with the access and verification tokens

        Raises:
            AccountAlreadyExists: Email is already registered
            HashingError: Password could not be hashed
            StoreUnavailable: Persistence failed
            TokenSigningError: A token could not be signed
        """
        if self.repository.exists_by_email(email):
            logger.warning("Registration rejected: email already registered")
            raise AccountAlreadyExists(email)

        logger.debug("Hashing password")
        password_hash = self.hasher.hash(password)

        with self.repository.transaction() as store:
            logger.debug("Inserting account")
            account_id = store.insert_account(email, password_hash)

            secret = generate_verification_secret()

            logger.debug("Issuing access token for account %s", account_id)
            access_token = self.tokens.issue(str(account_id), self.access_token_secret)

            logger.debug("Inserting verification secret for account %s", account_id)
            store.insert_verification_secret(account_id, secret)

            logger.debug("Issuing verification token for account %s", account_id)
            verification_token = self.tokens.issue(str(account_id), secret)

        logger.info("Account %s registered", account_id)
        return RegistrationResult(
            account_id=account_id,
            access_token=access_token,
            verification_token=verification_token,
        )
