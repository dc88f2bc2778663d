"""
Activation domain service - Verification token check and account activation.

The verification key depends on the token's own subject, so the token is
read twice: once unverified to learn whose secret to fetch, once fully
verified with that secret. Only the second read is trusted.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from .exceptions import InvalidToken, MalformedToken
from .ports import AccountStore
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass
class ActivationService:
    """Domain service that marks accounts verified."""

    repository: AccountStore
    tokens: TokenIssuer

    def activate(self, token: str) -> UUID:
        """
        Verify a verification token and activate its account.

        Activating an already verified account succeeds again while the
        token is still valid.

        Args:
            token: Verification token issued at registration

        Returns:
            Id of the activated account

        Raises:
            InvalidToken: Token malformed, expired, forged, or for an
                unknown account (the reason is only logged)
            StoreUnavailable: Persistence failed
        """
        try:
            account_id = UUID(self.tokens.peek_subject(token))
        except ValueError as e:
            logger.warning("Activation rejected: subject is not an account id")
            raise MalformedToken("subject is not an account id") from e
        except InvalidToken as e:
            logger.warning("Activation rejected: %s", type(e).__name__)
            raise

        secret = self.repository.get_verification_secret(account_id)
        if secret is None:
            logger.warning("Activation rejected: no verification secret for %s", account_id)
            raise InvalidToken("unknown subject")

        try:
            self.tokens.verify(token, secret)
        except InvalidToken as e:
            logger.warning("Activation rejected for %s: %s", account_id, type(e).__name__)
            raise

        self.repository.set_verified(account_id, True)
        logger.info("Account %s activated", account_id)
        return account_id
