"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and email-verification flow:
credential hashing, verification secrets, token issuance, and the two
orchestrating services. It defines its own port interfaces for
persistence, ensuring the web framework and database driver stay in
the adapter and API layers.
"""

from .activation import ActivationService
from .credentials import CredentialHasher
from .exceptions import (
    AccountAlreadyExists,
    AuthError,
    ExpiredToken,
    HashingError,
    InvalidToken,
    MalformedToken,
    SignatureInvalid,
    StoreUnavailable,
    TokenSigningError,
)
from .ports import AccountRepository, AccountStore
from .registration import RegistrationResult, RegistrationService
from .tokens import Claims, TokenIssuer
from .verification_secret import generate_verification_secret

__all__ = [
    "AccountAlreadyExists",
    "AccountRepository",
    "AccountStore",
    "ActivationService",
    "AuthError",
    "Claims",
    "CredentialHasher",
    "ExpiredToken",
    "HashingError",
    "InvalidToken",
    "MalformedToken",
    "RegistrationResult",
    "RegistrationService",
    "SignatureInvalid",
    "StoreUnavailable",
    "TokenIssuer",
    "TokenSigningError",
    "generate_verification_secret",
]
