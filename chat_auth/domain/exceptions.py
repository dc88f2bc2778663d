"""
Domain exceptions - Semantic error types for registration and activation.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Adapters translate their own errors (psycopg, bcrypt, PyJWT) into
these types; the API layer maps them to HTTP responses.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class AccountAlreadyExists(AuthError):
    """An account with this email is already registered."""

    pass


class HashingError(AuthError):
    """The password hashing primitive rejected its input."""

    pass


class StoreUnavailable(AuthError):
    """Persistence failed or exceeded the request deadline."""

    pass


class TokenSigningError(AuthError):
    """A token could not be signed (missing or unusable key)."""

    pass


class InvalidToken(AuthError):
    """
    Token rejected.

    Subclasses carry the reason for logging only; clients always
    receive the same generic response.
    """

    pass


class MalformedToken(InvalidToken):
    """Token is not a decodable signed claim set."""

    pass


class ExpiredToken(InvalidToken):
    """Token expiry has been reached."""

    pass


class SignatureInvalid(InvalidToken):
    """Token signature does not match the supplied key."""

    pass
