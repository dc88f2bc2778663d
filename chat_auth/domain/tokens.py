"""
Token issuer - Signed, time-boxed claim sets.

Tokens are compact HS256 JWTs carrying exactly three claims:

- sub: account id (string form)
- iss: configured issuer
- exp: absolute expiry, integer UNIX seconds

The issuer never holds a key. Callers pass one per call, which lets the
same issuer sign access tokens (service-wide key) and verification tokens
(per-account key).

Two-step verification for per-account keys
==========================================

A verification token is signed with a key that depends on its own subject.
peek_subject() reads the subject WITHOUT checking the signature so the
caller can look that key up; verify() must then be run with the key before
anything is trusted. peek_subject() returns the subject alone,
never the remaining claims.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .exceptions import (
    ExpiredToken,
    InvalidToken,
    MalformedToken,
    SignatureInvalid,
    TokenSigningError,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["exp", "iss", "sub"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    """Payload of a signed token."""

    subject: str
    issuer: str
    expiry: int

    def to_payload(self) -> dict[str, Any]:
        return {"sub": self.subject, "iss": self.issuer, "exp": self.expiry}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Claims":
        return cls(subject=payload["sub"], issuer=payload["iss"], expiry=int(payload["exp"]))


class TokenIssuer:
    """Issues and validates HS256 tokens for one issuer and one lifetime."""

    def __init__(
        self,
        issuer: str,
        lifetime: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._issuer = issuer
        self._lifetime = lifetime
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def claims_for(self, subject: str) -> Claims:
        """Build claims expiring one lifetime from now."""
        expiry = int((self._clock() + self._lifetime).timestamp())
        return Claims(subject=subject, issuer=self._issuer, expiry=expiry)

    def issue(self, subject: str, signing_key: str) -> str:
        """
        Sign a fresh claim set for subject.

        Args:
            subject: Account id as string
            signing_key: HMAC key for this token category

        Returns:
            Compact JWT string

        Raises:
            TokenSigningError: If the key is missing or signing fails
        """
        if not signing_key:
            raise TokenSigningError("signing key is empty")

        claims = self.claims_for(subject)
        try:
            return jwt.encode(claims.to_payload(), signing_key, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            logger.error("Token signing failed: %s", type(e).__name__)
            raise TokenSigningError("token signing failed") from e

    def verify(self, token: str, key: str) -> Claims:
        """
        Fully validate a token against key.

        A token is expired from the exact second of its exp claim onward.

        Raises:
            MalformedToken: Token cannot be decoded
            SignatureInvalid: Signature or algorithm does not match
            ExpiredToken: exp has been reached
            InvalidToken: Wrong issuer or missing claim
        """
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[ALGORITHM],
                issuer=self._issuer,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise SignatureInvalid(str(e)) from e
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken(str(e)) from e
        except jwt.DecodeError as e:
            raise MalformedToken(str(e)) from e
        except jwt.PyJWTError as e:
            raise InvalidToken(str(e)) from e

        return Claims.from_payload(payload)

    def peek_subject(self, token: str) -> str:
        """
        Read the sub claim WITHOUT verifying the token.

        The returned value is untrusted. Use it only to find the key for
        a subsequent verify() call.

        Raises:
            MalformedToken: Token cannot be decoded or has no string sub
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            raise MalformedToken(str(e)) from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedToken("token has no subject")
        return subject
