"""Per-account verification secret generation."""

import secrets

SECRET_BYTES = 32


def generate_verification_secret() -> str:
    """
    Generate a fresh verification signing secret.

    32 bytes from the OS CSPRNG, hex encoded with two digits per byte,
    so the result is always 64 lowercase characters.
    """
    return secrets.token_bytes(SECRET_BYTES).hex()
