"""Password hashing helpers built on Argon2."""
from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# One hasher instance is safe to share across requests.
pwd_hasher = PasswordHasher()


def hash_password(plain_password: str) -> str:
    """Return an Argon2 hash of ``plain_password``."""
    return pwd_hasher.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a plaintext password against a stored hash.

    Args:
        plain_password: Password submitted by the client.
        hashed_password: Stored Argon2 hash; ``None`` for anonymous users.

    Returns:
        True if the password matches; False on mismatch, a missing hash or a
        malformed hash.
    """
    if not hashed_password:
        return False
    try:
        return pwd_hasher.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False
