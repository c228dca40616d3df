"""Bearer token issuing and verification."""
from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt

from neoboard.core.errors import Unauthorized
from neoboard.core.settings import settings
from neoboard.db.time import utcnow


def create_access_token(subject: int | str) -> str:
    """Create a signed, time-limited JWT whose subject is the user id."""
    now = utcnow()
    to_encode: dict[str, object] = {
        "sub": str(subject),
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> int:
    """Verify ``token`` and return the user id it was issued for.

    Raises:
        Unauthorized: If the token is malformed, expired, signed with another
            key or carries no usable subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise Unauthorized("Invalid token") from err

    subject = payload.get("sub")
    if subject is None:
        raise Unauthorized("Invalid token")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise Unauthorized("Invalid token") from err
