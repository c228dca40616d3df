"""Registration, login and anonymous identities."""
from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from neoboard.core.errors import Conflict, Unauthorized
from neoboard.core.passwords import hash_password, verify_password
from neoboard.core.security import create_access_token
from neoboard.db.session import atomic
from neoboard.models import User
from neoboard.schemas.user import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

__all__ = [
    "AuthSession",
    "register",
    "login",
    "anonymous_login",
    "get_active_user",
    "logout",
]


@dataclass(frozen=True)
class AuthSession:
    """A user together with a freshly issued bearer token."""

    user: User
    token: str


def _issue(user: User) -> AuthSession:
    return AuthSession(user=user, token=create_access_token(user.id))


def _raise_duplicate(db: Session, username: str, email: str) -> None:
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise Conflict("Email already registered")
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise Conflict("Username already taken")


def register(db: Session, data: RegisterRequest) -> AuthSession:
    """Create a registered user and sign them in.

    Raises:
        Conflict: If the email or the username is already in use.
    """
    email = str(data.email)
    _raise_duplicate(db, data.username, email)

    user = User(
        username=data.username,
        email=email,
        password_hash=hash_password(data.password),
        is_anonymous=False,
    )
    try:
        with atomic(db):
            db.add(user)
    except IntegrityError as err:
        # Lost a race against a concurrent registration.
        _raise_duplicate(db, data.username, email)
        raise Conflict() from err

    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return _issue(user)


def login(db: Session, data: LoginRequest) -> AuthSession:
    """Verify credentials and return a new token.

    Raises:
        Unauthorized: If no active user has that email or the password does
            not match.
    """
    user = (
        db.query(User)
        .filter(User.email == data.email, User.is_active.is_(True))
        .first()
    )
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Failed login for %s", data.email)
        raise Unauthorized("Invalid credentials")

    with atomic(db):
        user.touch()
    db.refresh(user)
    return _issue(user)


def _anonymous_username() -> str:
    # Millisecond timestamp plus a random suffix keeps concurrent logins unique.
    return f"Anonymous_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


def anonymous_login(db: Session) -> AuthSession:
    """Create a throwaway anonymous identity and sign it in."""
    user = User(username=_anonymous_username(), is_anonymous=True)
    with atomic(db):
        db.add(user)
    db.refresh(user)
    logger.info("Created anonymous user id=%s", user.id)
    return _issue(user)


def get_active_user(db: Session, user_id: int) -> User | None:
    """Return the active user with ``user_id``, or ``None``."""
    return (
        db.query(User)
        .filter(User.id == user_id, User.is_active.is_(True))
        .first()
    )


def logout(db: Session, user: User) -> None:
    """Record the user's last activity; tokens are discarded client-side."""
    with atomic(db):
        user.touch()
