"""Shared API dependencies for authentication and database access."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Path, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from neoboard.core.errors import Unauthorized
from neoboard.core.security import decode_access_token
from neoboard.core.validation import MAX_PAGE_NUMBER, MAX_ROW_ID
from neoboard.db.session import get_db
from neoboard.models import User
from neoboard.services.auth_service import get_active_user

# Missing headers are reported through AuthContext instead of a 403.
bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]

# Out-of-range values are rejected with 400 before they reach the database.
RowIdPath = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
PageQuery = Annotated[int, Query(ge=1, le=MAX_PAGE_NUMBER)]

NO_TOKEN = "Access denied. No token provided."
INVALID_TOKEN = "Invalid token"
UNKNOWN_USER = "Invalid token or user not found"


@dataclass(frozen=True)
class AuthContext:
    """Outcome of authenticating a request.

    Exactly one of ``user`` and ``failure`` is set. Routes that allow
    anonymous browsing use the context as-is; routes that need a caller use
    :meth:`require`.
    """

    user: User | None = None
    failure: str | None = NO_TOKEN

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require(self) -> User:
        """Return the authenticated user or raise ``Unauthorized``."""
        if self.user is None:
            raise Unauthorized(self.failure or NO_TOKEN)
        return self.user


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> AuthContext:
    """Authenticate the bearer token, if any, without ever rejecting the request.

    Args:
        credentials: Parsed ``Authorization: Bearer`` header, if present.
        db: Database session.

    Returns:
        Context holding the active user, or the reason authentication failed.
    """
    if credentials is None or not credentials.credentials:
        return AuthContext(failure=NO_TOKEN)

    try:
        user_id = decode_access_token(credentials.credentials)
    except Unauthorized:
        return AuthContext(failure=INVALID_TOKEN)

    user = get_active_user(db, user_id)
    if user is None:
        return AuthContext(failure=UNKNOWN_USER)
    return AuthContext(user=user, failure=None)


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]


def get_current_user(context: AuthContextDep) -> User:
    """Return the authenticated user.

    Raises:
        Unauthorized: If the token is missing, invalid or expired, or its
            user no longer exists.
    """
    return context.require()


CurrentUserDep = Annotated[User, Depends(get_current_user)]
