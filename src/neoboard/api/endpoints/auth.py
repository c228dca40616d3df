"""Authentication endpoints for the NeoBoard API."""

from __future__ import annotations

from fastapi import APIRouter, status

from neoboard.api.dependencies import CurrentUserDep, SessionDep
from neoboard.schemas.common import MessageResponse
from neoboard.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserEnvelope,
    UserView,
)
from neoboard.services import auth_service
from neoboard.services.auth_service import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(session: AuthSession) -> AuthResponse:
    return AuthResponse(token=session.token, user=UserView.model_validate(session.user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Create a registered account and return a bearer token.

    Args:
        payload: Username, email and password.
        db: Database session.

    Returns:
        The token and the new user's public view.
    """
    return _auth_response(auth_service.register(db, payload))


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    return _auth_response(auth_service.login(db, payload))


@router.post("/anonymous", response_model=AuthResponse)
async def anonymous_login(db: SessionDep) -> AuthResponse:
    """Create an anonymous identity and return a bearer token for it."""
    return _auth_response(auth_service.anonymous_login(db))


@router.get("/me", response_model=UserEnvelope)
async def current_user(user: CurrentUserDep) -> UserEnvelope:
    """Return the authenticated user."""
    return UserEnvelope(user=UserView.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Record the logout; the client discards its token."""
    auth_service.logout(db, user)
    return MessageResponse(message="Logged out successfully")
