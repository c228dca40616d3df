"""User and authentication schemas."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import EmailStr, Field, StringConstraints, field_validator, model_validator

from neoboard.core.validation import (
    ANONYMOUS_DISPLAY_NAME,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)

from .common import ApiModel

Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
    ),
]


class RegisterRequest(ApiModel):
    """Credentials for creating a registered account."""

    username: Username
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(ApiModel):
    """Email and password login."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class UserView(ApiModel):
    """Public view of a user.

    Anonymous users are always shown as "Anonymous" with an empty email,
    whatever their stored generated username is.
    """

    id: int
    username: str
    email: str = ""
    is_anonymous: bool = False
    join_date: datetime
    post_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _mask_anonymous(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        anonymous = bool(data.is_anonymous)
        return {
            "id": data.id,
            "username": ANONYMOUS_DISPLAY_NAME if anonymous else data.username,
            "email": "" if anonymous else (data.email or ""),
            "is_anonymous": anonymous,
            "join_date": data.join_date,
            "post_count": data.post_count,
        }


class AuthorView(UserView):
    """User view embedded in threads and posts; never exposes an email."""

    @field_validator("email")
    @classmethod
    def _hide_email(cls, value: str) -> str:
        return ""


class AuthResponse(ApiModel):
    """Token and user returned by register, login and anonymous login."""

    success: bool = True
    token: str
    user: UserView


class UserEnvelope(ApiModel):
    """Response for the current-user endpoint."""

    success: bool = True
    user: UserView
