"""Thread schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from neoboard.core.validation import (
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    check_image_urls,
    clean_tags,
)

from .common import ApiModel, RowId
from .user import AuthorView

Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)
]
Content = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=CONTENT_MAX_LENGTH)
]


class ThreadCreate(ApiModel):
    """Payload for opening a thread; the content also becomes the first post."""

    board_id: RowId
    title: Title
    content: Content
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def _check_images(cls, value: list[str]) -> list[str]:
        return check_image_urls(value)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)


class ThreadUpdate(ApiModel):
    """Partial update of the thread flags."""

    is_sticky: bool | None = None
    is_locked: bool | None = None


class ThreadView(ApiModel):
    """Thread as returned by the API."""

    id: int
    board_id: int
    title: str
    content: str
    author: AuthorView
    created_at: datetime
    last_reply: datetime
    reply_count: int = 0
    is_sticky: bool = False
    is_locked: bool = False
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ThreadEnvelope(ApiModel):
    success: bool = True
    thread: ThreadView


class ThreadListResponse(ApiModel):
    success: bool = True
    threads: list[ThreadView]
