"""Post schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from neoboard.core.validation import check_image_urls

from .common import ApiModel, RowId
from .thread import Content
from .user import AuthorView


class PostCreate(ApiModel):
    """Payload for replying in a thread."""

    thread_id: RowId
    content: Content
    images: list[str] = Field(default_factory=list)
    reply_to_id: RowId | None = Field(None, alias="replyTo")

    @field_validator("images")
    @classmethod
    def _check_images(cls, value: list[str]) -> list[str]:
        return check_image_urls(value)


class PostUpdate(ApiModel):
    """Edits replace the content only."""

    content: Content


class PostView(ApiModel):
    """Post as returned by the API."""

    id: int
    thread_id: int
    content: str
    author: AuthorView
    created_at: datetime
    reply_to_id: int | None = Field(None, alias="replyTo")
    images: list[str] = Field(default_factory=list)
    is_op: bool = Field(False, alias="isOP")


class PostEnvelope(ApiModel):
    success: bool = True
    post: PostView


class PostListResponse(ApiModel):
    success: bool = True
    posts: list[PostView]
