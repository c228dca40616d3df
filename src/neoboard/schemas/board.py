"""Board schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from neoboard.core.validation import (
    BOARD_DESCRIPTION_MAX_LENGTH,
    BoardCategory,
    normalize_board_name,
)

from .common import ApiModel

Description = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=1, max_length=BOARD_DESCRIPTION_MAX_LENGTH
    ),
]


class BoardCreate(ApiModel):
    """Payload for creating a board."""

    name: str
    description: Description
    category: BoardCategory = BoardCategory.GENERAL
    is_nsfw: bool = Field(False, alias="isNSFW")

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return normalize_board_name(value)


class BoardUpdate(ApiModel):
    """Partial update; only these fields of a board are mutable."""

    description: Description | None = None
    category: BoardCategory | None = None
    is_nsfw: bool | None = Field(None, alias="isNSFW")


class BoardView(ApiModel):
    """Board as returned by the API."""

    id: int
    name: str
    description: str
    category: BoardCategory
    thread_count: int = 0
    post_count: int = 0
    last_activity: datetime
    is_nsfw: bool = Field(False, alias="isNSFW")


class BoardEnvelope(ApiModel):
    success: bool = True
    board: BoardView


class BoardListResponse(ApiModel):
    success: bool = True
    boards: list[BoardView]
