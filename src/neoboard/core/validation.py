"""Field rules shared by the ORM models, request schemas and the mock forum."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

ANONYMOUS_DISPLAY_NAME = "Anonymous"

BOARD_NAME_MIN_LENGTH = 4
BOARD_NAME_MAX_LENGTH = 20
BOARD_DESCRIPTION_MAX_LENGTH = 200

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000
TAG_MAX_LENGTH = 20

# Row ids and OFFSET values must fit a signed 64-bit column.
MAX_ROW_ID = 2**63 - 1
MAX_PAGE_NUMBER = 1_000_000

BOARD_NAME_PATTERN = re.compile(r"^/[a-zA-Z0-9_-]+/$")
IMAGE_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)


class BoardCategory(str, Enum):
    """Fixed set of board categories."""

    TECHNOLOGY = "Technology"
    ENTERTAINMENT = "Entertainment"
    CREATIVE = "Creative"
    GENERAL = "General"


def normalize_board_name(name: str) -> str:
    """Trim, validate and lower-case a board name such as ``/tech/``.

    Raises:
        ValueError: If the name is not of the form ``/name/`` or its length is
            outside 4-20 characters.
    """
    name = name.strip()
    if not BOARD_NAME_MIN_LENGTH <= len(name) <= BOARD_NAME_MAX_LENGTH:
        raise ValueError(
            f"Board name must be {BOARD_NAME_MIN_LENGTH}-{BOARD_NAME_MAX_LENGTH} characters"
        )
    if not BOARD_NAME_PATTERN.match(name):
        raise ValueError("Board name must be in format /boardname/")
    return name.lower()


def check_image_urls(urls: Iterable[str]) -> list[str]:
    """Return the URLs as a list, rejecting anything that is not an image link."""
    checked = []
    for url in urls:
        if not IMAGE_URL_PATTERN.match(url):
            raise ValueError(f"Invalid image URL format: {url}")
        checked.append(url)
    return checked


def clean_tags(tags: Iterable[str]) -> list[str]:
    """Trim tags, drop empty ones and enforce the per-tag length limit."""
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > TAG_MAX_LENGTH:
            raise ValueError(f"Tags must be at most {TAG_MAX_LENGTH} characters")
        cleaned.append(tag)
    return cleaned
