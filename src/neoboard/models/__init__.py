"""SQLAlchemy models for the NeoBoard forum."""

from neoboard.core.validation import BoardCategory

from .board import Board
from .post import Post
from .thread import Thread
from .user import User

__all__ = [
    "Board", "BoardCategory",
    "Post",
    "Thread",
    "User",
]
