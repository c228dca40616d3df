"""API endpoint modules."""

from .auth import router as auth_router
from .boards import router as boards_router
from .posts import router as posts_router
from .system import router as system_router
from .threads import router as threads_router

__all__ = [
    "auth_router",
    "boards_router",
    "threads_router",
    "posts_router",
    "system_router",
]
