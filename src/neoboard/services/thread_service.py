"""Thread queries and mutations, including the board counters they drive."""
from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy import update
from sqlalchemy.orm import Session

from neoboard.core.errors import NotFound
from neoboard.db.session import atomic
from neoboard.db.time import utcnow
from neoboard.models import Board, Post, Thread, User
from neoboard.schemas.thread import ThreadCreate, ThreadUpdate
from neoboard.services.board_service import get_active_board
from neoboard.services.counters import adjust_counters
from neoboard.services.permissions import assert_owner

logger = logging.getLogger(__name__)


class ThreadSort(str, Enum):
    """Orderings accepted by the thread listing."""

    NEWEST = "newest"
    OLDEST = "oldest"
    REPLIES = "replies"
    ACTIVITY = "activity"

    @classmethod
    def parse(cls, value: str | None) -> ThreadSort:
        """Map a query value to a sort mode; unknown values mean ``activity``."""
        try:
            return cls(value)
        except ValueError:
            return cls.ACTIVITY


_ORDERINGS = {
    ThreadSort.NEWEST: (Thread.created_at.desc(), Thread.id.desc()),
    ThreadSort.OLDEST: (Thread.created_at.asc(), Thread.id.asc()),
    ThreadSort.REPLIES: (Thread.reply_count.desc(), Thread.id.desc()),
    ThreadSort.ACTIVITY: (
        Thread.is_sticky.desc(),
        Thread.last_reply.desc(),
        Thread.id.desc(),
    ),
}


def list_threads(
    db: Session,
    board_id: int,
    *,
    sort: ThreadSort = ThreadSort.ACTIVITY,
    page: int = 1,
    limit: int = 20,
) -> list[Thread]:
    """Return one page of a board's active threads.

    Raises:
        NotFound: If the board is missing or inactive.
    """
    get_active_board(db, board_id)
    return (
        db.query(Thread)
        .filter(Thread.board_id == board_id, Thread.is_active.is_(True))
        .order_by(*_ORDERINGS[sort])
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_active_thread(db: Session, thread_id: int) -> Thread:
    """Return an active thread or raise ``NotFound``."""
    thread = (
        db.query(Thread)
        .filter(Thread.id == thread_id, Thread.is_active.is_(True))
        .first()
    )
    if thread is None:
        raise NotFound("Thread not found")
    return thread


def create_thread(db: Session, data: ThreadCreate, author: User) -> Thread:
    """Open a thread together with its original post.

    The thread, the OP post and the board/author counter updates are written
    in a single transaction.
    """
    board = get_active_board(db, data.board_id)
    now = utcnow()

    thread = Thread(
        board_id=board.id,
        title=data.title,
        content=data.content,
        author_id=author.id,
        images=list(data.images),
        tags=list(data.tags),
        last_reply=now,
    )
    with atomic(db):
        db.add(thread)
        db.flush()
        db.add(
            Post(
                thread_id=thread.id,
                content=data.content,
                author_id=author.id,
                images=list(data.images),
                is_op=True,
            )
        )
        db.flush()
        adjust_counters(
            db, Board, board.id, {"thread_count": 1, "post_count": 1}, last_activity=now
        )
        adjust_counters(db, User, author.id, {"post_count": 1})

    db.refresh(thread)
    logger.info("Thread %s opened on board %s by user %s", thread.id, board.id, author.id)
    return thread


def update_thread(db: Session, thread_id: int, data: ThreadUpdate, caller: User) -> Thread:
    """Toggle the sticky and locked flags."""
    thread = get_active_thread(db, thread_id)
    assert_owner(thread.author_id, caller, "update this thread")

    with atomic(db):
        if data.is_sticky is not None:
            thread.is_sticky = data.is_sticky
        if data.is_locked is not None:
            thread.is_locked = data.is_locked
    db.refresh(thread)
    return thread


def delete_thread(db: Session, thread_id: int, caller: User) -> None:
    """Soft-delete a thread and all of its posts.

    The board loses one thread and every post that was still active (the
    replies plus the OP post).
    """
    thread = get_active_thread(db, thread_id)
    assert_owner(thread.author_id, caller, "delete this thread")

    with atomic(db):
        thread.is_active = False
        db.flush()
        result = db.execute(
            update(Post)
            .where(Post.thread_id == thread.id, Post.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        adjust_counters(
            db,
            Board,
            thread.board_id,
            {"thread_count": -1, "post_count": -result.rowcount},
        )
    logger.info("Thread %s deleted with %s posts", thread_id, result.rowcount)
