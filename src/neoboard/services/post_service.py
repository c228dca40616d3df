"""Post queries and mutations, including the thread and board counters they drive."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from neoboard.core.errors import Forbidden, NotFound
from neoboard.db.session import atomic
from neoboard.db.time import utcnow
from neoboard.models import Board, Post, Thread, User
from neoboard.schemas.post import PostCreate, PostUpdate
from neoboard.services.counters import adjust_counters
from neoboard.services.permissions import assert_owner
from neoboard.services.thread_service import get_active_thread

logger = logging.getLogger(__name__)


def list_posts(db: Session, thread_id: int, *, page: int = 1, limit: int = 50) -> list[Post]:
    """Return one page of a thread's active posts, oldest first.

    Raises:
        NotFound: If the thread is missing or inactive.
    """
    get_active_thread(db, thread_id)
    return (
        db.query(Post)
        .filter(Post.thread_id == thread_id, Post.is_active.is_(True))
        .order_by(Post.created_at.asc(), Post.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_active_post(db: Session, post_id: int) -> Post:
    """Return an active post or raise ``NotFound``."""
    post = (
        db.query(Post)
        .filter(Post.id == post_id, Post.is_active.is_(True))
        .first()
    )
    if post is None:
        raise NotFound("Post not found")
    return post


def create_post(db: Session, data: PostCreate, author: User) -> Post:
    """Reply in a thread.

    Raises:
        NotFound: If the thread is missing, or ``reply_to_id`` is not an
            active post of the same thread.
        Forbidden: If the thread is locked.
    """
    thread = get_active_thread(db, data.thread_id)
    if thread.is_locked:
        raise Forbidden("Thread is locked")

    if data.reply_to_id is not None:
        target = (
            db.query(Post.id)
            .filter(
                Post.id == data.reply_to_id,
                Post.thread_id == thread.id,
                Post.is_active.is_(True),
            )
            .first()
        )
        if target is None:
            raise NotFound("Reply target post not found")

    now = utcnow()
    post = Post(
        thread_id=thread.id,
        content=data.content,
        author_id=author.id,
        images=list(data.images),
        reply_to_id=data.reply_to_id,
        is_op=False,
    )
    with atomic(db):
        db.add(post)
        db.flush()
        adjust_counters(db, Thread, thread.id, {"reply_count": 1}, last_reply=now)
        adjust_counters(db, Board, thread.board_id, {"post_count": 1}, last_activity=now)
        adjust_counters(db, User, author.id, {"post_count": 1})

    db.refresh(post)
    logger.info("Post %s added to thread %s by user %s", post.id, thread.id, author.id)
    return post


def update_post(db: Session, post_id: int, data: PostUpdate, caller: User) -> Post:
    """Replace a post's content."""
    post = get_active_post(db, post_id)
    assert_owner(post.author_id, caller, "update this post")
    with atomic(db):
        post.content = data.content
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int, caller: User) -> None:
    """Soft-delete a reply.

    Raises:
        Forbidden: If the caller is not the author, or the post is the
            thread's original post.
    """
    post = get_active_post(db, post_id)
    assert_owner(post.author_id, caller, "delete this post")
    if post.is_op:
        raise Forbidden("Cannot delete original post. Delete the thread instead.")

    thread = db.get(Thread, post.thread_id)
    with atomic(db):
        post.is_active = False
        if thread is not None:
            adjust_counters(db, Thread, thread.id, {"reply_count": -1})
            adjust_counters(db, Board, thread.board_id, {"post_count": -1})
    logger.info("Post %s deleted by user %s", post_id, caller.id)
