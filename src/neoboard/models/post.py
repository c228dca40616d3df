"""SQLAlchemy model for posts within threads."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from neoboard.db.session import Base
from neoboard.db.time import utcnow
from neoboard.models.user import User


class Post(Base):
    """A message in a thread.

    Exactly one post per thread has ``is_op`` set; it is created together
    with the thread and is only deactivated when the thread is deleted.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_thread_created", "thread_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    thread_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("threads.id"), nullable=False, index=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # Always a post of the same thread.
    reply_to_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=True, index=True
    )
    is_op: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author: Mapped[User] = relationship(lazy="joined")
