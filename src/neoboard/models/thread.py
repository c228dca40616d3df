"""SQLAlchemy model for discussion threads."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from neoboard.db.session import Base
from neoboard.db.time import utcnow
from neoboard.models.user import User


class Thread(Base):
    """A titled discussion inside a board.

    The opening text is stored twice: here as ``content`` and as the thread's
    original post so the thread reads as one uniform list of posts.
    """

    __tablename__ = "threads"
    __table_args__ = (
        CheckConstraint("reply_count >= 0", name="ck_threads_reply_count"),
        Index("ix_threads_board_sticky_last_reply", "board_id", "is_sticky", "last_reply"),
        Index("ix_threads_board_created", "board_id", "created_at"),
        Index("ix_threads_board_last_reply", "board_id", "last_reply"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    board_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("boards.id"), nullable=False, index=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_sticky: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_reply: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author: Mapped[User] = relationship(lazy="joined")
