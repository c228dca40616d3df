"""SQLAlchemy model for topic boards."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from neoboard.core.validation import BoardCategory
from neoboard.db.session import Base
from neoboard.db.time import utcnow
from neoboard.models.user import User


class Board(Base):
    """A named topic area such as ``/tech/`` that contains threads."""

    __tablename__ = "boards"
    __table_args__ = (
        CheckConstraint("thread_count >= 0", name="ck_boards_thread_count"),
        CheckConstraint("post_count >= 0", name="ck_boards_post_count"),
        # Names only need to be unique among active boards.
        Index(
            "uq_boards_active_name",
            "name",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Stored lower-cased so uniqueness is case-insensitive.
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[BoardCategory] = mapped_column(
        Enum(BoardCategory, native_enum=False, length=20,
             values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BoardCategory.GENERAL,
    )
    is_nsfw: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    thread_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    created_by: Mapped[User] = relationship(lazy="joined")
