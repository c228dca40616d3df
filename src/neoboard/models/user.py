"""SQLAlchemy model for registered and anonymous users."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from neoboard.db.session import Base
from neoboard.db.time import utcnow


class User(Base):
    """A forum identity.

    Registered users have an email and a password hash; anonymous users have
    neither and are always presented as "Anonymous". Users are never
    hard-deleted.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "is_anonymous OR (email IS NOT NULL AND password_hash IS NOT NULL)",
            name="ck_users_credentials",
        ),
        CheckConstraint("post_count >= 0", name="ck_users_post_count"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    # Unique among registered users; NULL for anonymous ones.
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def touch(self) -> None:
        """Record activity by bumping ``last_seen``."""
        self.last_seen = utcnow()
