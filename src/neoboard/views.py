"""Plain-text rendering of boards, threads and posts for the terminal."""

from __future__ import annotations

import textwrap
from datetime import UTC, datetime

from neoboard.core.validation import ANONYMOUS_DISPLAY_NAME
from neoboard.schemas.board import BoardView
from neoboard.schemas.post import PostView
from neoboard.schemas.thread import ThreadView
from neoboard.schemas.user import UserView

WRAP_WIDTH = 78


def format_time_ago(moment: datetime, now: datetime | None = None) -> str:
    """Describe ``moment`` relative to ``now``: "just now", "5m ago", "3h ago", "2d ago"."""
    now = now or datetime.now(UTC)
    # Naive timestamps (e.g. from SQLite) are UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    minutes = int((now - moment).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_number(value: int) -> str:
    """Abbreviate large counts: 999, 1.2K, 3.4M."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def author_label(user: UserView) -> str:
    return ANONYMOUS_DISPLAY_NAME if user.is_anonymous else user.username


def _wrap(text: str, indent: str = "  ") -> str:
    paragraphs = text.splitlines() or [""]
    return "\n".join(
        textwrap.fill(p, WRAP_WIDTH, initial_indent=indent, subsequent_indent=indent) or indent
        for p in paragraphs
    )


def render_board(board: BoardView, now: datetime | None = None) -> str:
    nsfw = " [NSFW]" if board.is_nsfw else ""
    return "\n".join(
        [
            f"#{board.id} {board.name}{nsfw} ({board.category.value})",
            f"  {board.description}",
            f"  {format_number(board.thread_count)} threads · "
            f"{format_number(board.post_count)} posts · "
            f"active {format_time_ago(board.last_activity, now)}",
        ]
    )


def render_thread(thread: ThreadView, now: datetime | None = None, *, full: bool = False) -> str:
    """Render a thread summary line, plus its body when ``full`` is set."""
    markers = ""
    if thread.is_sticky:
        markers += "[sticky] "
    if thread.is_locked:
        markers += "[locked] "
    lines = [
        f"#{thread.id} {markers}{thread.title}",
        f"  by {author_label(thread.author)} · {format_time_ago(thread.created_at, now)} · "
        f"{format_number(thread.reply_count)} replies · "
        f"last reply {format_time_ago(thread.last_reply, now)}",
    ]
    if thread.tags:
        lines.append("  tags: " + " ".join(f"#{tag}" for tag in thread.tags))
    if thread.images:
        lines.append(f"  images: {len(thread.images)}")
    if full:
        lines.append(_wrap(thread.content))
    return "\n".join(lines)


def render_post(post: PostView, now: datetime | None = None) -> str:
    header = f"#{post.id} {author_label(post.author)} · {format_time_ago(post.created_at, now)}"
    if post.is_op:
        header += " [OP]"
    if post.reply_to_id is not None:
        header += f" ↳ >>{post.reply_to_id}"
    lines = [header, _wrap(post.content)]
    for url in post.images:
        lines.append(f"  [image] {url}")
    return "\n".join(lines)


def render_user(user: UserView) -> str:
    kind = "anonymous" if user.is_anonymous else user.email
    return f"{author_label(user)} (#{user.id}, {kind}) · {format_number(user.post_count)} posts"
