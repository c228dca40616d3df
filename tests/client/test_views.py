# tests/client/test_views.py
"""Tests for terminal rendering helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from neoboard.core.validation import BoardCategory
from neoboard.schemas.board import BoardView
from neoboard.schemas.post import PostView
from neoboard.schemas.thread import ThreadView
from neoboard.schemas.user import AuthorView, UserView
from neoboard.views import (
    author_label,
    format_number,
    format_time_ago,
    render_board,
    render_post,
    render_thread,
    render_user,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(minutes=59), "59m ago"),
        (timedelta(hours=3), "3h ago"),
        (timedelta(days=2, hours=5), "2d ago"),
    ],
)
def test_format_time_ago(delta, expected):
    assert format_time_ago(NOW - delta, NOW) == expected


def test_format_time_ago_treats_naive_as_utc():
    naive = (NOW - timedelta(hours=1)).replace(tzinfo=None)
    assert format_time_ago(naive, NOW) == "1h ago"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, "0"), (999, "999"), (1_000, "1.0K"), (1_234, "1.2K"), (3_400_000, "3.4M")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def _author(**overrides):
    data = {"id": 1, "username": "alice", "joinDate": NOW, "postCount": 3}
    data.update(overrides)
    return AuthorView.model_validate(data)


def test_author_label_masks_anonymous():
    assert author_label(_author()) == "alice"
    assert author_label(_author(username="Anonymous_1_abc", isAnonymous=True)) == "Anonymous"


def test_render_board():
    board = BoardView.model_validate(
        {
            "id": 4,
            "name": "/tech/",
            "description": "Technology",
            "category": BoardCategory.TECHNOLOGY,
            "threadCount": 12,
            "postCount": 1500,
            "lastActivity": NOW - timedelta(minutes=5),
            "isNSFW": True,
        }
    )
    text = render_board(board, NOW)
    assert text.splitlines()[0] == "#4 /tech/ [NSFW] (Technology)"
    assert "12 threads · 1.5K posts · active 5m ago" in text


def test_render_thread_markers_and_body():
    thread = ThreadView.model_validate(
        {
            "id": 9,
            "boardId": 4,
            "title": "Welcome",
            "content": "Hello there",
            "author": _author(),
            "createdAt": NOW - timedelta(hours=2),
            "lastReply": NOW - timedelta(minutes=1),
            "replyCount": 2,
            "isSticky": True,
            "isLocked": True,
            "tags": ["intro"],
        }
    )
    summary = render_thread(thread, NOW)
    assert summary.splitlines()[0] == "#9 [sticky] [locked] Welcome"
    assert "by alice · 2h ago · 2 replies · last reply 1m ago" in summary
    assert "#intro" in summary
    assert "Hello there" not in summary
    assert "Hello there" in render_thread(thread, NOW, full=True)


def test_render_post_reply_marker():
    post = PostView.model_validate(
        {
            "id": 12,
            "threadId": 9,
            "content": "Agreed",
            "author": _author(),
            "createdAt": NOW,
            "replyTo": 10,
            "images": ["https://img.example.com/a.png"],
        }
    )
    text = render_post(post, NOW)
    assert text.splitlines()[0] == "#12 alice · just now ↳ >>10"
    assert "[image] https://img.example.com/a.png" in text


def test_render_op_post():
    post = PostView.model_validate(
        {"id": 1, "threadId": 1, "content": "x", "author": _author(), "createdAt": NOW,
         "isOP": True}
    )
    assert "[OP]" in render_post(post, NOW)


def test_render_user():
    user = UserView.model_validate(
        {"id": 2, "username": "bob", "email": "bob@example.com", "joinDate": NOW}
    )
    assert render_user(user) == "bob (#2, bob@example.com) · 0 posts"
