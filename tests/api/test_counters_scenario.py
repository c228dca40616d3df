# tests/api/test_counters_scenario.py
"""End-to-end walk through a board's life, checking every counter on the way."""

from fastapi import status

from neoboard.models import Board, Thread, User


def _reload(db_session, model, row_id):
    row = db_session.get(model, row_id)
    db_session.refresh(row)
    return row


def test_board_lifecycle_keeps_counters_consistent(
    client, db_session, test_user, other_user, auth_headers, other_auth_headers
):
    response = client.post(
        "/api/boards",
        json={"name": "/tech/", "description": "Technology", "category": "Technology"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    board = response.json()["board"]
    assert board["threadCount"] == 0
    assert board["postCount"] == 0

    response = client.post(
        "/api/threads",
        json={"boardId": board["id"], "title": "Hello", "content": "First!"},
        headers=auth_headers,
    )
    thread = response.json()["thread"]

    stored_board = _reload(db_session, Board, board["id"])
    assert (stored_board.thread_count, stored_board.post_count) == (1, 1)

    reply = client.post(
        "/api/posts",
        json={"threadId": thread["id"], "content": "Hi"},
        headers=other_auth_headers,
    ).json()["post"]

    stored_board = _reload(db_session, Board, board["id"])
    stored_thread = _reload(db_session, Thread, thread["id"])
    assert stored_board.post_count == 2
    assert stored_thread.reply_count == 1
    assert _reload(db_session, User, other_user.id).post_count == 1

    listed = client.get("/api/boards").json()["boards"]
    assert listed[0]["threadCount"] == 1
    assert listed[0]["postCount"] == 2

    response = client.delete(f"/api/posts/{reply['id']}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_200_OK
    stored_board = _reload(db_session, Board, board["id"])
    stored_thread = _reload(db_session, Thread, thread["id"])
    assert stored_board.post_count == 1
    assert stored_thread.reply_count == 0

    response = client.delete(f"/api/threads/{thread['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    stored_board = _reload(db_session, Board, board["id"])
    assert (stored_board.thread_count, stored_board.post_count) == (0, 0)

    # Authors keep their historical post counts.
    assert _reload(db_session, User, test_user.id).post_count == 1
    assert _reload(db_session, User, other_user.id).post_count == 1
