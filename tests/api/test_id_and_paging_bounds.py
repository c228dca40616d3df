# tests/api/test_id_and_paging_bounds.py
"""Ids and page numbers outside the database's integer range are rejected cleanly."""

import pytest
from fastapi import status

TOO_BIG = str(2**63)
HUGE = "99999999999999999999"


@pytest.mark.parametrize(
    "path",
    [
        f"/api/boards/{HUGE}",
        f"/api/threads/{HUGE}",
        f"/api/threads/board/{HUGE}",
        f"/api/posts/thread/{HUGE}",
        f"/api/boards/{TOO_BIG}",
        "/api/boards/0",
        "/api/threads/-1",
    ],
)
def test_out_of_range_path_ids_are_bad_requests(client, path):
    response = client.get(path)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_largest_id_is_simply_missing(client):
    response = client.get(f"/api/boards/{2**63 - 1}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Board not found"}


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("put", f"/api/threads/{HUGE}"),
        ("delete", f"/api/threads/{HUGE}"),
        ("put", f"/api/posts/{HUGE}"),
        ("delete", f"/api/posts/{HUGE}"),
        ("put", f"/api/boards/{HUGE}"),
        ("delete", f"/api/boards/{HUGE}"),
    ],
)
def test_out_of_range_ids_on_writes(client, auth_headers, method, path):
    kwargs = {"headers": auth_headers}
    if method == "put":
        kwargs["json"] = {"content": "x"}
    response = getattr(client, method)(path, **kwargs)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_out_of_range_body_ids(client, auth_headers, create_thread):
    thread = create_thread()
    for payload, url in (
        ({"boardId": int(HUGE), "title": "t", "content": "c"}, "/api/threads"),
        ({"threadId": int(HUGE), "content": "c"}, "/api/posts"),
        ({"threadId": thread["id"], "content": "c", "replyTo": int(HUGE)}, "/api/posts"),
    ):
        response = client.post(url, json=payload, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST, payload


@pytest.mark.parametrize("page", ["100000000000000000", "1000001"])
def test_page_beyond_limit_is_rejected(client, board, create_thread, page):
    thread = create_thread()
    for url in (f"/api/threads/board/{board.id}", f"/api/posts/thread/{thread['id']}"):
        response = client.get(url, params={"page": page, "limit": 100})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_last_allowed_page_is_empty(client, board, create_thread):
    create_thread()
    response = client.get(
        f"/api/threads/board/{board.id}", params={"page": 1_000_000, "limit": 100}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["threads"] == []
