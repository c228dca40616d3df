# tests/client/test_forum_client.py
"""Tests for the async API client against the real application."""

import httpx
import pytest

from neoboard.client import ApiError, ForumClient, MemoryTokenStore


@pytest.fixture()
async def api(app):
    transport = httpx.ASGITransport(app=app)
    http = httpx.AsyncClient(transport=transport, base_url="http://test/api")
    async with ForumClient(http, MemoryTokenStore()) as client:
        yield client


async def test_register_stores_token(api):
    result = await api.auth.register("carol", "carol@example.com", "s3cret!")
    assert result.user.username == "carol"
    assert api.tokens.load() == result.token

    me = await api.auth.current_user()
    assert me.id == result.user.id
    assert me.email == "carol@example.com"


async def test_full_flow(api):
    await api.auth.register("dave", "dave@example.com", "s3cret!")
    board = await api.boards.create("/py/", "Python talk", category="Technology")
    assert board.category.value == "Technology"

    thread = await api.threads.create(
        board.id, "Asyncio tips", "Share them", tags=["python"],
        images=["https://img.example.com/snake.png"],
    )
    op, = await api.posts.list_by_thread(thread.id)
    assert op.is_op is True

    reply = await api.posts.create(thread.id, "Use TaskGroup", reply_to=op.id)
    assert reply.reply_to_id == op.id

    edited = await api.posts.update(reply.id, "Use asyncio.TaskGroup")
    assert edited.content == "Use asyncio.TaskGroup"

    locked = await api.threads.update(thread.id, is_locked=True)
    assert locked.is_locked is True
    assert locked.reply_count == 1

    threads = await api.threads.list_by_board(board.id, sort="newest", page=1, limit=5)
    assert [t.id for t in threads] == [thread.id]

    updated = await api.boards.update(board.id, description="All things Python")
    assert updated.description == "All things Python"
    assert updated.thread_count == 1
    assert updated.post_count == 2

    assert await api.threads.delete(thread.id) == "Thread deleted successfully"
    assert await api.boards.delete(board.id) == "Board deleted successfully"


async def test_errors_carry_server_message(api):
    with pytest.raises(ApiError) as exc_info:
        await api.boards.get(424242)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Board not found"


async def test_anonymous_login_and_logout(api):
    result = await api.auth.login_anonymous()
    assert result.user.is_anonymous is True
    assert result.user.username == "Anonymous"

    await api.auth.logout()
    assert api.tokens.load() is None
    with pytest.raises(ApiError) as exc_info:
        await api.auth.current_user()
    assert exc_info.value.status_code == 401


async def test_network_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(base_url="http://test/api", transport=httpx.MockTransport(refuse))
    async with ForumClient(http) as client:
        with pytest.raises(ApiError, match="Network error: connection refused") as exc_info:
            await client.boards.list()
    assert exc_info.value.status_code is None


async def test_error_without_json_body():
    http = httpx.AsyncClient(
        base_url="http://test/api",
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway")),
    )
    async with ForumClient(http) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.boards.list()
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Network error"
