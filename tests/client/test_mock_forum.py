# tests/client/test_mock_forum.py
"""Tests for the in-memory forum used when no API URL is configured."""

import httpx
import pytest

from neoboard.client import (
    ApiError,
    ClientSettings,
    ForumClient,
    MemoryTokenStore,
    MockForum,
    MockStore,
    create_client,
)
from neoboard.client.mock import MOCK_BASE_URL


@pytest.fixture()
def store():
    return MockStore.seeded()


@pytest.fixture()
async def forum_client(store):
    client = create_client(
        store=store, config=ClientSettings(api_url=None), tokens=MemoryTokenStore()
    )
    async with client:
        yield client


async def _login(client):
    return await client.auth.login("demo@example.com", "password")


class TestSeededStore:
    def test_counters_match_contents(self, store):
        for board in store.boards.values():
            threads = [t for t in store.threads.values() if t.board_id == board.id]
            posts = [p for p in store.posts.values()
                     if any(p.thread_id == t.id for t in threads)]
            assert board.thread_count == len(threads)
            assert board.post_count == len(posts)
        for thread in store.threads.values():
            replies = [p for p in store.posts.values()
                       if p.thread_id == thread.id and not p.is_op]
            assert thread.reply_count == len(replies)

    def test_every_thread_has_one_op(self, store):
        for thread in store.threads.values():
            ops = [p for p in store.posts.values() if p.thread_id == thread.id and p.is_op]
            assert len(ops) == 1
            assert ops[0].content == thread.content


class TestMockReads:
    async def test_boards_most_recently_active_first(self, forum_client):
        boards = await forum_client.boards.list()
        assert [b.name for b in boards] == ["/random/", "/tech/", "/gaming/", "/art/"]

    async def test_sticky_thread_listed_first(self, forum_client):
        tech = next(b for b in await forum_client.boards.list() if b.name == "/tech/")
        threads = await forum_client.threads.list_by_board(tech.id)
        assert threads[0].is_sticky is True
        assert threads[0].title == "Welcome to the Tech Board!"

    async def test_posts_start_with_op(self, forum_client):
        tech = next(b for b in await forum_client.boards.list() if b.name == "/tech/")
        welcome = (await forum_client.threads.list_by_board(tech.id))[0]
        posts = await forum_client.posts.list_by_thread(welcome.id)
        assert posts[0].is_op is True
        assert len(posts) == welcome.reply_count + 1
        assert any(p.reply_to_id == posts[1].id for p in posts)

    async def test_anonymous_authors_are_masked(self, forum_client):
        tech = next(b for b in await forum_client.boards.list() if b.name == "/tech/")
        welcome = (await forum_client.threads.list_by_board(tech.id))[0]
        posts = await forum_client.posts.list_by_thread(welcome.id)
        anonymous = [p.author for p in posts if p.author.is_anonymous]
        assert anonymous
        assert all(a.username == "Anonymous" and a.email == "" for a in anonymous)

    async def test_missing_thread(self, forum_client):
        with pytest.raises(ApiError) as exc_info:
            await forum_client.threads.get(9999)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Thread not found"

    async def test_out_of_range_ids_and_pages(self, forum_client):
        with pytest.raises(ApiError) as exc_info:
            await forum_client.boards.get(2**63)
        assert exc_info.value.status_code == 400
        with pytest.raises(ApiError) as exc_info:
            await forum_client.threads.list_by_board(1, page=10**17)
        assert exc_info.value.status_code == 400

    async def test_health(self, forum_client):
        data = await forum_client.request("GET", "/health")
        assert data["status"] == "OK"
        assert data["database"]["stats"]["boards"] == 4

    async def test_unknown_route(self, forum_client):
        with pytest.raises(ApiError, match="Route not found: /api/nope"):
            await forum_client.request("GET", "/nope")


class TestMockWrites:
    async def test_requires_login(self, forum_client):
        with pytest.raises(ApiError) as exc_info:
            await forum_client.threads.create(1, "t", "c")
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Access denied. No token provided."

    async def test_login_and_logout(self, forum_client):
        result = await _login(forum_client)
        assert result.user.username == "DemoUser"
        assert forum_client.tokens.load() == result.token
        assert (await forum_client.auth.current_user()).email == "demo@example.com"

        await forum_client.auth.logout()
        assert forum_client.tokens.load() is None

    async def test_wrong_password(self, forum_client):
        with pytest.raises(ApiError, match="Invalid credentials"):
            await forum_client.auth.login("demo@example.com", "wrong")

    async def test_thread_and_reply_counters(self, forum_client, store):
        await _login(forum_client)
        board = await forum_client.boards.create("/Mock/", "Mock board")
        assert board.name == "/mock/"

        thread = await forum_client.threads.create(board.id, "Hi", "Body", tags=["a"])
        reply = await forum_client.posts.create(thread.id, "Reply")
        stored = store.boards[board.id]
        assert (stored.thread_count, stored.post_count) == (1, 2)
        assert store.threads[thread.id].reply_count == 1

        assert await forum_client.posts.delete(reply.id) == "Post deleted successfully"
        assert (stored.thread_count, stored.post_count) == (1, 1)

        assert await forum_client.threads.delete(thread.id) == "Thread deleted successfully"
        assert (stored.thread_count, stored.post_count) == (0, 0)

    async def test_duplicate_board_name(self, forum_client):
        await _login(forum_client)
        with pytest.raises(ApiError) as exc_info:
            await forum_client.boards.create("/tech/", "Again")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "A board with this name already exists"

    async def test_locked_thread_and_ownership(self, forum_client):
        await _login(forum_client)
        board = await forum_client.boards.create("/locks/", "Locks")
        thread = await forum_client.threads.create(board.id, "Hi", "Body")
        await forum_client.threads.update(thread.id, is_locked=True)
        with pytest.raises(ApiError, match="Thread is locked"):
            await forum_client.posts.create(thread.id, "late")

        await forum_client.auth.login_anonymous()
        with pytest.raises(ApiError) as exc_info:
            await forum_client.threads.delete(thread.id)
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Not authorized to delete this thread"

    async def test_op_cannot_be_deleted(self, forum_client):
        await _login(forum_client)
        board = await forum_client.boards.create("/ops/", "OPs")
        thread = await forum_client.threads.create(board.id, "Hi", "Body")
        op = (await forum_client.posts.list_by_thread(thread.id))[0]
        with pytest.raises(ApiError) as exc_info:
            await forum_client.posts.delete(op.id)
        assert exc_info.value.status_code == 403

    async def test_validation_errors(self, forum_client):
        await _login(forum_client)
        with pytest.raises(ApiError, match="Board name must be in format /boardname/"):
            await forum_client.boards.create("tech", "No slashes")


async def test_stores_are_independent():
    first = MockForum(MockStore.seeded())
    second = MockForum(MockStore.seeded())
    async with ForumClient(
        httpx.AsyncClient(base_url=MOCK_BASE_URL, transport=first.transport())
    ) as client:
        await _login(client)
        await client.boards.create("/only/", "Only here")
    assert any(b.name == "/only/" for b in first.store.boards.values())
    assert not any(b.name == "/only/" for b in second.store.boards.values())
