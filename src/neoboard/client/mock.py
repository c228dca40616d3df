"""In-memory forum served through ``httpx.MockTransport``.

Used when no API URL is configured and in tests. It answers the same routes
with the same JSON shapes, error messages and counter behaviour as the
server, over an explicit :class:`MockStore` so separate clients never share
state.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import re
import secrets
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from neoboard.core.errors import (
    Conflict,
    Forbidden,
    ForumError,
    NotFound,
    Unauthorized,
    ValidationFailed,
    summarize_validation_errors,
)
from neoboard.core.passwords import hash_password, verify_password
from neoboard.core.validation import MAX_PAGE_NUMBER, MAX_ROW_ID, BoardCategory
from neoboard.schemas.board import BoardCreate, BoardUpdate, BoardView
from neoboard.schemas.post import PostCreate, PostUpdate, PostView
from neoboard.schemas.thread import ThreadCreate, ThreadUpdate, ThreadView
from neoboard.schemas.user import LoginRequest, RegisterRequest, UserView

logger = logging.getLogger(__name__)

MOCK_BASE_URL = "http://neoboard.mock/api"

DEFAULT_THREAD_PAGE_SIZE = 20
DEFAULT_POST_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class MockUser:
    id: int
    username: str
    email: str | None = None
    password_hash: str | None = None
    is_anonymous: bool = False
    join_date: datetime = field(default_factory=utcnow)
    post_count: int = 0
    is_active: bool = True
    last_seen: datetime = field(default_factory=utcnow)


@dataclass
class MockBoard:
    id: int
    name: str
    description: str
    category: BoardCategory
    created_by_id: int
    is_nsfw: bool = False
    thread_count: int = 0
    post_count: int = 0
    last_activity: datetime = field(default_factory=utcnow)
    is_active: bool = True


@dataclass
class MockThread:
    id: int
    board_id: int
    title: str
    content: str
    author: MockUser
    images: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    is_sticky: bool = False
    is_locked: bool = False
    reply_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    last_reply: datetime = field(default_factory=utcnow)
    is_active: bool = True


@dataclass
class MockPost:
    id: int
    thread_id: int
    content: str
    author: MockUser
    images: list[str] = field(default_factory=list)
    reply_to_id: int | None = None
    is_op: bool = False
    created_at: datetime = field(default_factory=utcnow)
    is_active: bool = True


def _decrement(value: int, amount: int = 1) -> int:
    return max(value - amount, 0)


@dataclass
class MockStore:
    """Rows of the mock forum, keyed by id, plus issued tokens."""

    users: dict[int, MockUser] = field(default_factory=dict)
    boards: dict[int, MockBoard] = field(default_factory=dict)
    threads: dict[int, MockThread] = field(default_factory=dict)
    posts: dict[int, MockPost] = field(default_factory=dict)
    tokens: dict[str, int] = field(default_factory=dict)
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def next_id(self) -> int:
        return next(self._ids)

    # Writes below keep the denormalised counters exactly like the server does.

    def add_user(self, username: str, **fields: Any) -> MockUser:
        user = MockUser(id=self.next_id(), username=username, **fields)
        self.users[user.id] = user
        return user

    def add_board(self, name: str, description: str, category: BoardCategory,
                  creator: MockUser, **fields: Any) -> MockBoard:
        board = MockBoard(
            id=self.next_id(),
            name=name,
            description=description,
            category=category,
            created_by_id=creator.id,
            **fields,
        )
        self.boards[board.id] = board
        return board

    def add_thread(self, board: MockBoard, author: MockUser, title: str, content: str,
                   *, images: list[str] | None = None, tags: list[str] | None = None,
                   created_at: datetime | None = None) -> MockThread:
        now = created_at or utcnow()
        thread = MockThread(
            id=self.next_id(),
            board_id=board.id,
            title=title,
            content=content,
            author=author,
            images=list(images or []),
            tags=list(tags or []),
            created_at=now,
            last_reply=now,
        )
        self.threads[thread.id] = thread
        op = MockPost(
            id=self.next_id(),
            thread_id=thread.id,
            content=content,
            author=author,
            images=list(images or []),
            is_op=True,
            created_at=now,
        )
        self.posts[op.id] = op
        board.thread_count += 1
        board.post_count += 1
        board.last_activity = max(board.last_activity, now)
        author.post_count += 1
        return thread

    def add_reply(self, thread: MockThread, author: MockUser, content: str,
                  *, images: list[str] | None = None, reply_to_id: int | None = None,
                  created_at: datetime | None = None) -> MockPost:
        now = created_at or utcnow()
        post = MockPost(
            id=self.next_id(),
            thread_id=thread.id,
            content=content,
            author=author,
            images=list(images or []),
            reply_to_id=reply_to_id,
            created_at=now,
        )
        self.posts[post.id] = post
        thread.reply_count += 1
        thread.last_reply = max(thread.last_reply, now)
        board = self.boards[thread.board_id]
        board.post_count += 1
        board.last_activity = max(board.last_activity, now)
        author.post_count += 1
        return post

    def remove_thread(self, thread: MockThread) -> None:
        thread.is_active = False
        removed = 0
        for post in self.posts.values():
            if post.thread_id == thread.id and post.is_active:
                post.is_active = False
                removed += 1
        board = self.boards[thread.board_id]
        board.thread_count = _decrement(board.thread_count)
        board.post_count = _decrement(board.post_count, removed)

    def remove_reply(self, post: MockPost) -> None:
        post.is_active = False
        thread = self.threads[post.thread_id]
        thread.reply_count = _decrement(thread.reply_count)
        board = self.boards[thread.board_id]
        board.post_count = _decrement(board.post_count)

    def issue_token(self, user: MockUser) -> str:
        token = f"mock-token-{secrets.token_hex(16)}"
        self.tokens[token] = user.id
        return token

    @classmethod
    def seeded(cls) -> MockStore:
        """Return a store with demo boards, threads, replies and users.

        The demo account is ``demo@example.com`` / ``password``.
        """
        store = cls()
        now = utcnow()

        def ago(minutes: int) -> datetime:
            return now - timedelta(minutes=minutes)

        def member(username: str, days: int, *, anonymous: bool = False) -> MockUser:
            return store.add_user(username, is_anonymous=anonymous,
                                  join_date=now - timedelta(days=days))

        demo = store.add_user(
            "DemoUser",
            email="demo@example.com",
            password_hash=hash_password("password"),
            join_date=now - timedelta(days=30),
        )
        moderator = member("TechModerator", 30)
        enthusiast = member("DevEnthusiast", 15)
        gamer = member("GamerPro", 60)
        newcomer = member("NewUser2025", 2)
        designer = member("DesignLover", 7)
        anonymous = member("Anonymous_seed", 0, anonymous=True)
        full_stack = member("FullStackDev", 45)

        tech = store.add_board(
            "/tech/", "Technology discussions, programming, and software development",
            BoardCategory.TECHNOLOGY, demo, last_activity=ago(5),
        )
        gaming = store.add_board(
            "/gaming/", "Video games, esports, and gaming culture",
            BoardCategory.ENTERTAINMENT, demo, last_activity=ago(15),
        )
        store.add_board(
            "/art/", "Digital art, traditional art, and creative works",
            BoardCategory.CREATIVE, demo, last_activity=ago(45),
        )
        store.add_board(
            "/random/", "Random discussions and off-topic conversations",
            BoardCategory.GENERAL, demo, last_activity=ago(2),
        )

        welcome = store.add_thread(
            tech, moderator, "Welcome to the Tech Board!",
            "This is a sample thread to demonstrate the application functionality. "
            "Feel free to explore and test all the features!",
            tags=["welcome", "announcement"], created_at=ago(6),
        )
        welcome.is_sticky = True
        frameworks = store.add_thread(
            tech, enthusiast, "Best JavaScript frameworks in 2025?",
            "What are your thoughts on the current state of JavaScript frameworks? "
            "React, Vue, Svelte, or something else?",
            tags=["javascript", "frameworks", "discussion"], created_at=ago(25),
        )
        store.add_thread(
            gaming, gamer, "Gaming Setup Showcase 2025",
            "Share your gaming setups! Post pics of your battlestations and let's see "
            "what everyone is working with.",
            tags=["setup", "showcase", "hardware"], created_at=ago(120),
        )

        thanks = store.add_reply(
            welcome, newcomer,
            "Thanks for setting this up! The interface looks really clean and modern.",
            created_at=ago(4),
        )
        store.add_reply(
            welcome, designer,
            "Agreed! Love the dark theme and the responsive design. Works great on mobile too.",
            reply_to_id=thanks.id, created_at=ago(3),
        )
        store.add_reply(
            welcome, anonymous,
            "The authentication system is smooth too. Anonymous posting works perfectly!",
            created_at=ago(2),
        )
        store.add_reply(
            frameworks, full_stack,
            "I've been using React for years, but I'm really impressed with what Svelte "
            "has been doing lately. The performance is incredible and the developer "
            "experience is so smooth.",
            created_at=ago(20),
        )
        return store


Handler = Callable[..., Awaitable[dict[str, Any]]]


@dataclass
class _Route:
    method: str
    pattern: re.Pattern[str]
    handler: Handler
    status_code: int = 200


@dataclass
class _Call:
    request: httpx.Request
    params: dict[str, str]
    body: dict[str, Any]


class MockForum:
    """Async request handler for ``httpx.MockTransport``.

    Example:
        >>> forum = MockForum(MockStore.seeded())
        >>> http = httpx.AsyncClient(base_url=MOCK_BASE_URL,
        ...                          transport=httpx.MockTransport(forum.handle))
    """

    def __init__(self, store: MockStore | None = None, *, latency: float = 0.0,
                 prefix: str = "/api") -> None:
        self.store = store if store is not None else MockStore()
        self.latency = latency
        self.prefix = prefix.rstrip("/")
        self._routes: list[_Route] = []
        self._add("POST", r"/auth/register", self._register, 201)
        self._add("POST", r"/auth/login", self._login)
        self._add("POST", r"/auth/anonymous", self._anonymous)
        self._add("GET", r"/auth/me", self._me)
        self._add("POST", r"/auth/logout", self._logout)
        self._add("GET", r"/boards", self._list_boards)
        self._add("POST", r"/boards", self._create_board, 201)
        self._add("GET", r"/boards/(?P<board_id>[^/]+)", self._get_board)
        self._add("PUT", r"/boards/(?P<board_id>[^/]+)", self._update_board)
        self._add("DELETE", r"/boards/(?P<board_id>[^/]+)", self._delete_board)
        self._add("GET", r"/threads/board/(?P<board_id>[^/]+)", self._list_threads)
        self._add("POST", r"/threads", self._create_thread, 201)
        self._add("GET", r"/threads/(?P<thread_id>[^/]+)", self._get_thread)
        self._add("PUT", r"/threads/(?P<thread_id>[^/]+)", self._update_thread)
        self._add("DELETE", r"/threads/(?P<thread_id>[^/]+)", self._delete_thread)
        self._add("GET", r"/posts/thread/(?P<thread_id>[^/]+)", self._list_posts)
        self._add("POST", r"/posts", self._create_post, 201)
        self._add("PUT", r"/posts/(?P<post_id>[^/]+)", self._update_post)
        self._add("DELETE", r"/posts/(?P<post_id>[^/]+)", self._delete_post)
        self._add("GET", r"/health", self._health)

    def _add(self, method: str, path: str, handler: Handler, status_code: int = 200) -> None:
        self._routes.append(_Route(method, re.compile(f"^{path}/?$"), handler, status_code))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        """Serve one request, mapping domain errors to ``{"error": ...}``."""
        if self.latency:
            await asyncio.sleep(self.latency)

        path = request.url.path
        logger.debug("Mock API request: %s %s", request.method, path)
        if path.startswith(self.prefix):
            path = path[len(self.prefix):] or "/"

        for route in self._routes:
            match = route.pattern.match(path)
            if match is None or route.method != request.method:
                continue
            try:
                call = _Call(request, match.groupdict(), self._json_body(request))
                payload = await route.handler(call)
            except ForumError as exc:
                return httpx.Response(exc.status_code, json={"error": exc.message})
            return httpx.Response(route.status_code, json=payload)

        return httpx.Response(404, json={"error": f"Route not found: {request.url.path}"})

    @staticmethod
    def _json_body(request: httpx.Request) -> dict[str, Any]:
        if not request.content:
            return {}
        try:
            body = json.loads(request.content)
        except ValueError as exc:
            raise ValidationFailed("Invalid JSON body") from exc
        if not isinstance(body, dict):
            raise ValidationFailed("Request body must be a JSON object")
        return body

    # helpers

    @staticmethod
    def _parse(schema: type[BaseModel], body: dict[str, Any]) -> Any:
        try:
            return schema.model_validate(body)
        except ValidationError as exc:
            raise ValidationFailed(summarize_validation_errors(exc.errors())) from exc

    @staticmethod
    def _int(value: str) -> int:
        try:
            return int(value)
        except ValueError as exc:
            raise ValidationFailed(f"Invalid number: {value}") from exc

    @classmethod
    def _id(cls, value: str) -> int:
        try:
            row_id = int(value)
        except ValueError as exc:
            raise ValidationFailed(f"Invalid id: {value}") from exc
        if not 1 <= row_id <= MAX_ROW_ID:
            raise ValidationFailed(f"Invalid id: {value}")
        return row_id

    @classmethod
    def _page(cls, call: _Call, default_limit: int) -> tuple[int, int]:
        page = cls._int(call.request.url.params.get("page", "1"))
        limit = cls._int(call.request.url.params.get("limit", str(default_limit)))
        if not 1 <= page <= MAX_PAGE_NUMBER or limit < 1:
            raise ValidationFailed("Invalid page or limit")
        return page, min(limit, MAX_PAGE_SIZE)

    @staticmethod
    def _dump(view: type[BaseModel], row: Any) -> dict[str, Any]:
        return view.model_validate(row).model_dump(mode="json", by_alias=True)

    def _caller(self, call: _Call) -> MockUser | None:
        header = call.request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        user = self.store.users.get(self.store.tokens.get(token, -1))
        if user is None or not user.is_active:
            return None
        return user

    def _require_caller(self, call: _Call) -> MockUser:
        header = call.request.headers.get("Authorization")
        user = self._caller(call)
        if user is None:
            raise Unauthorized(None if not header else "Invalid token")
        return user

    def _active_board(self, board_id: int) -> MockBoard:
        board = self.store.boards.get(board_id)
        if board is None or not board.is_active:
            raise NotFound("Board not found")
        return board

    def _active_thread(self, thread_id: int) -> MockThread:
        thread = self.store.threads.get(thread_id)
        if thread is None or not thread.is_active:
            raise NotFound("Thread not found")
        return thread

    def _active_post(self, post_id: int) -> MockPost:
        post = self.store.posts.get(post_id)
        if post is None or not post.is_active:
            raise NotFound("Post not found")
        return post

    @staticmethod
    def _assert_owner(owner_id: int, caller: MockUser, action: str) -> None:
        if owner_id != caller.id:
            raise Forbidden(f"Not authorized to {action}")

    def _session(self, user: MockUser) -> dict[str, Any]:
        return {
            "success": True,
            "token": self.store.issue_token(user),
            "user": self._dump(UserView, user),
        }

    # auth

    async def _register(self, call: _Call) -> dict[str, Any]:
        data: RegisterRequest = self._parse(RegisterRequest, call.body)
        email = str(data.email)
        if any(u.email == email for u in self.store.users.values()):
            raise Conflict("Email already registered")
        if any(u.username == data.username for u in self.store.users.values()):
            raise Conflict("Username already taken")
        user = self.store.add_user(
            data.username, email=email, password_hash=hash_password(data.password)
        )
        return self._session(user)

    async def _login(self, call: _Call) -> dict[str, Any]:
        data: LoginRequest = self._parse(LoginRequest, call.body)
        user = next(
            (u for u in self.store.users.values() if u.email == data.email and u.is_active),
            None,
        )
        if user is None or not verify_password(data.password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        user.last_seen = utcnow()
        return self._session(user)

    async def _anonymous(self, call: _Call) -> dict[str, Any]:
        username = f"Anonymous_{int(time.time() * 1000)}_{secrets.token_hex(3)}"
        user = self.store.add_user(username, is_anonymous=True)
        return self._session(user)

    async def _me(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        return {"success": True, "user": self._dump(UserView, user)}

    async def _logout(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        user.last_seen = utcnow()
        return {"success": True, "message": "Logged out successfully"}

    # boards

    async def _list_boards(self, call: _Call) -> dict[str, Any]:
        boards = sorted(
            (b for b in self.store.boards.values() if b.is_active),
            key=lambda b: (b.last_activity, b.id),
            reverse=True,
        )
        return {"success": True, "boards": [self._dump(BoardView, b) for b in boards]}

    async def _get_board(self, call: _Call) -> dict[str, Any]:
        board = self._active_board(self._id(call.params["board_id"]))
        board.last_activity = utcnow()
        return {"success": True, "board": self._dump(BoardView, board)}

    async def _create_board(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        data: BoardCreate = self._parse(BoardCreate, call.body)
        if any(b.name == data.name and b.is_active for b in self.store.boards.values()):
            raise Conflict("A board with this name already exists")
        board = self.store.add_board(
            data.name, data.description, data.category, user, is_nsfw=data.is_nsfw
        )
        return {"success": True, "board": self._dump(BoardView, board)}

    async def _update_board(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        board = self._active_board(self._id(call.params["board_id"]))
        self._assert_owner(board.created_by_id, user, "update this board")
        data: BoardUpdate = self._parse(BoardUpdate, call.body)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(board, key, value)
        return {"success": True, "board": self._dump(BoardView, board)}

    async def _delete_board(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        board = self._active_board(self._id(call.params["board_id"]))
        self._assert_owner(board.created_by_id, user, "delete this board")
        board.is_active = False
        return {"success": True, "message": "Board deleted successfully"}

    # threads

    async def _list_threads(self, call: _Call) -> dict[str, Any]:
        page, limit = self._page(call, DEFAULT_THREAD_PAGE_SIZE)
        board = self._active_board(self._id(call.params["board_id"]))
        threads = [t for t in self.store.threads.values()
                   if t.board_id == board.id and t.is_active]

        sort = call.request.url.params.get("sort", "activity")
        if sort == "newest":
            threads.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        elif sort == "oldest":
            threads.sort(key=lambda t: (t.created_at, t.id))
        elif sort == "replies":
            threads.sort(key=lambda t: (t.reply_count, t.id), reverse=True)
        else:
            threads.sort(key=lambda t: (t.is_sticky, t.last_reply, t.id), reverse=True)

        start = (page - 1) * limit
        window = threads[start:start + limit]
        return {"success": True, "threads": [self._dump(ThreadView, t) for t in window]}

    async def _get_thread(self, call: _Call) -> dict[str, Any]:
        thread = self._active_thread(self._id(call.params["thread_id"]))
        return {"success": True, "thread": self._dump(ThreadView, thread)}

    async def _create_thread(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        data: ThreadCreate = self._parse(ThreadCreate, call.body)
        board = self._active_board(data.board_id)
        thread = self.store.add_thread(
            board, user, data.title, data.content, images=data.images, tags=data.tags
        )
        return {"success": True, "thread": self._dump(ThreadView, thread)}

    async def _update_thread(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        thread = self._active_thread(self._id(call.params["thread_id"]))
        self._assert_owner(thread.author.id, user, "update this thread")
        data: ThreadUpdate = self._parse(ThreadUpdate, call.body)
        if data.is_sticky is not None:
            thread.is_sticky = data.is_sticky
        if data.is_locked is not None:
            thread.is_locked = data.is_locked
        return {"success": True, "thread": self._dump(ThreadView, thread)}

    async def _delete_thread(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        thread = self._active_thread(self._id(call.params["thread_id"]))
        self._assert_owner(thread.author.id, user, "delete this thread")
        self.store.remove_thread(thread)
        return {"success": True, "message": "Thread deleted successfully"}

    # posts

    async def _list_posts(self, call: _Call) -> dict[str, Any]:
        page, limit = self._page(call, DEFAULT_POST_PAGE_SIZE)
        thread = self._active_thread(self._id(call.params["thread_id"]))
        posts = sorted(
            (p for p in self.store.posts.values() if p.thread_id == thread.id and p.is_active),
            key=lambda p: (p.created_at, p.id),
        )
        start = (page - 1) * limit
        window = posts[start:start + limit]
        return {"success": True, "posts": [self._dump(PostView, p) for p in window]}

    async def _create_post(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        data: PostCreate = self._parse(PostCreate, call.body)
        thread = self._active_thread(data.thread_id)
        if thread.is_locked:
            raise Forbidden("Thread is locked")
        if data.reply_to_id is not None:
            target = self.store.posts.get(data.reply_to_id)
            if target is None or not target.is_active or target.thread_id != thread.id:
                raise NotFound("Reply target post not found")
        post = self.store.add_reply(
            thread, user, data.content, images=data.images, reply_to_id=data.reply_to_id
        )
        return {"success": True, "post": self._dump(PostView, post)}

    async def _update_post(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        post = self._active_post(self._id(call.params["post_id"]))
        self._assert_owner(post.author.id, user, "update this post")
        data: PostUpdate = self._parse(PostUpdate, call.body)
        post.content = data.content
        return {"success": True, "post": self._dump(PostView, post)}

    async def _delete_post(self, call: _Call) -> dict[str, Any]:
        user = self._require_caller(call)
        post = self._active_post(self._id(call.params["post_id"]))
        self._assert_owner(post.author.id, user, "delete this post")
        if post.is_op:
            raise Forbidden("Cannot delete original post. Delete the thread instead.")
        self.store.remove_reply(post)
        return {"success": True, "message": "Post deleted successfully"}

    async def _health(self, call: _Call) -> dict[str, Any]:
        return {
            "status": "OK",
            "timestamp": utcnow().isoformat(),
            "database": {
                "status": "connected",
                "dialect": "memory",
                "stats": {
                    "boards": len(self.store.boards),
                    "users": len(self.store.users),
                    "threads": len(self.store.threads),
                    "posts": len(self.store.posts),
                },
            },
            "server": {"environment": "mock", "version": "mock", "uptime": 0},
        }
