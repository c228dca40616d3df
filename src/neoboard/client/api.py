"""Async HTTP client for the NeoBoard API.

The client works the same against a real server and against the in-memory
:class:`~neoboard.client.mock.MockForum`; only the httpx transport differs.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from neoboard.core.validation import BoardCategory
from neoboard.schemas.board import BoardEnvelope, BoardListResponse, BoardView
from neoboard.schemas.post import PostEnvelope, PostListResponse, PostView
from neoboard.schemas.thread import ThreadEnvelope, ThreadListResponse, ThreadView
from neoboard.schemas.user import AuthResponse, UserEnvelope, UserView

from .tokens import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Raised when the API answers with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class ForumClient:
    """Entry point grouping the auth, board, thread and post operations."""

    def __init__(self, http: httpx.AsyncClient, tokens: TokenStore | None = None) -> None:
        self._http = http
        self.tokens: TokenStore = tokens if tokens is not None else MemoryTokenStore()
        self.auth = AuthAPI(self)
        self.boards = BoardsAPI(self)
        self.threads = ThreadsAPI(self)
        self.posts = PostsAPI(self)

    async def __aenter__(self) -> ForumClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            ApiError: With the server's ``error`` text for error responses,
                or a network message when no response was received.
        """
        headers = {}
        token = self.tokens.load()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("API request: %s %s", method, path)
        try:
            response = await self._http.request(
                method,
                path,
                json=json,
                params=_without_none(params) if params else None,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("API request %s %s failed: %s", method, path, exc)
            raise ApiError(f"Network error: {exc}") from exc

        logger.debug("API response: %s %s -> %s", method, path, response.status_code)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"error": "Network error"}
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(
                message or f"HTTP error! status: {response.status_code}",
                response.status_code,
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as exc:
            raise ApiError("Network error", response.status_code) from exc
        return data


class _ResourceAPI:
    def __init__(self, client: ForumClient) -> None:
        self._client = client


class AuthAPI(_ResourceAPI):
    """Account operations; successful logins store the token."""

    async def _login(self, path: str, payload: dict[str, Any] | None = None) -> AuthResponse:
        result = AuthResponse.model_validate(await self._client.request("POST", path, json=payload))
        self._client.tokens.save(result.token)
        return result

    async def register(self, username: str, email: str, password: str) -> AuthResponse:
        return await self._login(
            "/auth/register",
            {"username": username, "email": email, "password": password},
        )

    async def login(self, email: str, password: str) -> AuthResponse:
        return await self._login("/auth/login", {"email": email, "password": password})

    async def login_anonymous(self) -> AuthResponse:
        return await self._login("/auth/anonymous")

    async def current_user(self) -> UserView:
        return UserEnvelope.model_validate(await self._client.request("GET", "/auth/me")).user

    async def logout(self) -> None:
        """Tell the server and forget the token, even if the call fails."""
        try:
            await self._client.request("POST", "/auth/logout")
        finally:
            self._client.tokens.clear()


class BoardsAPI(_ResourceAPI):
    async def list(self) -> list[BoardView]:
        data = await self._client.request("GET", "/boards")
        return BoardListResponse.model_validate(data).boards

    async def get(self, board_id: int) -> BoardView:
        data = await self._client.request("GET", f"/boards/{board_id}")
        return BoardEnvelope.model_validate(data).board

    async def create(
        self,
        name: str,
        description: str,
        category: BoardCategory | str = BoardCategory.GENERAL,
        is_nsfw: bool = False,
    ) -> BoardView:
        payload = {
            "name": name,
            "description": description,
            "category": BoardCategory(category).value,
            "isNSFW": is_nsfw,
        }
        data = await self._client.request("POST", "/boards", json=payload)
        return BoardEnvelope.model_validate(data).board

    async def update(
        self,
        board_id: int,
        *,
        description: str | None = None,
        category: BoardCategory | str | None = None,
        is_nsfw: bool | None = None,
    ) -> BoardView:
        payload = _without_none(
            {
                "description": description,
                "category": BoardCategory(category).value if category else None,
                "isNSFW": is_nsfw,
            }
        )
        data = await self._client.request("PUT", f"/boards/{board_id}", json=payload)
        return BoardEnvelope.model_validate(data).board

    async def delete(self, board_id: int) -> str:
        data = await self._client.request("DELETE", f"/boards/{board_id}")
        return str(data.get("message", ""))


class ThreadsAPI(_ResourceAPI):
    async def list_by_board(
        self,
        board_id: int,
        *,
        sort: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[ThreadView]:
        data = await self._client.request(
            "GET",
            f"/threads/board/{board_id}",
            params={"sort": sort, "page": page, "limit": limit},
        )
        return ThreadListResponse.model_validate(data).threads

    async def get(self, thread_id: int) -> ThreadView:
        data = await self._client.request("GET", f"/threads/{thread_id}")
        return ThreadEnvelope.model_validate(data).thread

    async def create(
        self,
        board_id: int,
        title: str,
        content: str,
        *,
        images: list[str] | None = None,
        tags: list[str] | None = None,
    ) -> ThreadView:
        payload = {
            "boardId": board_id,
            "title": title,
            "content": content,
            "images": images or [],
            "tags": tags or [],
        }
        data = await self._client.request("POST", "/threads", json=payload)
        return ThreadEnvelope.model_validate(data).thread

    async def update(
        self,
        thread_id: int,
        *,
        is_sticky: bool | None = None,
        is_locked: bool | None = None,
    ) -> ThreadView:
        payload = _without_none({"isSticky": is_sticky, "isLocked": is_locked})
        data = await self._client.request("PUT", f"/threads/{thread_id}", json=payload)
        return ThreadEnvelope.model_validate(data).thread

    async def delete(self, thread_id: int) -> str:
        data = await self._client.request("DELETE", f"/threads/{thread_id}")
        return str(data.get("message", ""))


class PostsAPI(_ResourceAPI):
    async def list_by_thread(
        self,
        thread_id: int,
        *,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[PostView]:
        data = await self._client.request(
            "GET",
            f"/posts/thread/{thread_id}",
            params={"page": page, "limit": limit},
        )
        return PostListResponse.model_validate(data).posts

    async def create(
        self,
        thread_id: int,
        content: str,
        *,
        images: list[str] | None = None,
        reply_to: int | None = None,
    ) -> PostView:
        payload = _without_none(
            {
                "threadId": thread_id,
                "content": content,
                "images": images or [],
                "replyTo": reply_to,
            }
        )
        data = await self._client.request("POST", "/posts", json=payload)
        return PostEnvelope.model_validate(data).post

    async def update(self, post_id: int, content: str) -> PostView:
        data = await self._client.request("PUT", f"/posts/{post_id}", json={"content": content})
        return PostEnvelope.model_validate(data).post

    async def delete(self, post_id: int) -> str:
        data = await self._client.request("DELETE", f"/posts/{post_id}")
        return str(data.get("message", ""))
