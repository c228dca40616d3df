"""Python client for the NeoBoard API, with an in-memory mock backend."""

from __future__ import annotations

import logging

import httpx

from .api import ApiError, ForumClient
from .config import ClientSettings
from .mock import MOCK_BASE_URL, MockForum, MockStore
from .tokens import FileTokenStore, MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)

__all__ = [
    "ApiError",
    "ClientSettings",
    "FileTokenStore",
    "ForumClient",
    "MemoryTokenStore",
    "MockForum",
    "MockStore",
    "TokenStore",
    "create_client",
]


def create_client(
    base_url: str | None = None,
    *,
    tokens: TokenStore | None = None,
    store: MockStore | None = None,
    config: ClientSettings | None = None,
) -> ForumClient:
    """Build a client for ``base_url``, or for a mock forum when no URL is set.

    Args:
        base_url: API root such as ``http://localhost:3001/api``. Falls back
            to ``NEOBOARD_API_URL``; when both are empty the client talks to
            an in-memory :class:`MockForum`.
        tokens: Token persistence; defaults to the configured token file for
            real servers and to memory for the mock, whose tokens do not
            outlive the process.
        store: Data for the mock forum; a seeded demo store by default.
        config: Client settings; read from the environment when omitted.
    """
    config = config or ClientSettings()
    url = base_url or config.api_url

    if url:
        http = httpx.AsyncClient(base_url=url, timeout=config.timeout_seconds)
        return ForumClient(http, tokens or FileTokenStore(config.token_file))

    logger.info("No API URL configured; using the in-memory mock forum")
    forum = MockForum(store if store is not None else MockStore.seeded(),
                      latency=config.mock_latency)
    http = httpx.AsyncClient(base_url=MOCK_BASE_URL, transport=forum.transport())
    return ForumClient(http, tokens or MemoryTokenStore())
