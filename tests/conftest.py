# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-neoboard")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from neoboard.core.passwords import hash_password  # noqa: E402
from neoboard.core.security import create_access_token  # noqa: E402
from neoboard.core.validation import BoardCategory  # noqa: E402
from neoboard.db.session import Base  # noqa: E402
from neoboard.db.session import get_db as app_get_session  # noqa: E402
from neoboard.main import app as fastapi_app  # noqa: E402
from neoboard.models import Board, User  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse"

_BOARD_NAMES = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    # A fresh in-memory database per test; StaticPool shares its one connection.
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db_session: Session, username: str, email: str) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        is_anonymous=False,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    return _make_user(db_session, "alice", "alice@example.com")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    return _make_user(db_session, "bob", "bob@example.com")


@pytest.fixture()
def anonymous_user(db_session: Session) -> User:
    user = User(username="Anonymous_1700000000000_abcdef", is_anonymous=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    return bearer(test_user)


@pytest.fixture()
def other_auth_headers(other_user: User) -> dict[str, str]:
    return bearer(other_user)


@pytest.fixture()
def board(db_session: Session, test_user: User) -> Board:
    """An active /tech/ board owned by ``test_user``."""
    board = Board(
        name="/tech/",
        description="Technology discussions",
        category=BoardCategory.TECHNOLOGY,
        created_by_id=test_user.id,
    )
    db_session.add(board)
    db_session.commit()
    db_session.refresh(board)
    return board


@pytest.fixture()
def create_board(client: TestClient, auth_headers: dict[str, str]) -> Callable[..., dict[str, Any]]:
    """Create a board through the API and return its JSON view."""

    def _create(**overrides: Any) -> dict[str, Any]:
        payload = {
            "name": f"/board{next(_BOARD_NAMES)}/",
            "description": "A test board",
            "category": "General",
            "isNSFW": False,
        }
        payload.update(overrides)
        response = client.post("/api/boards", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["board"]

    return _create


@pytest.fixture()
def create_thread(
    client: TestClient, auth_headers: dict[str, str], board: Board
) -> Callable[..., dict[str, Any]]:
    """Open a thread through the API (on ``board`` by default) and return its JSON view."""

    def _create(headers: dict[str, str] | None = None, **overrides: Any) -> dict[str, Any]:
        payload = {
            "boardId": board.id,
            "title": "Hello",
            "content": "First!",
        }
        payload.update(overrides)
        response = client.post("/api/threads", json=payload, headers=headers or auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["thread"]

    return _create


@pytest.fixture()
def create_reply(
    client: TestClient, auth_headers: dict[str, str]
) -> Callable[..., dict[str, Any]]:
    """Reply in a thread through the API and return the post's JSON view."""

    def _create(
        thread_id: int, content: str = "A reply", headers: dict[str, str] | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        payload = {"threadId": thread_id, "content": content}
        payload.update(overrides)
        response = client.post("/api/posts", json=payload, headers=headers or auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["post"]

    return _create
