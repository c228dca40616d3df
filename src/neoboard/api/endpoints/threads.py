"""Thread endpoints for the NeoBoard API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from neoboard.api.dependencies import (
    AuthContextDep,
    CurrentUserDep,
    PageQuery,
    RowIdPath,
    SessionDep,
)
from neoboard.core.settings import settings
from neoboard.schemas.common import MessageResponse
from neoboard.schemas.thread import (
    ThreadCreate,
    ThreadEnvelope,
    ThreadListResponse,
    ThreadUpdate,
    ThreadView,
)
from neoboard.services import thread_service
from neoboard.services.thread_service import ThreadSort

router = APIRouter(prefix="/threads", tags=["threads"])


@router.get("/board/{board_id}", response_model=ThreadListResponse)
async def list_board_threads(
    board_id: RowIdPath,
    db: SessionDep,
    _auth: AuthContextDep,
    sort: str | None = None,
    page: PageQuery = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> ThreadListResponse:
    """List a board's threads.

    Args:
        board_id: Board to list.
        db: Database session.
        _auth: Optional authentication; anonymous browsing is allowed.
        sort: ``newest``, ``oldest``, ``replies`` or ``activity`` (default;
            sticky threads first, then most recent reply).
        page: 1-based page number.
        limit: Page size, capped at the configured maximum.

    Returns:
        One page of threads.
    """
    page_size = min(limit or settings.default_thread_page_size, settings.max_page_size)
    threads = thread_service.list_threads(
        db,
        board_id,
        sort=ThreadSort.parse(sort),
        page=page,
        limit=page_size,
    )
    return ThreadListResponse(threads=[ThreadView.model_validate(t) for t in threads])


@router.get("/{thread_id}", response_model=ThreadEnvelope)
async def get_thread(
    thread_id: RowIdPath,
    db: SessionDep,
    _auth: AuthContextDep,
) -> ThreadEnvelope:
    """Get a thread by ID."""
    thread = thread_service.get_active_thread(db, thread_id)
    return ThreadEnvelope(thread=ThreadView.model_validate(thread))


@router.post("", response_model=ThreadEnvelope, status_code=status.HTTP_201_CREATED)
async def create_thread(
    payload: ThreadCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThreadEnvelope:
    """Open a thread; its content also becomes the original post."""
    thread = thread_service.create_thread(db, payload, current_user)
    return ThreadEnvelope(thread=ThreadView.model_validate(thread))


@router.put("/{thread_id}", response_model=ThreadEnvelope)
async def update_thread(
    thread_id: RowIdPath,
    payload: ThreadUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThreadEnvelope:
    """Set or clear the sticky and locked flags of an owned thread."""
    thread = thread_service.update_thread(db, thread_id, payload, current_user)
    return ThreadEnvelope(thread=ThreadView.model_validate(thread))


@router.delete("/{thread_id}", response_model=MessageResponse)
async def delete_thread(
    thread_id: RowIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete an owned thread together with all of its posts."""
    thread_service.delete_thread(db, thread_id, current_user)
    return MessageResponse(message="Thread deleted successfully")
