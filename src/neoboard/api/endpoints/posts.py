"""Post endpoints for the NeoBoard API."""

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
from neoboard.schemas.post import (
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostUpdate,
    PostView,
)
from neoboard.services import post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/thread/{thread_id}", response_model=PostListResponse)
async def list_thread_posts(
    thread_id: RowIdPath,
    db: SessionDep,
    _auth: AuthContextDep,
    page: PageQuery = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> PostListResponse:
    """List a thread's posts in the order they were written."""
    page_size = min(limit or settings.default_post_page_size, settings.max_page_size)
    posts = post_service.list_posts(db, thread_id, page=page, limit=page_size)
    return PostListResponse(posts=[PostView.model_validate(p) for p in posts])


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostEnvelope:
    """Reply in a thread.

    Args:
        payload: Thread ID, content, images and an optional ``replyTo`` post.
        current_user: Authenticated author.
        db: Database session.

    Returns:
        The created post.
    """
    post = post_service.create_post(db, payload, current_user)
    return PostEnvelope(post=PostView.model_validate(post))


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: RowIdPath,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostEnvelope:
    """Replace the content of an owned post."""
    post = post_service.update_post(db, post_id, payload, current_user)
    return PostEnvelope(post=PostView.model_validate(post))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: RowIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete an owned reply. Original posts go away with their thread."""
    post_service.delete_post(db, post_id, current_user)
    return MessageResponse(message="Post deleted successfully")
