"""Board endpoints for the NeoBoard API."""

from __future__ import annotations

from fastapi import APIRouter, status

from neoboard.api.dependencies import CurrentUserDep, RowIdPath, SessionDep
from neoboard.schemas.board import (
    BoardCreate,
    BoardEnvelope,
    BoardListResponse,
    BoardUpdate,
    BoardView,
)
from neoboard.schemas.common import MessageResponse
from neoboard.services import board_service

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("", response_model=BoardListResponse)
async def list_boards(db: SessionDep) -> BoardListResponse:
    """List active boards, most recently active first."""
    boards = board_service.list_boards(db)
    return BoardListResponse(boards=[BoardView.model_validate(board) for board in boards])


@router.get("/{board_id}", response_model=BoardEnvelope)
async def get_board(board_id: RowIdPath, db: SessionDep) -> BoardEnvelope:
    """Get a board by ID. Viewing a board counts as activity on it."""
    board = board_service.view_board(db, board_id)
    return BoardEnvelope(board=BoardView.model_validate(board))


@router.post("", response_model=BoardEnvelope, status_code=status.HTTP_201_CREATED)
async def create_board(
    payload: BoardCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BoardEnvelope:
    """Create a board owned by the caller.

    Args:
        payload: Board name (``/name/``), description, category and NSFW flag.
        current_user: Authenticated caller, recorded as the owner.
        db: Database session.

    Returns:
        The created board.
    """
    board = board_service.create_board(db, payload, current_user)
    return BoardEnvelope(board=BoardView.model_validate(board))


@router.put("/{board_id}", response_model=BoardEnvelope)
async def update_board(
    board_id: RowIdPath,
    payload: BoardUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BoardEnvelope:
    """Update the description, category or NSFW flag of an owned board."""
    board = board_service.update_board(db, board_id, payload, current_user)
    return BoardEnvelope(board=BoardView.model_validate(board))


@router.delete("/{board_id}", response_model=MessageResponse)
async def delete_board(
    board_id: RowIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Deactivate an owned board."""
    board_service.delete_board(db, board_id, current_user)
    return MessageResponse(message="Board deleted successfully")
