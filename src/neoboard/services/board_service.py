"""Board queries and mutations."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from neoboard.core.errors import Conflict, NotFound
from neoboard.db.session import atomic
from neoboard.db.time import utcnow
from neoboard.models import Board, User
from neoboard.schemas.board import BoardCreate, BoardUpdate
from neoboard.services.permissions import assert_owner

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A board with this name already exists"


def list_boards(db: Session) -> list[Board]:
    """Return active boards, most recently active first."""
    return (
        db.query(Board)
        .filter(Board.is_active.is_(True))
        .order_by(Board.last_activity.desc(), Board.id.desc())
        .all()
    )


def get_active_board(db: Session, board_id: int) -> Board:
    """Return an active board or raise ``NotFound``."""
    board = (
        db.query(Board)
        .filter(Board.id == board_id, Board.is_active.is_(True))
        .first()
    )
    if board is None:
        raise NotFound("Board not found")
    return board


def view_board(db: Session, board_id: int) -> Board:
    """Fetch a board for display, recording the visit as activity."""
    board = get_active_board(db, board_id)
    with atomic(db):
        board.last_activity = utcnow()
    db.refresh(board)
    return board


def create_board(db: Session, data: BoardCreate, creator: User) -> Board:
    """Create a board owned by ``creator``.

    Raises:
        Conflict: If an active board already uses the (lower-cased) name.
    """
    taken = (
        db.query(Board.id)
        .filter(Board.name == data.name, Board.is_active.is_(True))
        .first()
    )
    if taken is not None:
        raise Conflict(DUPLICATE_NAME)

    board = Board(
        name=data.name,
        description=data.description,
        category=data.category,
        is_nsfw=data.is_nsfw,
        created_by_id=creator.id,
    )
    try:
        with atomic(db):
            db.add(board)
    except IntegrityError as err:
        raise Conflict(DUPLICATE_NAME) from err

    db.refresh(board)
    logger.info("Board %s created by user %s", board.name, creator.id)
    return board


def update_board(db: Session, board_id: int, data: BoardUpdate, caller: User) -> Board:
    """Apply a partial update; fields absent from the request are left alone."""
    board = get_active_board(db, board_id)
    assert_owner(board.created_by_id, caller, "update this board")

    changes = data.model_dump(exclude_unset=True)
    with atomic(db):
        for key, value in changes.items():
            # An explicit null leaves the field untouched.
            if value is not None:
                setattr(board, key, value)
    db.refresh(board)
    return board


def delete_board(db: Session, board_id: int, caller: User) -> None:
    """Soft-delete a board; its threads and posts are left as they are."""
    board = get_active_board(db, board_id)
    assert_owner(board.created_by_id, caller, "delete this board")
    with atomic(db):
        board.is_active = False
    logger.info("Board %s deactivated by user %s", board_id, caller.id)
