"""Health and status endpoints for the NeoBoard API."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError

from neoboard.api.dependencies import SessionDep
from neoboard.core.settings import settings
from neoboard.db.time import utcnow
from neoboard.models import Board, Post, Thread, User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])

_started_at = time.monotonic()


@router.get("/health")
async def health_check(db: SessionDep) -> dict[str, Any]:
    """Report server status and a live database check.

    Args:
        db: Database session.

    Returns:
        Overall status, the database connection state with row counts per
        table when reachable, and basic server information.
    """
    database: dict[str, Any] = {
        "status": "disconnected",
        "dialect": db.get_bind().dialect.name,
    }
    try:
        db.execute(text("SELECT 1"))
        database["status"] = "connected"
        database["stats"] = {
            "boards": db.query(func.count(Board.id)).scalar() or 0,
            "users": db.query(func.count(User.id)).scalar() or 0,
            "threads": db.query(func.count(Thread.id)).scalar() or 0,
            "posts": db.query(func.count(Post.id)).scalar() or 0,
        }
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        db.rollback()

    return {
        "status": "OK",
        "timestamp": utcnow().isoformat(),
        "database": database,
        "server": {
            "environment": settings.environment,
            "version": settings.app_version,
            "uptime": round(time.monotonic() - _started_at, 3),
        },
    }
