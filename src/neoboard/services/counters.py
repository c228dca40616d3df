"""SQL-side updates for the denormalised counters on users, boards and threads."""
from __future__ import annotations

from typing import Any

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from neoboard.db.session import Base


def adjust_counters(
    db: Session,
    model: type[Base],
    row_id: int,
    deltas: dict[str, int],
    **assignments: Any,
) -> None:
    """Apply counter deltas (and plain column assignments) in one UPDATE.

    Increments are computed by the database, so concurrent requests never
    lose updates. Decrements are clamped at zero.

    Args:
        db: Session whose transaction the update joins.
        model: Mapped class owning the counters.
        row_id: Primary key of the row to update.
        deltas: Column name to signed delta, e.g. ``{"post_count": -3}``.
        **assignments: Extra columns to set, e.g. ``last_activity=utcnow()``.
    """
    values: dict[str, Any] = dict(assignments)
    for name, delta in deltas.items():
        column = getattr(model, name)
        if delta >= 0:
            values[name] = column + delta
        else:
            values[name] = case((column >= -delta, column + delta), else_=0)
    if not values:
        return
    stmt = (
        update(model)
        .where(model.id == row_id)  # type: ignore[attr-defined]
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    db.execute(stmt)
