"""Ownership checks for mutating boards, threads and posts."""
from __future__ import annotations

from neoboard.core.errors import Forbidden
from neoboard.models import User


def assert_owner(owner_id: int, caller: User, action: str) -> None:
    """Raise ``Forbidden`` unless ``caller`` owns the resource.

    Args:
        owner_id: User id recorded as the resource's creator or author.
        caller: Authenticated user attempting the action.
        action: Phrase completing "Not authorized to ...", e.g.
            ``"update this board"``.
    """
    if owner_id != caller.id:
        raise Forbidden(f"Not authorized to {action}")
