"""Domain exceptions shared by the services, the API layer and the mock client.

Each exception carries the HTTP status it maps to and a short message that is
returned to callers verbatim as ``{"error": message}``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


class ForumError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ForumError):
    """A field violated its schema constraints."""

    status_code = 400
    default_message = "Validation failed"


class Conflict(ForumError):
    """A unique field (username, email, board name) is already taken."""

    status_code = 400
    default_message = "Resource already exists"


class Unauthorized(ForumError):
    """Credentials or bearer token are missing, invalid or expired."""

    status_code = 401
    default_message = "Access denied. No token provided."


class Forbidden(ForumError):
    """The caller is authenticated but not allowed to perform the action."""

    status_code = 403
    default_message = "Not authorized"


class NotFound(ForumError):
    """The resource does not exist or has been soft-deleted."""

    status_code = 404
    default_message = "Resource not found"


class InternalError(ForumError):
    """Unexpected failure, e.g. the database is unavailable."""

    status_code = 500


_VALUE_ERROR_PREFIX = "Value error, "
_LOCATION_ROOTS = ("body", "query", "path", "header")


def summarize_validation_errors(errors: Sequence[Mapping[str, Any]]) -> str:
    """Turn the first pydantic error into a single readable message.

    Messages raised by our own field validators are returned as written;
    built-in constraint messages are prefixed with the offending field.
    """
    if not errors:
        return ValidationFailed.default_message
    first = errors[0]
    message = str(first.get("msg", ValidationFailed.default_message))
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX):]
    fields = [str(part) for part in first.get("loc", ()) if part not in _LOCATION_ROOTS]
    if fields:
        return f"{'.'.join(fields)}: {message}"
    return message
