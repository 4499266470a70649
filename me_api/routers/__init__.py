"""HTTP routers, one per resource, plus shared error helpers."""
from __future__ import annotations

from fastapi import HTTPException, status

from ..schemas import ErrorResponse


def http_error(status_code: int, error: str, message: str) -> HTTPException:
    """Build an HTTPException carrying the ``{error, message}`` envelope."""
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=error, message=message).model_dump(),
    )


def not_found(resource: str, resource_id: int | None = None) -> HTTPException:
    suffix = f" with id {resource_id}" if resource_id is not None else ""
    return http_error(
        status.HTTP_404_NOT_FOUND,
        f"{resource} not found",
        f"No {resource.lower()} found{suffix}",
    )


def apply_changes(record: object, changes: dict, required: tuple[str, ...] = ()) -> list[str]:
    """Copy ``changes`` onto ``record``; ``None`` leaves required columns untouched.

    Returns the names of the fields that were set.
    """
    applied = []
    for field, value in changes.items():
        if value is None and field in required:
            continue
        setattr(record, field, value)
        applied.append(field)
    return applied
