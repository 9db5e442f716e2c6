"""Error taxonomy raised by the lifecycle services.

Each error is an ``HTTPException`` so routes can let it propagate and the
application's exception handler renders it as ``{"detail": ...}``.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status


class ValidationFailed(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


def parse_uuid(value: str | UUID, label: str) -> UUID:
    """Parse an identifier coming from a path, raising ``ValidationFailed``."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationFailed(f"Invalid {label} ID format") from None
