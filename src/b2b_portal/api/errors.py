"""Translate domain exceptions into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import (
    DuplicateRecordError,
    InconsistentStateError,
    InvalidArgumentError,
    InvalidTransitionError,
    PermissionDeniedError,
    PortalError,
    RecordNotFoundError,
    RemoteOperationFailed,
)


def to_http_exception(exc: PortalError) -> HTTPException:
    # Duplicate must be checked before its RemoteOperationFailed parent.
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.explanation)
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.explanation)
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.explanation)
    if isinstance(exc, DuplicateRecordError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Record already exists")
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=exc.explanation)
    if isinstance(exc, RemoteOperationFailed):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Operation failed")
    if isinstance(exc, InconsistentStateError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Operation failed; staff attention required",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Operation failed")
