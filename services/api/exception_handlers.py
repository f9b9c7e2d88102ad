"""FastAPI exception handlers for custom exceptions."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import (
    MirrorError,
    StorageError,
    ValidationError,
)


async def mirror_exception_handler(request: Request, exc: MirrorError) -> JSONResponse:
    """Handle Lakemirror-specific exceptions.

    Any non-2xx status makes Event Grid retry the delivery, so the mapping
    mainly serves whoever reads the dead-letter record.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, StorageError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    logger.error(
        "Lakemirror exception: {type} - {message}",
        type=type(exc).__name__,
        message=str(exc),
        details=exc.details,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )
