"""FastAPI exception handlers for custom exceptions."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import (
    ShopfloorError,
    ConfigurationError,
    ValidationError,
    ReferenceNotFoundError,
    StorageError,
)


async def shopfloor_exception_handler(request: Request, exc: ShopfloorError) -> JSONResponse:
    """Handle Shopfloor-specific exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    # Map exception types to HTTP status codes
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, ReferenceNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StorageError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, ConfigurationError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error(
        "Shopfloor exception: {type} - {message}",
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
