"""Shared error helpers for route handlers."""

import structlog
from fastapi import HTTPException, status

from thinkscore.api.models import ErrorResponse

logger = structlog.get_logger(__name__)

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Invalid API key or missing user"},
    422: {"model": ErrorResponse, "description": "Invalid request parameters"},
    502: {"model": ErrorResponse, "description": "Storage or evaluation failure"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


def not_found(description: str) -> dict:
    return {**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": description}}


def server_error(operation: str, e: Exception) -> HTTPException:
    """Log an unexpected failure and build the 500 response for it."""
    logger.error(f"{operation}_failed", error=str(e), exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {operation.replace('_', ' ')}",
    )
