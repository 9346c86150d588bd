"""
Error types and FastAPI exception handlers for the diff service
"""
from typing import Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import traceback
from datetime import datetime, timezone
from loguru import logger

from sow_diff.core.config import get_settings


class APIError(Exception):
    """Error carrying the HTTP status and code sent back to the client"""
    def __init__(self, message: str, status_code: int = 500, error_code: str = None,
                 details: Optional[dict] = None):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(message)


class SnapshotNotFound(APIError):
    """A revision identifier does not resolve in the version store"""
    def __init__(self, snapshot_id: str):
        self.snapshot_id = snapshot_id
        super().__init__(
            f"SOW revision {snapshot_id} not found",
            status_code=404,
            error_code="SNAPSHOT_NOT_FOUND",
            details={"snapshot_id": snapshot_id}
        )


class RetrievalError(APIError):
    """Transient failure while fetching a revision"""
    def __init__(self, snapshot_id: str):
        self.snapshot_id = snapshot_id
        super().__init__(
            f"Failed to load SOW revision {snapshot_id}",
            status_code=503,
            error_code="RETRIEVAL_ERROR",
            details={"snapshot_id": snapshot_id}
        )


class UnrelatedRevisions(APIError):
    """The two revisions belong to different SOWs"""
    def __init__(self, previous_root: str, new_root: str):
        super().__init__(
            "SOWs are not related revisions",
            status_code=400,
            error_code="UNRELATED_REVISIONS",
            details={"previous_root_id": previous_root, "new_root_id": new_root}
        )


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = None,
    details: dict = None
) -> JSONResponse:
    """Create standardized error response"""
    settings = get_settings()

    error_response = {
        "error": {
            "message": message,
            "status_code": status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }

    if error_code:
        error_response["error"]["error_code"] = error_code

    if details and settings.environment != "production":
        error_response["error"]["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=error_response
    )


# Exception handlers
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    level = "ERROR" if exc.status_code >= 500 else "WARNING"
    logger.bind(error_code=exc.error_code, path=request.url.path).log(
        level, f"{exc.error_code or 'API_ERROR'}: {exc.message} (Status: {exc.status_code})"
    )

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP Exception: {exc.detail} (Status: {exc.status_code})")

    return create_error_response(
        status_code=exc.status_code,
        message=exc.detail or "An error occurred",
        error_code="HTTP_ERROR"
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    logger.warning(f"Validation Error: {exc.errors()}")

    # Format validation errors for better readability
    formatted_errors = []
    for error in exc.errors():
        formatted_errors.append({
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        })

    return create_error_response(
        status_code=422,
        message="Validation failed",
        error_code="VALIDATION_ERROR",
        details={"validation_errors": formatted_errors}
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions"""
    settings = get_settings()

    # Generate unique error ID for tracking
    error_id = f"ERR_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{id(exc)}"

    # Log the full traceback
    logger.error(
        f"Unhandled Exception [{error_id}]: {str(exc)}\n"
        f"Request: {request.method} {request.url}\n"
        f"Traceback: {''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}"
    )

    # Don't expose internal errors in production
    details = None
    if settings.environment == "development":
        details = {
            "error_id": error_id,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc)
        }

    return create_error_response(
        status_code=500,
        message="An internal error occurred",
        error_code="INTERNAL_ERROR",
        details=details
    )
