from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn
from loguru import logger

from sow_diff.api import comparison_router, health_router
from sow_diff.core.config import get_settings
from sow_diff.core.logging_config import configure_logging, RequestLoggingMiddleware
from sow_diff.core.error_handlers import (
    api_error_handler,
    http_exception_handler,
    validation_error_handler,
    general_exception_handler,
    APIError,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the FastAPI application
    """
    # Startup
    configure_logging()
    logger.info("Starting SOW Revision Diff API...")

    yield

    # Shutdown
    logger.info("Shutting down SOW Revision Diff API...")


# Get settings
settings = get_settings()

# Create FastAPI application with conditional docs
app = FastAPI(
    title=settings.app_name,
    description="Field-by-field comparison of Statement of Work revisions",
    version=settings.app_version,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
    lifespan=lifespan
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

# Exception handlers
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include API routes
app.include_router(health_router)  # Health checks at root level
app.include_router(comparison_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint with API information
    """
    return {
        "message": settings.app_name,
        "description": "Field-by-field comparison of Statement of Work revisions",
        "version": settings.app_version,
        "health": "/health",
        "endpoints": {
            "diff": "/api/v1/sows/{sow_id}/diff?compare_with={other_id}"
        }
    }


def main():
    """Run the API server"""
    uvicorn.run(
        "sow_diff.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
