"""
Health check endpoints
"""
from fastapi import APIRouter
from datetime import datetime, timezone
from typing import Dict, Any

from sow_diff.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Dict[str, Any])
async def basic_health_check():
    """
    Basic health check endpoint for load balancers
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "version": settings.app_version
    }
