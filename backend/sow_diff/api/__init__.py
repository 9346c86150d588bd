from .comparison import router as comparison_router
from .health import router as health_router

__all__ = ["comparison_router", "health_router"]
