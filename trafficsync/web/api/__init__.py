"""REST API and live channel routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .cameras import router as cameras_router
from .signals import router as signals_router
from .analytics import router as analytics_router
from .dashboard import router as dashboard_router
from .sse import router as sse_router
from .live import router as live_router

# Create main API router
router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(cameras_router, prefix="/cameras", tags=["cameras"])
router.include_router(signals_router, prefix="/signals", tags=["signals"])
router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
router.include_router(sse_router, tags=["sse"])

__all__ = ["router", "live_router"]
