"""Dashboard API endpoints: read-only views over devices and samples."""

from fastapi import APIRouter

from ..auth import CurrentUser
from ..deps import RuntimeDep

router = APIRouter()


@router.get("/overview")
async def overview(auth: CurrentUser, runtime: RuntimeDep):
    """Device counts, system status, recent device issues and the hourly trend."""
    return await runtime.views.overview()


@router.get("/hotspots")
async def hotspots(auth: CurrentUser, runtime: RuntimeDep):
    """Cameras ranked by congestion and signals ranked by wait time."""
    return await runtime.views.hotspots()


@router.get("/alert-zones")
async def alert_zones(auth: CurrentUser, runtime: RuntimeDep):
    """Congestion and waiting zones derived from current device metrics."""
    return await runtime.views.alert_zones()
