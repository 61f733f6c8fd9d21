"""Camera API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from ...core.rooms import DeviceKind
from ...shared.schemas import (
    CameraCreate,
    CameraResponse,
    CameraSettingsUpdate,
    CameraUpdate,
    MessageResponse,
    sparse_fields,
)
from ..auth import AdminUser, CurrentUser, OperatorUser
from ..deps import RuntimeDep

router = APIRouter()


@router.get("", response_model=list[CameraResponse])
async def list_cameras(auth: CurrentUser, runtime: RuntimeDep):
    """List all cameras."""
    return await runtime.coordinator.list_devices(DeviceKind.camera)


@router.get("/{camera_id}", response_model=CameraResponse)
async def get_camera(camera_id: UUID, auth: CurrentUser, runtime: RuntimeDep):
    """Get a camera by ID."""
    return await runtime.coordinator.get_device(DeviceKind.camera, camera_id)


@router.post("", response_model=CameraResponse, status_code=status.HTTP_201_CREATED)
async def create_camera(request: CameraCreate, auth: OperatorUser, runtime: RuntimeDep):
    """Register a new camera. Operator or admin only."""
    return await runtime.coordinator.create_device(DeviceKind.camera, sparse_fields(request))


@router.put("/{camera_id}", response_model=CameraResponse)
async def update_camera(
    camera_id: UUID,
    request: CameraUpdate,
    auth: OperatorUser,
    runtime: RuntimeDep,
):
    """
    Update a camera. Operator or admin only.

    Settings changes are also pushed to the camera as `configUpdate`.
    """
    return await runtime.coordinator.update_device(
        DeviceKind.camera, camera_id, sparse_fields(request)
    )


@router.put("/{camera_id}/settings", response_model=CameraResponse)
async def update_camera_settings(
    camera_id: UUID,
    request: CameraSettingsUpdate,
    auth: OperatorUser,
    runtime: RuntimeDep,
):
    """Replace camera settings. Operator or admin only."""
    return await runtime.coordinator.update_settings(
        DeviceKind.camera, camera_id, sparse_fields(request)["settings"]
    )


@router.delete("/{camera_id}", response_model=MessageResponse)
async def delete_camera(camera_id: UUID, auth: AdminUser, runtime: RuntimeDep):
    """Delete a camera. Admin only."""
    await runtime.coordinator.delete_device(DeviceKind.camera, camera_id)
    return MessageResponse(message="Camera deleted successfully")
