"""Signal API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from ...core.rooms import DeviceKind
from ...shared.schemas import (
    MessageResponse,
    SignalControlRequest,
    SignalCreate,
    SignalResponse,
    SignalSettingsUpdate,
    SignalUpdate,
    sparse_fields,
)
from ..auth import AdminUser, CurrentUser, OperatorUser
from ..deps import RuntimeDep

router = APIRouter()


@router.get("", response_model=list[SignalResponse])
async def list_signals(auth: CurrentUser, runtime: RuntimeDep):
    """List all signals."""
    return await runtime.coordinator.list_devices(DeviceKind.signal)


@router.get("/{signal_id}", response_model=SignalResponse)
async def get_signal(signal_id: UUID, auth: CurrentUser, runtime: RuntimeDep):
    """Get a signal by ID."""
    return await runtime.coordinator.get_device(DeviceKind.signal, signal_id)


@router.post("", response_model=SignalResponse, status_code=status.HTTP_201_CREATED)
async def create_signal(request: SignalCreate, auth: OperatorUser, runtime: RuntimeDep):
    """Register a new signal. Operator or admin only."""
    return await runtime.coordinator.create_device(DeviceKind.signal, sparse_fields(request))


@router.put("/{signal_id}", response_model=SignalResponse)
async def update_signal(
    signal_id: UUID,
    request: SignalUpdate,
    auth: OperatorUser,
    runtime: RuntimeDep,
):
    """
    Update a signal. Operator or admin only.

    A mode or phase change is also pushed to the signal as `configUpdate`
    with `{mode, currentPhase, remainingTime}`.
    """
    return await runtime.coordinator.update_device(
        DeviceKind.signal, signal_id, sparse_fields(request)
    )


@router.put("/{signal_id}/settings", response_model=SignalResponse)
async def update_signal_settings(
    signal_id: UUID,
    request: SignalSettingsUpdate,
    auth: OperatorUser,
    runtime: RuntimeDep,
):
    """Replace the phase plan and schedule. Operator or admin only."""
    return await runtime.coordinator.update_settings(
        DeviceKind.signal, signal_id, sparse_fields(request)["settings"]
    )


@router.post("/{signal_id}/control", response_model=SignalResponse)
async def control_signal(
    signal_id: UUID,
    request: SignalControlRequest,
    auth: OperatorUser,
    runtime: RuntimeDep,
):
    """
    Manual signal control. Operator or admin only.

    Mode defaults to Manual; the signal receives a `controlCommand`.
    """
    return await runtime.coordinator.control_signal(
        signal_id,
        phase=request.phase,
        duration=request.duration,
        mode=request.mode,
    )


@router.delete("/{signal_id}", response_model=MessageResponse)
async def delete_signal(signal_id: UUID, auth: AdminUser, runtime: RuntimeDep):
    """Delete a signal. Admin only."""
    await runtime.coordinator.delete_device(DeviceKind.signal, signal_id)
    return MessageResponse(message="Signal deleted successfully")
