"""Live channel payload schemas (client to server)."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from .common import CamelModel

DEVICE_TYPE_PATTERN = "^(camera|signal)$"


class ControlPayload(BaseModel):
    """`cameraControl` / `signalControl` payload: a sparse device field set."""
    id: UUID
    settings: dict[str, Any] = Field(default_factory=dict)


class DeviceConnectPayload(CamelModel):
    """`deviceConnect` payload."""
    type: str = Field(..., pattern=DEVICE_TYPE_PATTERN)
    id: UUID
    api_key: str = ""


class DeviceDataPayload(BaseModel):
    """`deviceData` payload."""
    type: str = Field(..., pattern=DEVICE_TYPE_PATTERN)
    id: UUID
    metrics: dict[str, Any] = Field(default_factory=dict)
