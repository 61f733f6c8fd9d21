"""Camera schemas."""

from datetime import datetime
from typing import Optional, Any
from uuid import UUID

from pydantic import BaseModel, Field

from ..db.models import DeviceStatus
from .common import CamelModel, Coordinates


class CameraSettings(CamelModel):
    """Capture settings pushed to the camera firmware."""
    resolution: str = "640x480"
    frame_rate: int = Field(default=15, ge=1, le=120)
    night_mode: bool = False
    brightness: int = Field(default=50, ge=0, le=100)
    contrast: int = Field(default=50, ge=0, le=100)


class CameraCreate(CamelModel):
    """Create camera request schema."""
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = Field(None, max_length=45)
    model: Optional[str] = Field(None, max_length=100)
    firmware: Optional[str] = Field(None, max_length=50)
    settings: Optional[CameraSettings] = None


class CameraUpdate(CamelModel):
    """Update camera request schema. Unknown fields are ignored."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = Field(None, max_length=45)
    model: Optional[str] = Field(None, max_length=100)
    firmware: Optional[str] = Field(None, max_length=50)
    status: Optional[str] = Field(None, pattern="^(online|offline|warning)$")
    settings: Optional[CameraSettings] = None


class CameraSettingsUpdate(BaseModel):
    """Replace camera settings request schema."""
    settings: CameraSettings


class CameraResponse(CamelModel):
    """Camera response schema (canonical stored record)."""
    id: UUID
    name: str
    location: str
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = None
    model: str
    firmware: str
    status: DeviceStatus
    last_seen: Optional[datetime] = None
    metrics: Optional[dict[str, Any]] = None
    settings: CameraSettings
    created_at: datetime
    updated_at: Optional[datetime] = None
