"""Signal schemas."""

from datetime import datetime
from typing import Optional, List, Any
from uuid import UUID

from pydantic import BaseModel, Field

from ..db.models import DeviceStatus, SignalMode, CongestionLevel
from .common import CamelModel, Coordinates


class SignalPhase(CamelModel):
    """One phase of the signal cycle."""
    name: str
    duration: int = Field(..., ge=0)


class ScheduleTiming(CamelModel):
    """Weekly schedule entry."""
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str
    end_time: str
    mode: str


class SignalSchedule(CamelModel):
    enabled: bool = False
    timings: List[ScheduleTiming] = Field(default_factory=list)


class SignalSettings(CamelModel):
    """Phase plan and schedule pushed to the signal controller."""
    phases: List[SignalPhase] = Field(default_factory=list)
    schedule: SignalSchedule = Field(default_factory=SignalSchedule)


MODE_PATTERN = "^(AI|Manual|Scheduled)$"
CONGESTION_PATTERN = "^(Low|Medium|Moderate|High|Unknown)$"


class SignalCreate(CamelModel):
    """Create signal request schema."""
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = Field(None, max_length=45)
    mode: Optional[str] = Field(None, pattern=MODE_PATTERN)
    settings: Optional[SignalSettings] = None


class SignalUpdate(CamelModel):
    """Update signal request schema. Unknown fields are ignored."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = Field(None, max_length=45)
    status: Optional[str] = Field(None, pattern="^(online|offline|warning)$")
    mode: Optional[str] = Field(None, pattern=MODE_PATTERN)
    current_phase: Optional[str] = Field(None, min_length=1, max_length=100)
    remaining_time: Optional[str] = Field(None, max_length=20)
    congestion_level: Optional[str] = Field(None, pattern=CONGESTION_PATTERN)


class SignalSettingsUpdate(BaseModel):
    """Replace signal settings request schema."""
    settings: SignalSettings


class SignalControlRequest(CamelModel):
    """Manual signal control request schema."""
    phase: Optional[str] = Field(None, min_length=1, max_length=100)
    duration: Optional[int] = Field(None, ge=1, le=3600)
    mode: Optional[str] = Field(None, pattern=MODE_PATTERN)


class SignalResponse(CamelModel):
    """Signal response schema (canonical stored record)."""
    id: UUID
    name: str
    location: str
    coordinates: Optional[Coordinates] = None
    ip_address: Optional[str] = None
    status: DeviceStatus
    mode: SignalMode
    current_phase: str
    remaining_time: str
    congestion_level: CongestionLevel
    last_seen: Optional[datetime] = None
    metrics: Optional[dict[str, Any]] = None
    settings: SignalSettings
    created_at: datetime
    updated_at: Optional[datetime] = None
