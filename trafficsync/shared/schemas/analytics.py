"""Analytics schemas."""

from datetime import datetime
from typing import Optional, List, Any
from uuid import UUID

from pydantic import BaseModel, Field

from ..db.models import CongestionLevel
from .common import CamelModel


class VehicleTypes(CamelModel):
    """Vehicle-type breakdown of one observation."""
    cars: int = 0
    motorcycles: int = 0
    trucks: int = 0


class TelemetryMetrics(CamelModel):
    """
    Lenient view of a camera metrics payload used to build a sample.

    Devices send arbitrary extra keys; only these are read.
    """
    vehicle_count: int = Field(default=0, ge=0)
    congestion_level: Optional[str] = None
    average_speed: float = Field(default=0.0, ge=0)
    vehicle_types: Optional[VehicleTypes] = None
    junction_id: Optional[UUID] = None


class AnalyticsSampleResponse(CamelModel):
    """Stored analytics sample."""
    id: UUID
    timestamp: datetime
    traffic_volume: int
    congestion_level: CongestionLevel
    average_speed: float
    vehicle_types: dict[str, Any]
    junction_id: Optional[UUID] = None


class AnalyticsRollup(CamelModel):
    """Trailing-window aggregate broadcast as `analyticsUpdate`."""
    average_traffic_volume: float
    average_speed: float
    congestion_levels: List[str]
    vehicle_types_aggregate: List[dict[str, Any]]
    sample_count: int
    window_start: datetime


class DailyAggregate(CamelModel):
    """Per-day aggregate of a historical query."""
    day: str = Field(..., alias="_id")
    average_traffic_volume: float
    average_speed: float
    congestion_levels: List[str]
    vehicle_type_counts: List[dict[str, Any]]


class AnalyticsQueryResponse(CamelModel):
    """Historical analytics query response."""
    raw_data: List[AnalyticsSampleResponse]
    aggregated_data: List[DailyAggregate]


class HourlyTrendItem(CamelModel):
    """One clock-hour bucket of the trailing-day trend."""
    time: str
    traffic_volume: int
    average_congestion: float
    congestion_level: str


class HourlyTrendResponse(BaseModel):
    trend: List[HourlyTrendItem]
