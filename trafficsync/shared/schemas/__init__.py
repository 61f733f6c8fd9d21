"""Pydantic schemas for API requests, responses and live messages."""

from .common import CamelModel, Coordinates, MessageResponse, dump_record, sparse_fields
from .auth import (
    LoginRequest,
    RegisterRequest,
    LoginResponse,
    UserResponse,
    IdentityResponse,
)
from .camera import (
    CameraSettings,
    CameraCreate,
    CameraUpdate,
    CameraSettingsUpdate,
    CameraResponse,
)
from .signal import (
    SignalSettings,
    SignalCreate,
    SignalUpdate,
    SignalSettingsUpdate,
    SignalControlRequest,
    SignalResponse,
)
from .analytics import (
    TelemetryMetrics,
    AnalyticsSampleResponse,
    AnalyticsRollup,
    DailyAggregate,
    AnalyticsQueryResponse,
    HourlyTrendItem,
    HourlyTrendResponse,
)
from .live import ControlPayload, DeviceConnectPayload, DeviceDataPayload

__all__ = [
    # Common
    "CamelModel",
    "Coordinates",
    "MessageResponse",
    "dump_record",
    "sparse_fields",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "LoginResponse",
    "UserResponse",
    "IdentityResponse",
    # Camera
    "CameraSettings",
    "CameraCreate",
    "CameraUpdate",
    "CameraSettingsUpdate",
    "CameraResponse",
    # Signal
    "SignalSettings",
    "SignalCreate",
    "SignalUpdate",
    "SignalSettingsUpdate",
    "SignalControlRequest",
    "SignalResponse",
    # Analytics
    "TelemetryMetrics",
    "AnalyticsSampleResponse",
    "AnalyticsRollup",
    "DailyAggregate",
    "AnalyticsQueryResponse",
    "HourlyTrendItem",
    "HourlyTrendResponse",
    # Live channel
    "ControlPayload",
    "DeviceConnectPayload",
    "DeviceDataPayload",
]
