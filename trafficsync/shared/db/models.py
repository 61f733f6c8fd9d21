"""SQLAlchemy ORM models for devices, analytics samples and users."""

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    String,
    Integer,
    Float,
    DateTime,
    Enum,
    JSON,
    Index,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# Enums

class UserRole(str, PyEnum):
    """Dashboard user role."""
    ADMIN = "admin"
    OPERATOR = "operator"
    VIEWER = "viewer"


class DeviceStatus(str, PyEnum):
    """Device connectivity status."""
    online = "online"
    offline = "offline"
    warning = "warning"


class SignalMode(str, PyEnum):
    """Signal controller operating mode."""
    AI = "AI"
    Manual = "Manual"
    Scheduled = "Scheduled"


class CongestionLevel(str, PyEnum):
    """Congestion label reported by devices and stored on samples."""
    Low = "Low"
    Medium = "Medium"
    Moderate = "Moderate"
    High = "High"
    Unknown = "Unknown"


def _enum(enum_cls):
    return Enum(enum_cls, values_callable=lambda x: [e.value for e in x])


def default_camera_settings() -> dict:
    return {
        "resolution": "640x480",
        "frameRate": 15,
        "nightMode": False,
        "brightness": 50,
        "contrast": 50,
    }


def default_signal_settings() -> dict:
    return {
        "phases": [],
        "schedule": {"enabled": False, "timings": []},
    }


# Models

class User(Base):
    """Dashboard user account."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        _enum(UserRole), default=UserRole.VIEWER, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class Camera(Base):
    """Roadside camera node."""
    __tablename__ = "cameras"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    coordinates: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)

    # Hardware
    model: Mapped[str] = mapped_column(String(100), default="ESP32-CAM", nullable=False)
    firmware: Mapped[str] = mapped_column(String(50), default="v2.4.1", nullable=False)

    # Connectivity
    status: Mapped[DeviceStatus] = mapped_column(
        _enum(DeviceStatus), default=DeviceStatus.offline, nullable=False
    )
    last_seen: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Latest telemetry, replaced wholesale on every push
    metrics: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    settings: Mapped[dict] = mapped_column(JSON, default=default_camera_settings, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_cameras_status", "status"),
    )


class Signal(Base):
    """Traffic signal controller at a junction."""
    __tablename__ = "signals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    coordinates: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)

    status: Mapped[DeviceStatus] = mapped_column(
        _enum(DeviceStatus), default=DeviceStatus.offline, nullable=False
    )
    mode: Mapped[SignalMode] = mapped_column(
        _enum(SignalMode), default=SignalMode.AI, nullable=False
    )
    # Free-form phase name and display string, not a numeric duration
    current_phase: Mapped[str] = mapped_column(
        String(100), default="North-South Green", nullable=False
    )
    remaining_time: Mapped[str] = mapped_column(String(20), default="0s", nullable=False)
    congestion_level: Mapped[CongestionLevel] = mapped_column(
        _enum(CongestionLevel), default=CongestionLevel.Unknown, nullable=False
    )
    last_seen: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    metrics: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    settings: Mapped[dict] = mapped_column(JSON, default=default_signal_settings, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_signals_status", "status"),
    )


class AnalyticsSample(Base):
    """One telemetry observation. Append-only."""
    __tablename__ = "analytics_samples"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    traffic_volume: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    congestion_level: Mapped[CongestionLevel] = mapped_column(
        _enum(CongestionLevel), default=CongestionLevel.Unknown, nullable=False
    )
    average_speed: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    vehicle_types: Mapped[dict] = mapped_column(JSON, nullable=False)
    # Owning signal, unenforced: telemetry may reference junctions not yet registered
    junction_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    __table_args__ = (
        Index("ix_analytics_samples_timestamp", "timestamp"),
        Index("ix_analytics_samples_junction_ts", "junction_id", "timestamp"),
    )
