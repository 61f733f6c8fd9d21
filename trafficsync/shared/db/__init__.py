"""Database module with async SQLAlchemy support."""

from .database import (
    create_engine,
    create_session_factory,
    create_tables,
    normalize_database_url,
    session_scope,
)
from .models import (
    Base,
    User,
    Camera,
    Signal,
    AnalyticsSample,
    UserRole,
    DeviceStatus,
    SignalMode,
    CongestionLevel,
    utcnow,
)

__all__ = [
    # Database functions
    "create_engine",
    "create_session_factory",
    "create_tables",
    "normalize_database_url",
    "session_scope",
    # Models
    "Base",
    "User",
    "Camera",
    "Signal",
    "AnalyticsSample",
    # Enums
    "UserRole",
    "DeviceStatus",
    "SignalMode",
    "CongestionLevel",
    "utcnow",
]
