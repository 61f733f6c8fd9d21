"""Core synchronization logic: rooms, fan-out, coordination, analytics."""

from .rooms import ADMIN_ROOM, DeviceKind, RoomKey, RoomKind
from .bus import Connection, FanoutBus, FanoutRelay
from .store import SqlDeviceStore, WeakConsistencyDeviceStore
from .aggregator import AnalyticsAggregator
from .coordinator import UpdateCoordinator
from .simulator import DeviceSimulator
from .session import LiveSession
from .views import DashboardViews

__all__ = [
    "ADMIN_ROOM",
    "DeviceKind",
    "RoomKey",
    "RoomKind",
    "Connection",
    "FanoutBus",
    "FanoutRelay",
    "SqlDeviceStore",
    "WeakConsistencyDeviceStore",
    "AnalyticsAggregator",
    "UpdateCoordinator",
    "DeviceSimulator",
    "LiveSession",
    "DashboardViews",
]
