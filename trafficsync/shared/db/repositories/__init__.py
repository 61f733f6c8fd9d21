"""Database repositories."""

from .base import Repository
from .users import UserRepository
from .cameras import CameraRepository
from .signals import SignalRepository
from .analytics import AnalyticsRepository

__all__ = [
    "Repository",
    "UserRepository",
    "CameraRepository",
    "SignalRepository",
    "AnalyticsRepository",
]
