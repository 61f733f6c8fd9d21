"""Web service configuration from environment variables."""

import os

from ..shared.db.database import DATABASE_URL
from ..shared.redis.client import REDIS_URL


def _flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() == "true"


def _production() -> bool:
    return os.getenv("ENVIRONMENT", "").lower() == "production"


class WebConfig:
    """Configuration for web service."""

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))

    # Security
    JWT_SECRET: str = os.getenv("JWT_SECRET", "CHANGE_ME_IN_PRODUCTION")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "720"))
    DEVICE_API_KEY: str = os.getenv("DEVICE_API_KEY", "")

    # Storage
    DATABASE_URL: str = DATABASE_URL
    AUTO_CREATE_TABLES: bool = _flag("AUTO_CREATE_TABLES", not _production())

    # Fan-out
    FANOUT_BACKEND: str = os.getenv("FANOUT_BACKEND", "memory").lower()
    REDIS_URL: str = REDIS_URL
    OUTBOX_SIZE: int = int(os.getenv("OUTBOX_SIZE", "100"))

    # CORS
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Analytics
    ANALYTICS_WINDOW_HOURS: float = float(os.getenv("ANALYTICS_WINDOW_HOURS", "24"))

    # Simulation
    SIMULATION_ENABLED: bool = _flag("SIMULATION_ENABLED", False)
    SIMULATION_CAMERA_INTERVAL: float = float(os.getenv("SIMULATION_CAMERA_INTERVAL", "8"))
    SIMULATION_SIGNAL_INTERVAL: float = float(os.getenv("SIMULATION_SIGNAL_INTERVAL", "5"))

    # Demo data
    SEED_DEMO_DATA: bool = _flag("SEED_DEMO_DATA", not _production())
    DEFAULT_ADMIN_EMAIL: str = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@traffic.com")
    DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production."""
        return _production()

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings."""
        warnings = []

        if self.JWT_SECRET == "CHANGE_ME_IN_PRODUCTION":
            if self.is_production():
                raise ValueError("JWT_SECRET must be set in production!")
            warnings.append("Using default JWT_SECRET - not safe for production")

        if not self.DEVICE_API_KEY:
            warnings.append("DEVICE_API_KEY is not set - every device connect will be rejected")

        if self.FANOUT_BACKEND not in ("memory", "redis"):
            raise ValueError(f"Unknown FANOUT_BACKEND: {self.FANOUT_BACKEND}")

        return warnings


config = WebConfig()
