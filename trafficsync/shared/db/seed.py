"""Default admin account and demo device set."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..logging import setup_logger
from .database import session_scope
from .models import Camera, Signal, User, UserRole
from .repositories import CameraRepository, SignalRepository, UserRepository

logger = setup_logger(__name__)

DEMO_CAMERAS = [
    {"name": "Junction 1 - North", "location": "Main St & 1st Ave", "ip_address": "192.168.1.11", "status": "online"},
    {"name": "Junction 1 - South", "location": "Main St & 1st Ave", "ip_address": "192.168.1.12", "status": "online"},
    {"name": "Junction 2 - East", "location": "Broadway & 5th St", "ip_address": "192.168.1.13", "status": "offline"},
    {"name": "Junction 3 - West", "location": "Park Ave & 3rd St", "ip_address": "192.168.1.14", "status": "online"},
    {"name": "Highway Entrance", "location": "Highway 101 Entrance", "ip_address": "192.168.1.15", "status": "online"},
    {"name": "CBD Area", "location": "Financial District", "ip_address": "192.168.1.16", "status": "online"},
    {"name": "Shopping Mall", "location": "City Mall Entrance", "ip_address": "192.168.1.17", "status": "warning"},
    {"name": "School Zone", "location": "Elementary School", "ip_address": "192.168.1.18", "status": "online"},
]

DEMO_SIGNALS = [
    {"name": "Junction 1", "location": "Main St & 1st Ave", "status": "online", "mode": "AI",
     "current_phase": "North-South Green", "remaining_time": "35s", "congestion_level": "Medium"},
    {"name": "Junction 2", "location": "Broadway & 5th St", "status": "online", "mode": "AI",
     "current_phase": "East-West Green", "remaining_time": "15s", "congestion_level": "High"},
    {"name": "Junction 3", "location": "Park Ave & 3rd St", "status": "online", "mode": "Manual",
     "current_phase": "All-Way Red", "remaining_time": "5s", "congestion_level": "Low"},
    {"name": "Highway Entrance", "location": "Highway 101 Entrance", "status": "offline", "mode": "Scheduled",
     "current_phase": "Unknown", "remaining_time": "-", "congestion_level": "Unknown"},
]


async def ensure_default_admin(
    session_factory: async_sessionmaker[AsyncSession],
    email: str,
    password_hash: str,
) -> bool:
    """Create the default admin when no admin exists. Returns True if created."""
    async with session_scope(session_factory) as session:
        users = UserRepository(session)
        if await users.admin_exists():
            return False
        await users.create(User(
            name="Admin User",
            email=email,
            password_hash=password_hash,
            role=UserRole.ADMIN,
        ))
    logger.info(f"Default admin user created: {email}")
    return True


async def seed_demo_devices(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert the demo cameras and signals into empty tables. No broadcast."""
    created = 0
    async with session_scope(session_factory) as session:
        cameras = CameraRepository(session)
        if await cameras.count() == 0:
            for fields in DEMO_CAMERAS:
                await cameras.create(Camera(**fields))
            created += len(DEMO_CAMERAS)

        signals = SignalRepository(session)
        if await signals.count() == 0:
            for fields in DEMO_SIGNALS:
                await signals.create(Signal(**fields))
            created += len(DEMO_SIGNALS)

    if created:
        logger.info(f"Seeded {created} demo devices")
    return created
