import pytest
import pytest_asyncio

from trafficsync.shared.db import create_engine, create_session_factory, create_tables, session_scope
from trafficsync.shared.db.repositories import CameraRepository, SignalRepository, UserRepository
from trafficsync.shared.db.seed import (
    DEMO_CAMERAS,
    DEMO_SIGNALS,
    ensure_default_admin,
    seed_demo_devices,
)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.mark.asyncio
async def test_default_admin_created_once(session_factory):
    assert await ensure_default_admin(session_factory, "admin@traffic.com", "hash") is True
    assert await ensure_default_admin(session_factory, "other@traffic.com", "hash") is False

    async with session_scope(session_factory) as session:
        users = UserRepository(session)
        admin = await users.get_by_email("admin@traffic.com")
        assert admin.role.value == "admin"
        assert await users.count() == 1


@pytest.mark.asyncio
async def test_demo_devices_seed_empty_tables_only(session_factory):
    assert await seed_demo_devices(session_factory) == len(DEMO_CAMERAS) + len(DEMO_SIGNALS)
    assert await seed_demo_devices(session_factory) == 0

    async with session_scope(session_factory) as session:
        assert await CameraRepository(session).count() == len(DEMO_CAMERAS)
        assert await SignalRepository(session).count() == len(DEMO_SIGNALS)
