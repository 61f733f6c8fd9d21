import asyncio
import uuid
from datetime import datetime
from typing import Any, List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from trafficsync.core.aggregator import AnalyticsAggregator
from trafficsync.core.bus import Connection, FanoutBus
from trafficsync.core.coordinator import UpdateCoordinator
from trafficsync.core.rooms import DeviceKind
from trafficsync.core.store import SqlDeviceStore, WeakConsistencyDeviceStore
from trafficsync.shared.db import create_engine, create_session_factory, create_tables
from trafficsync.shared.db.models import (
    DeviceStatus,
    default_camera_settings,
    default_signal_settings,
    utcnow,
)
from trafficsync.shared.exceptions import StoreError
from trafficsync.shared.schemas import (
    AnalyticsSampleResponse,
    CameraResponse,
    SignalResponse,
    dump_record,
)
from trafficsync.web.auth import create_access_token
from trafficsync.web.config import WebConfig
from trafficsync.web.main import create_app

DEVICE_KEY = "test-device-key"

_SCHEMAS = {DeviceKind.camera: CameraResponse, DeviceKind.signal: SignalResponse}


def _defaults(kind: DeviceKind) -> dict:
    if kind is DeviceKind.camera:
        return {
            "model": "ESP32-CAM",
            "firmware": "v2.4.1",
            "status": DeviceStatus.offline.value,
            "settings": default_camera_settings(),
        }
    return {
        "status": DeviceStatus.offline.value,
        "mode": "AI",
        "current_phase": "North-South Green",
        "remaining_time": "0s",
        "congestion_level": "Unknown",
        "settings": default_signal_settings(),
    }


class InMemoryDeviceStore(WeakConsistencyDeviceStore):
    """Dict-backed store with a suspension point between read and write."""

    def __init__(self):
        self.devices = {DeviceKind.camera: {}, DeviceKind.signal: {}}
        self.samples: List[dict] = []
        self.fail_samples = False
        self.writes = 0

    def _record(self, kind: DeviceKind, row: dict) -> dict:
        return dump_record(_SCHEMAS[kind].model_validate(row))

    async def list_devices(self, kind, status=None):
        rows = self.devices[kind].values()
        if status is not None:
            rows = [r for r in rows if r["status"] == DeviceStatus(status).value]
        return [self._record(kind, r) for r in rows]

    async def get_device(self, kind, device_id):
        row = self.devices[kind].get(device_id)
        return self._record(kind, row) if row else None

    async def insert_device(self, kind, fields):
        now = utcnow()
        row = _defaults(kind)
        row.update(fields)
        row.update(id=uuid.uuid4(), created_at=now, updated_at=now)
        self.devices[kind][row["id"]] = row
        return self._record(kind, row)

    async def update_device(self, kind, device_id, fields):
        current = self.devices[kind].get(device_id)
        if current is None:
            return None
        row = dict(current)
        await asyncio.sleep(0)
        row.update(fields)
        row["updated_at"] = utcnow()
        self.devices[kind][device_id] = row
        self.writes += 1
        return self._record(kind, row)

    async def delete_device(self, kind, device_id):
        return self.devices[kind].pop(device_id, None) is not None

    async def insert_sample(self, fields):
        if self.fail_samples:
            raise StoreError("sample insert failed")
        row = dict(fields, id=uuid.uuid4())
        self.samples.append(row)
        return dump_record(AnalyticsSampleResponse.model_validate(row))

    def _sample_records(self, rows):
        return [dump_record(AnalyticsSampleResponse.model_validate(r)) for r in rows]

    async def samples_since(self, since: datetime):
        rows = sorted((r for r in self.samples if r["timestamp"] >= since), key=lambda r: r["timestamp"])
        return self._sample_records(rows)

    async def samples_between(self, start, end, junction_id=None):
        rows = [
            r for r in self.samples
            if start <= r["timestamp"] <= end
            and (junction_id is None or r.get("junction_id") == junction_id)
        ]
        rows.sort(key=lambda r: r["timestamp"], reverse=True)
        return self._sample_records(rows)

    async def latest_sample(self) -> Optional[dict]:
        if not self.samples:
            return None
        return self._sample_records([max(self.samples, key=lambda r: r["timestamp"])])[0]


def drain(conn: Connection) -> List[tuple[str, Any]]:
    """Everything queued on a connection, in order."""
    messages = []
    while not conn.outbox.empty():
        messages.append(conn.outbox.get_nowait())
    return messages


def events(conn: Connection) -> List[str]:
    return [event for event, _ in drain(conn)]


@pytest.fixture
def store():
    return InMemoryDeviceStore()


@pytest.fixture
def bus():
    return FanoutBus()


@pytest.fixture
def aggregator(store, bus):
    return AnalyticsAggregator(store, bus)


@pytest.fixture
def coordinator(store, bus, aggregator):
    return UpdateCoordinator(store, bus, aggregator, device_api_key=DEVICE_KEY)


@pytest_asyncio.fixture
async def sql_store():
    engine = create_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield SqlDeviceStore(create_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def app_config():
    cfg = WebConfig()
    cfg.DATABASE_URL = "sqlite+aiosqlite://"
    cfg.AUTO_CREATE_TABLES = True
    cfg.SEED_DEMO_DATA = True
    cfg.DEVICE_API_KEY = DEVICE_KEY
    cfg.FANOUT_BACKEND = "memory"
    cfg.SIMULATION_ENABLED = False
    return cfg


@pytest.fixture
def client(app_config):
    with TestClient(create_app(app_config)) as test_client:
        yield test_client


def auth_headers(role: str = "admin", email: str = "user@traffic.com") -> dict:
    token = create_access_token(user_id=uuid.uuid4(), email=email, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers("admin")


@pytest.fixture
def operator_headers():
    return auth_headers("operator")


@pytest.fixture
def viewer_headers():
    return auth_headers("viewer")
