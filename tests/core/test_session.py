import uuid

import pytest
import pytest_asyncio

from conftest import DEVICE_KEY, drain
from trafficsync.core.bus import Connection
from trafficsync.core.rooms import ADMIN_ROOM, DeviceKind, RoomKey
from trafficsync.core.session import LiveSession


class Identity:
    def __init__(self, role):
        self.user_id = uuid.uuid4()
        self.role = role


TOKENS = {
    "admin-token": Identity("admin"),
    "operator-token": Identity("operator"),
    "viewer-token": Identity("viewer"),
}


@pytest.fixture
def make_session(bus, coordinator, aggregator):
    def factory():
        conn = Connection()
        bus.register(conn)
        return LiveSession(conn, bus, coordinator, aggregator, TOKENS.get)
    return factory


@pytest_asyncio.fixture
async def camera(coordinator):
    return await coordinator.create_device(DeviceKind.camera, {"name": "A", "location": "B"})


@pytest.mark.asyncio
async def test_open_sends_initial_snapshot(make_session, camera):
    session = make_session()
    await session.open()

    [(event, data)] = drain(session.conn)
    assert event == "initialData"
    assert data["cameras"] == [camera]
    assert data["signals"] == []
    assert data["analytics"] is None


@pytest.mark.asyncio
async def test_authenticate_joins_admin(make_session, bus):
    session = make_session()

    result = await session.handle("authenticate", "viewer-token")

    assert result == {"authenticated": True, "role": "viewer"}
    assert bus.is_member(session.conn, ADMIN_ROOM)


@pytest.mark.asyncio
async def test_bad_token_reports_error_to_origin_only(make_session, bus):
    session = make_session()
    bystander = make_session()
    bus.join(bystander.conn, ADMIN_ROOM)

    assert await session.handle("authenticate", {"token": "forged"}) is None

    assert drain(session.conn) == [("error", {"message": "Invalid token"})]
    assert drain(bystander.conn) == []
    assert not bus.is_member(session.conn, ADMIN_ROOM)


@pytest.mark.asyncio
async def test_camera_control_requires_operator(make_session, camera):
    session = make_session()
    await session.handle("authenticate", "viewer-token")

    result = await session.handle(
        "cameraControl", {"id": camera["id"], "settings": {"status": "warning"}}
    )

    assert result is None
    assert drain(session.conn)[-1] == ("error", {"message": "Insufficient permissions"})


@pytest.mark.asyncio
async def test_camera_control_unauthenticated(make_session, camera):
    session = make_session()

    await session.handle("cameraControl", {"id": camera["id"], "settings": {}})

    assert drain(session.conn) == [("error", {"message": "Authentication required"})]


@pytest.mark.asyncio
async def test_signal_control_updates_and_broadcasts(make_session, coordinator, bus):
    signal = await coordinator.create_device(DeviceKind.signal, {"name": "J", "location": "L"})
    signal_id = uuid.UUID(signal["id"])
    device = Connection()
    bus.join(device, RoomKey.for_device(DeviceKind.signal, signal_id))
    session = make_session()
    await session.handle("authenticate", "operator-token")
    drain(session.conn)

    result = await session.handle(
        "signalControl",
        {"id": signal["id"], "settings": {"mode": "Manual", "currentPhase": "All-Way Red", "junk": 1}},
    )

    assert result["mode"] == "Manual"
    assert drain(session.conn) == [("signalUpdate", result)]
    assert drain(device) == [
        ("configUpdate", {"mode": "Manual", "currentPhase": "All-Way Red", "remainingTime": "0s"})
    ]


@pytest.mark.asyncio
async def test_control_of_missing_device_reports_not_found(make_session):
    session = make_session()
    await session.handle("authenticate", "admin-token")
    drain(session.conn)

    await session.handle("cameraControl", {"id": str(uuid.uuid4()), "settings": {"name": "x"}})

    assert drain(session.conn) == [("error", {"message": "Camera not found"})]


@pytest.mark.asyncio
async def test_device_connect_and_data(make_session, bus, camera, aggregator):
    session = make_session()
    camera_id = uuid.UUID(camera["id"])

    record = await session.handle(
        "deviceConnect", {"type": "camera", "id": camera["id"], "apiKey": DEVICE_KEY}
    )
    assert record["status"] == "online"
    assert bus.is_member(session.conn, RoomKey.for_device(DeviceKind.camera, camera_id))

    record = await session.handle(
        "deviceData", {"type": "camera", "id": camera["id"], "metrics": {"vehicleCount": 3}}
    )
    assert record["metrics"] == {"vehicleCount": 3}
    await aggregator.drain()


@pytest.mark.asyncio
async def test_device_connect_bad_key(make_session, bus, camera):
    session = make_session()

    await session.handle("deviceConnect", {"type": "camera", "id": camera["id"], "apiKey": "nope"})

    assert drain(session.conn) == [("error", {"message": "Authentication failed"})]
    assert bus.rooms_of(session.conn) == set()


@pytest.mark.asyncio
async def test_malformed_payload_is_rejected(make_session):
    session = make_session()

    await session.handle("deviceData", {"type": "toaster", "id": "nope"})

    assert drain(session.conn) == [("error", {"message": "Invalid request"})]


@pytest.mark.asyncio
async def test_unknown_event(make_session):
    session = make_session()

    assert await session.handle("reboot", {}) is None
    assert drain(session.conn) == [("error", {"message": "Unknown event: reboot"})]


@pytest.mark.asyncio
async def test_non_string_event_is_rejected(make_session):
    session = make_session()

    assert await session.handle(["cameraControl"], {}) is None
    assert drain(session.conn) == [("error", {"message": "Unknown event: ['cameraControl']"})]
