import asyncio
import random
import uuid

import pytest

from conftest import drain
from trafficsync.core.bus import Connection
from trafficsync.core.rooms import ADMIN_ROOM, DeviceKind
from trafficsync.core.simulator import SIGNAL_PHASES, DeviceSimulator


@pytest.fixture
def owner():
    return Connection()


@pytest.mark.asyncio
async def test_camera_tick_never_brings_camera_online(coordinator, owner, store):
    created = await coordinator.create_device(DeviceKind.camera, {"name": "A", "location": "B"})
    simulator = DeviceSimulator(coordinator, owner, fault_probability=1.0, rng=random.Random(3))

    for _ in range(20):
        record = await simulator.camera_tick()
        assert record["status"] in {"offline", "warning"}

    stored = store.devices[DeviceKind.camera][uuid.UUID(created["id"])]
    assert stored["status"] in {"offline", "warning"}


@pytest.mark.asyncio
async def test_signal_tick_only_touches_online_signals(coordinator, owner, bus):
    admin = Connection()
    bus.join(admin, ADMIN_ROOM)
    await coordinator.create_device(DeviceKind.signal, {"name": "Off", "location": "L"})
    online = await coordinator.create_device(
        DeviceKind.signal, {"name": "On", "location": "L", "status": "online"}
    )
    drain(admin)
    simulator = DeviceSimulator(coordinator, owner, rng=random.Random(7))

    record = await simulator.signal_tick()

    assert record["id"] == online["id"]
    assert record["currentPhase"] in SIGNAL_PHASES
    assert record["congestionLevel"] in {"Low", "Medium", "High"}
    assert 5 <= int(record["remainingTime"].rstrip("s")) <= 49
    assert drain(owner) == [("signalUpdate", record)]
    assert drain(admin) == []


@pytest.mark.asyncio
async def test_signal_tick_without_online_signals(coordinator, owner):
    simulator = DeviceSimulator(coordinator, owner)
    assert await simulator.signal_tick() is None


@pytest.mark.asyncio
async def test_stop_cancels_tasks(coordinator, owner):
    await coordinator.create_device(DeviceKind.camera, {"name": "A", "location": "B"})
    simulator = DeviceSimulator(coordinator, owner, camera_interval=0.01, signal_interval=0.01)

    simulator.start()
    assert simulator.running
    await asyncio.sleep(0.05)
    await simulator.stop()

    assert not simulator.running
    assert any(event == "cameraUpdate" for event, _ in drain(owner))
