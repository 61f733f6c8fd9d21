import uuid

import pytest

from trafficsync.core.rooms import ADMIN_ROOM, DeviceKind, RoomKey, RoomKind


def test_device_room_keys_are_typed_pairs():
    device_id = uuid.uuid4()
    camera_room = RoomKey.for_device(DeviceKind.camera, device_id)
    signal_room = RoomKey.for_device(DeviceKind.signal, device_id)

    assert camera_room != signal_room
    assert camera_room == RoomKey.for_device("camera", device_id)
    assert camera_room.device_kind is DeviceKind.camera
    assert str(camera_room) == f"camera:{device_id}"


def test_room_key_validation():
    with pytest.raises(ValueError):
        RoomKey(RoomKind.device, DeviceKind.camera)
    with pytest.raises(ValueError):
        RoomKey(RoomKind.admin, DeviceKind.camera, uuid.uuid4())


def test_wire_form_roundtrips_structurally():
    room = RoomKey.for_device(DeviceKind.signal, uuid.uuid4())
    wire = room.to_wire()

    assert wire["kind"] == "device"
    assert wire["deviceKind"] == "signal"
    assert RoomKey.from_wire(wire) == room
    assert RoomKey.from_wire(ADMIN_ROOM.to_wire()) is ADMIN_ROOM


def test_device_kind_events():
    assert DeviceKind.camera.update_event == "cameraUpdate"
    assert DeviceKind.signal.update_event == "signalUpdate"
    assert DeviceKind.camera.removed_event == "cameraDeleted"
    assert DeviceKind.signal.removed_event == "signalRemoved"
