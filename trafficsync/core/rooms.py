"""Typed fan-out group keys."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID


class DeviceKind(str, Enum):
    """Physical device class."""
    camera = "camera"
    signal = "signal"

    @property
    def update_event(self) -> str:
        """Event carrying a full canonical record to the admin group."""
        return "cameraUpdate" if self is DeviceKind.camera else "signalUpdate"

    @property
    def removed_event(self) -> str:
        """Event carrying an id-only deletion notice to the admin group."""
        return "cameraDeleted" if self is DeviceKind.camera else "signalRemoved"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RoomKind(str, Enum):
    """Group category: role-scoped or device-scoped."""
    admin = "admin"
    device = "device"


@dataclass(frozen=True)
class RoomKey:
    """
    Two-part group key.

    The admin group has no device part; device groups carry the device
    kind and id as separate typed fields, never a joined string.
    """
    kind: RoomKind
    device_kind: Optional[DeviceKind] = None
    device_id: Optional[UUID] = None

    def __post_init__(self):
        if self.kind is RoomKind.device:
            if self.device_kind is None or self.device_id is None:
                raise ValueError("device rooms need a device kind and id")
        elif self.device_kind is not None or self.device_id is not None:
            raise ValueError("the admin room has no device part")

    @classmethod
    def for_device(cls, device_kind: DeviceKind, device_id: UUID) -> "RoomKey":
        return cls(RoomKind.device, DeviceKind(device_kind), device_id)

    def to_wire(self) -> dict:
        """Structured form carried in relay envelopes."""
        return {
            "kind": self.kind.value,
            "deviceKind": self.device_kind.value if self.device_kind else None,
            "deviceId": str(self.device_id) if self.device_id else None,
        }

    @classmethod
    def from_wire(cls, data: dict) -> "RoomKey":
        kind = RoomKind(data["kind"])
        if kind is RoomKind.admin:
            return ADMIN_ROOM
        return cls.for_device(DeviceKind(data["deviceKind"]), UUID(data["deviceId"]))

    def __str__(self) -> str:
        if self.kind is RoomKind.admin:
            return "admin"
        return f"{self.device_kind.value}:{self.device_id}"


ADMIN_ROOM = RoomKey(RoomKind.admin)
