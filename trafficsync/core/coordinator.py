"""Update coordinator: the single path from a mutation intent to a broadcast."""

import hmac
from typing import Any, Optional
from uuid import UUID

from ..shared.db.models import DeviceStatus, SignalMode, utcnow
from ..shared.exceptions import AuthenticationError, NotFoundError
from ..shared.logging import setup_logger
from .aggregator import AnalyticsAggregator
from .bus import Connection, FanoutBus
from .rooms import ADMIN_ROOM, DeviceKind, RoomKey
from .store import WeakConsistencyDeviceStore

logger = setup_logger(__name__)

CONFIG_EVENT = "configUpdate"
CONTROL_EVENT = "controlCommand"

# Fields an update may touch; anything else is ignored
ALLOWED_FIELDS = {
    DeviceKind.camera: frozenset({
        "name", "location", "coordinates", "ip_address",
        "model", "firmware", "status", "settings",
    }),
    DeviceKind.signal: frozenset({
        "name", "location", "coordinates", "ip_address", "status",
        "mode", "current_phase", "remaining_time", "congestion_level", "settings",
    }),
}

# Fields a device must hear about through its own group
SIGNAL_CONTROL_FIELDS = frozenset({"mode", "current_phase"})


def _signal_config(record: dict) -> dict:
    return {
        "mode": record["mode"],
        "currentPhase": record["currentPhase"],
        "remainingTime": record["remainingTime"],
    }


class UpdateCoordinator:
    """
    Applies device mutations to the store and publishes the stored result.

    Every method that mutates returns the canonical record it published to
    the admin group, so callers acknowledge exactly what subscribers saw.
    Updates are read-modify-write against a weak-consistency store: two
    concurrent updates to one device both succeed and the later commit wins.
    """

    def __init__(
        self,
        store: WeakConsistencyDeviceStore,
        bus: FanoutBus,
        aggregator: AnalyticsAggregator,
        device_api_key: str = "",
    ):
        self.store = store
        self.bus = bus
        self.aggregator = aggregator
        self.device_api_key = device_api_key

    # Reads

    async def list_devices(
        self, kind: DeviceKind, status: Optional[DeviceStatus] = None
    ) -> list[dict]:
        return await self.store.list_devices(kind, status)

    async def get_device(self, kind: DeviceKind, device_id: UUID) -> dict:
        record = await self.store.get_device(kind, device_id)
        if record is None:
            raise NotFoundError(f"{kind.label} not found")
        return record

    # Administrative mutations

    async def create_device(self, kind: DeviceKind, fields: dict[str, Any]) -> dict:
        record = await self.store.insert_device(kind, fields)
        await self.bus.publish(ADMIN_ROOM, kind.update_event, record)
        logger.info(f"{kind.label} created: {record['id']}")
        return record

    async def update_device(
        self,
        kind: DeviceKind,
        device_id: UUID,
        fields: dict[str, Any],
    ) -> dict:
        """
        Apply a sparse update and fan it out.

        The full record goes to the admin group. If control-relevant fields
        changed, a narrower `configUpdate` goes to the device's own group:
        the settings object for settings changes, and for signals
        `{mode, currentPhase, remainingTime}` when mode or phase changed.
        """
        accepted = {k: v for k, v in fields.items() if k in ALLOWED_FIELDS[kind]}

        record = await self.store.update_device(kind, device_id, accepted)
        if record is None:
            raise NotFoundError(f"{kind.label} not found")

        await self.bus.publish(ADMIN_ROOM, kind.update_event, record)

        config = self._config_payload(kind, accepted, record)
        if config is not None:
            await self.bus.publish(RoomKey.for_device(kind, device_id), CONFIG_EVENT, config)

        return record

    @staticmethod
    def _config_payload(kind: DeviceKind, accepted: dict, record: dict) -> Optional[dict]:
        if kind is DeviceKind.signal and SIGNAL_CONTROL_FIELDS & accepted.keys():
            return _signal_config(record)
        if "settings" in accepted:
            return record["settings"]
        return None

    async def update_settings(
        self,
        kind: DeviceKind,
        device_id: UUID,
        settings: dict[str, Any],
    ) -> dict:
        """Replace the settings block; the device receives the stored settings."""
        return await self.update_device(kind, device_id, {"settings": settings})

    async def control_signal(
        self,
        device_id: UUID,
        phase: Optional[str] = None,
        duration: Optional[int] = None,
        mode: Optional[str] = None,
    ) -> dict:
        """Manual override: mode defaults to Manual, duration becomes remainingTime."""
        fields: dict[str, Any] = {"mode": mode or SignalMode.Manual.value}
        if phase:
            fields["current_phase"] = phase
        if duration:
            fields["remaining_time"] = f"{duration}s"

        record = await self.store.update_device(DeviceKind.signal, device_id, fields)
        if record is None:
            raise NotFoundError("Signal not found")

        await self.bus.publish(ADMIN_ROOM, DeviceKind.signal.update_event, record)
        await self.bus.publish(
            RoomKey.for_device(DeviceKind.signal, device_id),
            CONTROL_EVENT,
            {"mode": record["mode"], "phase": record["currentPhase"], "duration": duration},
        )
        return record

    async def delete_device(self, kind: DeviceKind, device_id: UUID) -> None:
        """Remove a device and notify admin with an id-only removal notice."""
        if not await self.store.delete_device(kind, device_id):
            raise NotFoundError(f"{kind.label} not found")
        await self.bus.publish(ADMIN_ROOM, kind.removed_event, {"id": str(device_id)})
        logger.info(f"{kind.label} deleted: {device_id}")

    # Device-originated mutations

    def check_device_key(self, api_key: Optional[str]) -> bool:
        # An unset key accepts nothing
        if not self.device_api_key or not api_key:
            return False
        return hmac.compare_digest(api_key.encode(), self.device_api_key.encode())

    async def device_connect(
        self,
        conn: Connection,
        kind: DeviceKind,
        device_id: UUID,
        api_key: Optional[str],
    ) -> dict:
        """
        Mark a device online and subscribe its connection to its own group.

        This is a shared-secret equality check for a trusted network, not a
        device authentication protocol.
        """
        if not self.check_device_key(api_key):
            raise AuthenticationError("Authentication failed")

        record = await self.store.update_device(
            kind, device_id, {"status": DeviceStatus.online.value, "last_seen": utcnow()}
        )
        if record is None:
            raise NotFoundError(f"{kind.label} not found")

        self.bus.join(conn, RoomKey.for_device(kind, device_id))
        await self.bus.publish(ADMIN_ROOM, kind.update_event, record)
        logger.info(f"Device {kind.value}:{device_id} connected")
        return record

    async def device_data(
        self,
        kind: DeviceKind,
        device_id: UUID,
        metrics: dict[str, Any],
    ) -> dict:
        """
        Record a telemetry push.

        Metrics replace the stored block wholesale. Signals also take their
        phase and remaining time from the payload. Camera metrics are handed
        to the aggregator as a separate task whose failure never reaches
        the caller.
        """
        fields: dict[str, Any] = {"last_seen": utcnow(), "metrics": metrics}
        if kind is DeviceKind.signal:
            if metrics.get("currentPhase") is not None:
                fields["current_phase"] = str(metrics["currentPhase"])
            if metrics.get("remainingTime") is not None:
                fields["remaining_time"] = str(metrics["remainingTime"])

        record = await self.store.update_device(kind, device_id, fields)
        if record is None:
            raise NotFoundError(f"{kind.label} not found")

        await self.bus.publish(ADMIN_ROOM, kind.update_event, record)

        if kind is DeviceKind.camera:
            self.aggregator.submit(metrics)
        return record

    # Simulated mutations

    async def apply_simulated(
        self,
        kind: DeviceKind,
        device_id: UUID,
        fields: dict[str, Any],
        conn: Connection,
    ) -> Optional[dict]:
        """Persist a simulated change and show it to the owning connection only."""
        record = await self.store.update_device(kind, device_id, fields)
        if record is not None:
            conn.deliver(kind.update_event, record)
        return record
