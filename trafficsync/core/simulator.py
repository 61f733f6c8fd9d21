"""Per-connection device simulator."""

import asyncio
import random
from typing import List, Optional
from uuid import UUID

from ..shared.db.models import CongestionLevel, DeviceStatus, utcnow
from ..shared.logging import setup_logger
from .bus import Connection
from .coordinator import UpdateCoordinator
from .rooms import DeviceKind

logger = setup_logger(__name__)

SIGNAL_PHASES = [
    "North-South Green",
    "East-West Green",
    "All-Way Red",
    "North-South Yellow",
    "East-West Yellow",
]

SIMULATED_CONGESTION = [
    CongestionLevel.Low.value,
    CongestionLevel.Medium.value,
    CongestionLevel.High.value,
]

DEGRADED_STATUSES = [DeviceStatus.offline.value, DeviceStatus.warning.value]


class DeviceSimulator:
    """
    Periodic fake device activity for one dashboard connection.

    Changes are persisted through the coordinator and shown only to the
    owning connection. Camera ticks may degrade a camera but never bring
    one online.
    """

    def __init__(
        self,
        coordinator: UpdateCoordinator,
        conn: Connection,
        camera_interval: float = 8.0,
        signal_interval: float = 5.0,
        fault_probability: float = 0.1,
        rng: Optional[random.Random] = None,
    ):
        self.coordinator = coordinator
        self.conn = conn
        self.camera_interval = camera_interval
        self.signal_interval = signal_interval
        self.fault_probability = fault_probability
        self.rng = rng or random.Random()
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._loop(self.camera_interval, self.camera_tick)),
            asyncio.create_task(self._loop(self.signal_interval, self.signal_tick)),
        ]
        logger.debug(f"Simulator started for {self.conn.id}")

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        logger.debug(f"Simulator stopped for {self.conn.id}")

    async def _loop(self, interval: float, tick) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Simulator tick failed: {e}")

    async def camera_tick(self) -> Optional[dict]:
        cameras = await self.coordinator.list_devices(DeviceKind.camera)
        if not cameras:
            return None
        camera = self.rng.choice(cameras)

        fields = {"updated_at": utcnow()}
        if self.rng.random() < self.fault_probability:
            fields["status"] = self.rng.choice(DEGRADED_STATUSES)

        return await self.coordinator.apply_simulated(
            DeviceKind.camera, UUID(camera["id"]), fields, self.conn
        )

    async def signal_tick(self) -> Optional[dict]:
        online = await self.coordinator.list_devices(DeviceKind.signal, DeviceStatus.online)
        if not online:
            return None
        signal = self.rng.choice(online)

        fields = {
            "current_phase": self.rng.choice(SIGNAL_PHASES),
            "remaining_time": f"{self.rng.randint(5, 49)}s",
            "congestion_level": self.rng.choice(SIMULATED_CONGESTION),
        }
        return await self.coordinator.apply_simulated(
            DeviceKind.signal, UUID(signal["id"]), fields, self.conn
        )
