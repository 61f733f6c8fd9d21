"""Live channel session: per-connection event dispatch."""

from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from ..shared.db.models import UserRole
from ..shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    TrafficSyncError,
    ValidationFailure,
)
from ..shared.logging import setup_logger
from ..shared.schemas import (
    CameraUpdate,
    ControlPayload,
    DeviceConnectPayload,
    DeviceDataPayload,
    SignalUpdate,
    sparse_fields,
)
from .aggregator import AnalyticsAggregator
from .bus import Connection, FanoutBus
from .coordinator import UpdateCoordinator
from .rooms import ADMIN_ROOM, DeviceKind
from .simulator import DeviceSimulator

logger = setup_logger(__name__)

ERROR_EVENT = "error"
INITIAL_EVENT = "initialData"

CONTROL_ROLES = (UserRole.ADMIN.value, UserRole.OPERATOR.value)

_UPDATE_SCHEMAS = {
    DeviceKind.camera: CameraUpdate,
    DeviceKind.signal: SignalUpdate,
}

# Verifies a bearer token; returns an object with `user_id` and `role`, or None
TokenVerifier = Callable[[str], Optional[Any]]


class LiveSession:
    """
    Event handling for one live connection.

    Handlers return their result so the transport can acknowledge it.
    A failing handler sends an `error` event to this connection only and
    returns None; nothing is published for it.
    """

    def __init__(
        self,
        conn: Connection,
        bus: FanoutBus,
        coordinator: UpdateCoordinator,
        aggregator: AnalyticsAggregator,
        verify_token: TokenVerifier,
        simulator: Optional[DeviceSimulator] = None,
    ):
        self.conn = conn
        self.bus = bus
        self.coordinator = coordinator
        self.aggregator = aggregator
        self.verify_token = verify_token
        self.simulator = simulator
        self.identity: Optional[Any] = None

        self._handlers: Dict[str, Callable[[Any], Awaitable[Any]]] = {
            "authenticate": self.on_authenticate,
            "cameraControl": self.on_camera_control,
            "signalControl": self.on_signal_control,
            "deviceConnect": self.on_device_connect,
            "deviceData": self.on_device_data,
        }

    async def open(self) -> None:
        """Send the initial snapshot, then start simulation if configured."""
        self.conn.deliver(INITIAL_EVENT, await self.snapshot())
        if self.simulator is not None:
            self.simulator.start()

    async def close(self) -> None:
        if self.simulator is not None:
            await self.simulator.stop()

    async def snapshot(self) -> dict:
        return {
            "cameras": await self.coordinator.list_devices(DeviceKind.camera),
            "signals": await self.coordinator.list_devices(DeviceKind.signal),
            "analytics": await self.aggregator.current_rollup(),
        }

    async def handle(self, event: str, data: Any) -> Any:
        handler = self._handlers.get(event) if isinstance(event, str) else None
        if handler is None:
            self.conn.deliver(ERROR_EVENT, {"message": f"Unknown event: {event}"})
            return None

        try:
            return await handler(data)
        except ValidationError:
            self._fail(event, ValidationFailure())
        except TrafficSyncError as e:
            self._fail(event, e)
        except Exception:
            logger.exception(f"Unhandled error in '{event}' for {self.conn.id}")
            self.conn.deliver(ERROR_EVENT, {"message": "Server error"})
        return None

    def _fail(self, event: str, error: TrafficSyncError) -> None:
        logger.warning(f"'{event}' rejected for {self.conn.id}: {error.message}")
        self.conn.deliver(ERROR_EVENT, {"message": error.message})

    # Handlers

    async def on_authenticate(self, data: Any) -> dict:
        token = data.get("token") if isinstance(data, dict) else data
        identity = self.verify_token(token) if isinstance(token, str) and token else None
        if identity is None:
            raise AuthenticationError("Invalid token")

        self.identity = identity
        self.bus.join(self.conn, ADMIN_ROOM)
        logger.info(f"User {identity.user_id} joined admin room")
        return {"authenticated": True, "role": identity.role}

    def _require_operator(self) -> None:
        if self.identity is None:
            raise AuthenticationError()
        if self.identity.role not in CONTROL_ROLES:
            raise AuthorizationError()

    async def _control(self, kind: DeviceKind, data: Any) -> dict:
        self._require_operator()
        payload = ControlPayload.model_validate(data)
        update = _UPDATE_SCHEMAS[kind].model_validate(payload.settings)
        return await self.coordinator.update_device(kind, payload.id, sparse_fields(update))

    async def on_camera_control(self, data: Any) -> dict:
        return await self._control(DeviceKind.camera, data)

    async def on_signal_control(self, data: Any) -> dict:
        return await self._control(DeviceKind.signal, data)

    async def on_device_connect(self, data: Any) -> dict:
        payload = DeviceConnectPayload.model_validate(data)
        self.conn.label = payload.type
        return await self.coordinator.device_connect(
            self.conn, DeviceKind(payload.type), payload.id, payload.api_key
        )

    async def on_device_data(self, data: Any) -> dict:
        payload = DeviceDataPayload.model_validate(data)
        return await self.coordinator.device_data(
            DeviceKind(payload.type), payload.id, payload.metrics
        )
