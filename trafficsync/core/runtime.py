"""Process-wide wiring of store, bus, aggregator and coordinator."""

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..shared.db.database import create_engine, create_session_factory, create_tables
from ..shared.logging import setup_logger
from ..shared.redis import RedisClient, RedisFanoutRelay
from .aggregator import AnalyticsAggregator
from .bus import Connection, FanoutBus
from .coordinator import UpdateCoordinator
from .session import LiveSession, TokenVerifier
from .simulator import DeviceSimulator
from .store import SqlDeviceStore
from .views import DashboardViews

logger = setup_logger(__name__)


@dataclass
class Runtime:
    """Everything one server process owns, built once per application."""

    config: Any
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    store: SqlDeviceStore
    bus: FanoutBus
    aggregator: AnalyticsAggregator
    coordinator: UpdateCoordinator
    views: DashboardViews

    async def start(self) -> None:
        if self.config.AUTO_CREATE_TABLES:
            await create_tables(self.engine)
            logger.info("Database tables ensured")
        await self.bus.start()

    async def stop(self) -> None:
        await self.aggregator.drain()
        await self.bus.stop()
        await self.engine.dispose()

    def new_connection(self, label: str = "client") -> Connection:
        return Connection(outbox_size=self.config.OUTBOX_SIZE, label=label)

    def new_simulator(self, conn: Connection) -> Optional[DeviceSimulator]:
        if not self.config.SIMULATION_ENABLED:
            return None
        return DeviceSimulator(
            self.coordinator,
            conn,
            camera_interval=self.config.SIMULATION_CAMERA_INTERVAL,
            signal_interval=self.config.SIMULATION_SIGNAL_INTERVAL,
        )

    def new_session(self, conn: Connection, verify_token: TokenVerifier) -> LiveSession:
        return LiveSession(
            conn,
            self.bus,
            self.coordinator,
            self.aggregator,
            verify_token,
            simulator=self.new_simulator(conn),
        )


def build_runtime(cfg: Any) -> Runtime:
    """Build the runtime for a configuration object (see `web.config.WebConfig`)."""
    engine = create_engine(cfg.DATABASE_URL)
    session_factory = create_session_factory(engine)
    store = SqlDeviceStore(session_factory)

    relay = None
    if cfg.FANOUT_BACKEND == "redis":
        relay = RedisFanoutRelay(RedisClient(cfg.REDIS_URL))
    bus = FanoutBus(relay)

    aggregator = AnalyticsAggregator(store, bus, window_hours=cfg.ANALYTICS_WINDOW_HOURS)
    coordinator = UpdateCoordinator(store, bus, aggregator, device_api_key=cfg.DEVICE_API_KEY)
    views = DashboardViews(store, aggregator)

    return Runtime(
        config=cfg,
        engine=engine,
        session_factory=session_factory,
        store=store,
        bus=bus,
        aggregator=aggregator,
        coordinator=coordinator,
        views=views,
    )
