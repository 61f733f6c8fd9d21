"""Device store contract and its SQLAlchemy implementation."""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncGenerator, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..shared.db.database import session_scope
from ..shared.db.models import AnalyticsSample, Camera, DeviceStatus, Signal
from ..shared.db.repositories import (
    AnalyticsRepository,
    CameraRepository,
    SignalRepository,
)
from ..shared.exceptions import StoreError
from ..shared.logging import setup_logger
from ..shared.schemas import (
    AnalyticsSampleResponse,
    CameraResponse,
    SignalResponse,
    dump_record,
)
from .rooms import DeviceKind

logger = setup_logger(__name__)


class WeakConsistencyDeviceStore(ABC):
    """
    Persistence contract for device records and analytics samples.

    Consistency is last-write-wins: there is no versioning, and two
    concurrent updates to one record both succeed with the later commit
    determining the stored state. A strongly consistent store would
    implement the same methods under a different contract class.

    Device fields go in as snake_case attribute names; every record comes
    back as its canonical camelCase JSON dict.
    """

    @abstractmethod
    async def list_devices(
        self, kind: DeviceKind, status: Optional[DeviceStatus] = None
    ) -> List[dict]:
        """All devices of a kind, oldest first, optionally filtered by status."""

    @abstractmethod
    async def get_device(self, kind: DeviceKind, device_id: UUID) -> Optional[dict]:
        ...

    @abstractmethod
    async def insert_device(self, kind: DeviceKind, fields: dict[str, Any]) -> dict:
        ...

    @abstractmethod
    async def update_device(
        self, kind: DeviceKind, device_id: UUID, fields: dict[str, Any]
    ) -> Optional[dict]:
        """Apply a sparse field set. Returns None if the id does not exist."""

    @abstractmethod
    async def delete_device(self, kind: DeviceKind, device_id: UUID) -> bool:
        ...

    @abstractmethod
    async def insert_sample(self, fields: dict[str, Any]) -> dict:
        ...

    @abstractmethod
    async def samples_since(self, since: datetime) -> List[dict]:
        """Samples with timestamp >= since, oldest first."""

    @abstractmethod
    async def samples_between(
        self,
        start: datetime,
        end: datetime,
        junction_id: Optional[UUID] = None,
    ) -> List[dict]:
        """Samples in [start, end], newest first."""

    @abstractmethod
    async def latest_sample(self) -> Optional[dict]:
        ...


_DEVICE_TABLES = {
    DeviceKind.camera: (Camera, CameraRepository, CameraResponse),
    DeviceKind.signal: (Signal, SignalRepository, SignalResponse),
}


class SqlDeviceStore(WeakConsistencyDeviceStore):
    """Store backed by SQLAlchemy, one transaction per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.exception("Store operation failed")
            raise StoreError(str(e)) from e

    @staticmethod
    def _device_record(kind: DeviceKind, entity) -> dict:
        _, _, schema = _DEVICE_TABLES[kind]
        return dump_record(schema.model_validate(entity))

    @staticmethod
    def _sample_record(entity: AnalyticsSample) -> dict:
        return dump_record(AnalyticsSampleResponse.model_validate(entity))

    async def list_devices(
        self, kind: DeviceKind, status: Optional[DeviceStatus] = None
    ) -> List[dict]:
        _, repo_cls, _ = _DEVICE_TABLES[kind]
        async with self._transaction() as session:
            repo = repo_cls(session)
            entities = await (repo.get_by_status(status) if status else repo.get_all())
            return [self._device_record(kind, e) for e in entities]

    async def get_device(self, kind: DeviceKind, device_id: UUID) -> Optional[dict]:
        _, repo_cls, _ = _DEVICE_TABLES[kind]
        async with self._transaction() as session:
            entity = await repo_cls(session).get_by_id(device_id)
            return self._device_record(kind, entity) if entity else None

    async def insert_device(self, kind: DeviceKind, fields: dict[str, Any]) -> dict:
        model, repo_cls, _ = _DEVICE_TABLES[kind]
        async with self._transaction() as session:
            entity = await repo_cls(session).create(model(**fields))
            return self._device_record(kind, entity)

    async def update_device(
        self, kind: DeviceKind, device_id: UUID, fields: dict[str, Any]
    ) -> Optional[dict]:
        _, repo_cls, _ = _DEVICE_TABLES[kind]
        async with self._transaction() as session:
            entity = await repo_cls(session).update_fields(device_id, fields)
            return self._device_record(kind, entity) if entity else None

    async def delete_device(self, kind: DeviceKind, device_id: UUID) -> bool:
        _, repo_cls, _ = _DEVICE_TABLES[kind]
        async with self._transaction() as session:
            return await repo_cls(session).delete(device_id)

    async def insert_sample(self, fields: dict[str, Any]) -> dict:
        async with self._transaction() as session:
            entity = await AnalyticsRepository(session).create(AnalyticsSample(**fields))
            return self._sample_record(entity)

    async def samples_since(self, since: datetime) -> List[dict]:
        async with self._transaction() as session:
            entities = await AnalyticsRepository(session).get_since(since)
            return [self._sample_record(e) for e in entities]

    async def samples_between(
        self,
        start: datetime,
        end: datetime,
        junction_id: Optional[UUID] = None,
    ) -> List[dict]:
        async with self._transaction() as session:
            entities = await AnalyticsRepository(session).get_between(start, end, junction_id)
            return [self._sample_record(e) for e in entities]

    async def latest_sample(self) -> Optional[dict]:
        async with self._transaction() as session:
            entity = await AnalyticsRepository(session).get_latest()
            return self._sample_record(entity) if entity else None
