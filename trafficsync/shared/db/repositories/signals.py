"""Signal repository."""

from typing import List

from ..models import Signal, DeviceStatus
from .base import Repository


class SignalRepository(Repository[Signal]):
    """Repository for signal operations."""

    model = Signal

    async def get_by_status(self, status: DeviceStatus) -> List[Signal]:
        """Get signals by status."""
        query = self._base_query().where(Signal.status == status).order_by(Signal.created_at)
        result = await self.session.execute(query)
        return list(result.scalars().all())
