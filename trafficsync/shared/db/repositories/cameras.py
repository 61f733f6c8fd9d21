"""Camera repository."""

from typing import List

from ..models import Camera, DeviceStatus
from .base import Repository


class CameraRepository(Repository[Camera]):
    """Repository for camera operations."""

    model = Camera

    async def get_by_status(self, status: DeviceStatus) -> List[Camera]:
        """Get cameras by status."""
        query = self._base_query().where(Camera.status == status).order_by(Camera.created_at)
        result = await self.session.execute(query)
        return list(result.scalars().all())
