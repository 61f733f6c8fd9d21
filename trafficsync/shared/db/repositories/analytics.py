"""Analytics sample repository."""

from typing import Optional, List
from uuid import UUID
from datetime import datetime

from sqlalchemy import select

from ..models import AnalyticsSample
from .base import Repository


class AnalyticsRepository(Repository[AnalyticsSample]):
    """Repository for append-only analytics samples."""

    model = AnalyticsSample

    async def get_since(self, since: datetime) -> List[AnalyticsSample]:
        """Get samples with timestamp >= since, oldest first."""
        query = (
            select(AnalyticsSample)
            .where(AnalyticsSample.timestamp >= since)
            .order_by(AnalyticsSample.timestamp)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_between(
        self,
        start: datetime,
        end: datetime,
        junction_id: Optional[UUID] = None,
    ) -> List[AnalyticsSample]:
        """Get samples in [start, end], newest first."""
        query = (
            select(AnalyticsSample)
            .where(AnalyticsSample.timestamp >= start)
            .where(AnalyticsSample.timestamp <= end)
        )
        if junction_id is not None:
            query = query.where(AnalyticsSample.junction_id == junction_id)
        query = query.order_by(AnalyticsSample.timestamp.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_latest(self) -> Optional[AnalyticsSample]:
        """Get the most recent sample."""
        query = (
            select(AnalyticsSample)
            .order_by(AnalyticsSample.timestamp.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
