"""Analytics API endpoints."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from ...shared.db.models import utcnow
from ...shared.schemas import (
    AnalyticsQueryResponse,
    AnalyticsRollup,
    AnalyticsSampleResponse,
    HourlyTrendResponse,
)
from ..auth import CurrentUser
from ..deps import RuntimeDep

router = APIRouter()

DEFAULT_RANGE = timedelta(days=7)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def date_range(
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> tuple[datetime, datetime]:
    """Resolve the query window, defaulting to the last seven days."""
    now = utcnow()
    end = _naive_utc(end_date) if end_date else now
    start = _naive_utc(start_date) if start_date else now - DEFAULT_RANGE
    return start, end


@router.get("", response_model=AnalyticsQueryResponse)
async def query_analytics(
    auth: CurrentUser,
    runtime: RuntimeDep,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
):
    """
    Historical samples in a date range, newest first, plus per-day aggregates.

    Defaults to the last 7 days.
    """
    start, end = date_range(start_date, end_date)
    return await runtime.aggregator.query(start, end)


@router.get("/junction/{junction_id}", response_model=list[AnalyticsSampleResponse])
async def junction_analytics(
    junction_id: UUID,
    auth: CurrentUser,
    runtime: RuntimeDep,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
):
    """Samples for one junction in a date range, newest first."""
    start, end = date_range(start_date, end_date)
    return await runtime.aggregator.junction_samples(junction_id, start, end)


@router.get("/rollup", response_model=Optional[AnalyticsRollup])
async def current_rollup(auth: CurrentUser, runtime: RuntimeDep):
    """Current trailing-window rollup, or null when there are no samples."""
    return await runtime.aggregator.current_rollup()


@router.get("/trend", response_model=HourlyTrendResponse)
async def hourly_trend(auth: CurrentUser, runtime: RuntimeDep):
    """Hourly traffic trend over the trailing window."""
    return {"trend": await runtime.aggregator.hourly_trend()}
