"""Analytics aggregation: sample persistence, rolling rollup and trends."""

import asyncio
import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Set
from uuid import UUID

from ..shared.db.models import CongestionLevel, utcnow
from ..shared.logging import setup_logger
from ..shared.schemas import (
    AnalyticsRollup,
    DailyAggregate,
    HourlyTrendItem,
    TelemetryMetrics,
    dump_record,
)
from .bus import FanoutBus
from .rooms import ADMIN_ROOM
from .store import WeakConsistencyDeviceStore

logger = setup_logger(__name__)

ANALYTICS_EVENT = "analyticsUpdate"

# Severity score per congestion label; anything else scores 1 (Low)
SEVERITY_SCORES = {
    CongestionLevel.High.value: 3,
    CongestionLevel.Moderate.value: 2,
    CongestionLevel.Medium.value: 2,
}

DEFAULT_VEHICLE_TYPES = {"cars": 0, "motorcycles": 0, "trucks": 0}


def congestion_score(label: Any) -> int:
    if not isinstance(label, str):
        return 1
    return SEVERITY_SCORES.get(label, 1)


def severity_label(score: float) -> str:
    """Map an averaged severity score back to a label (<1.5 Low, <2.5 Moderate, else High)."""
    if score < 1.5:
        return "Low"
    if score < 2.5:
        return "Moderate"
    return "High"


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _timestamp(sample: dict) -> datetime:
    value = sample["timestamp"]
    return value if isinstance(value, datetime) else datetime.fromisoformat(value)


def build_sample(metrics: dict[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    """
    Turn a camera metrics payload into sample fields.

    Missing volume/speed default to 0, a missing congestion label to Low,
    an unrecognised one to Unknown.
    """
    parsed = TelemetryMetrics.model_validate(metrics)

    label = parsed.congestion_level or CongestionLevel.Low.value
    if label not in CongestionLevel._value2member_map_:
        label = CongestionLevel.Unknown.value

    vehicle_types = (
        parsed.vehicle_types.model_dump() if parsed.vehicle_types else dict(DEFAULT_VEHICLE_TYPES)
    )

    return {
        "timestamp": now or utcnow(),
        "traffic_volume": parsed.vehicle_count,
        "congestion_level": CongestionLevel(label),
        "average_speed": parsed.average_speed,
        "vehicle_types": vehicle_types,
        "junction_id": parsed.junction_id,
    }


def compute_rollup(samples: List[dict], window_start: datetime) -> Optional[dict]:
    """
    Aggregate samples over the trailing window.

    Volumes and speeds are averaged; congestion labels and vehicle-type
    breakdowns are passed through as raw lists for the dashboard to bucket.
    """
    if not samples:
        return None
    rollup = AnalyticsRollup(
        average_traffic_volume=_mean([s["trafficVolume"] for s in samples]),
        average_speed=_mean([s["averageSpeed"] for s in samples]),
        congestion_levels=[s["congestionLevel"] for s in samples],
        vehicle_types_aggregate=[s["vehicleTypes"] for s in samples],
        sample_count=len(samples),
        window_start=window_start,
    )
    return dump_record(rollup)


def hourly_trend(samples: Iterable[dict]) -> List[dict]:
    """Group samples by clock hour (year, month, day, hour), oldest first."""
    buckets: dict[tuple, list] = {}
    for sample in samples:
        ts = _timestamp(sample)
        buckets.setdefault((ts.year, ts.month, ts.day, ts.hour), []).append(sample)

    trend = []
    for key in sorted(buckets):
        bucket = buckets[key]
        average_congestion = _mean([congestion_score(s["congestionLevel"]) for s in bucket])
        item = HourlyTrendItem(
            time=f"{key[3]}:00",
            traffic_volume=_round_half_up(_mean([s["trafficVolume"] for s in bucket])),
            average_congestion=average_congestion,
            congestion_level=severity_label(average_congestion),
        )
        trend.append(dump_record(item))
    return trend


def daily_aggregates(samples: Iterable[dict]) -> List[dict]:
    """Group samples by UTC day, sorted by day."""
    days: "OrderedDict[str, list]" = OrderedDict()
    for sample in sorted(samples, key=_timestamp):
        days.setdefault(_timestamp(sample).strftime("%Y-%m-%d"), []).append(sample)

    aggregates = []
    for day, bucket in days.items():
        aggregate = DailyAggregate(
            day=day,
            average_traffic_volume=_mean([s["trafficVolume"] for s in bucket]),
            average_speed=_mean([s["averageSpeed"] for s in bucket]),
            congestion_levels=[s["congestionLevel"] for s in bucket],
            vehicle_type_counts=[
                {name: (s.get("vehicleTypes") or {}).get(name, 0) for name in DEFAULT_VEHICLE_TYPES}
                for s in bucket
            ],
        )
        aggregates.append(dump_record(aggregate))
    return aggregates


class AnalyticsAggregator:
    """
    Persists telemetry samples and broadcasts the trailing-window rollup.

    `submit` is the fire-and-forget entry point used by telemetry handling:
    it schedules the work as a task and its failures are logged, never
    propagated to the caller. Recomputing the rollup reads the whole
    window on every sample, which is linear in the window size.
    """

    def __init__(
        self,
        store: WeakConsistencyDeviceStore,
        bus: FanoutBus,
        window_hours: float = 24,
    ):
        self.store = store
        self.bus = bus
        self.window = timedelta(hours=window_hours)
        self._pending: Set[asyncio.Task] = set()

    def submit(self, metrics: dict[str, Any]) -> asyncio.Task:
        """Schedule sample recording; the returned task never raises."""
        task = asyncio.create_task(self._record_isolated(metrics))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _record_isolated(self, metrics: dict[str, Any]) -> Optional[dict]:
        try:
            return await self.record_sample(metrics)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Analytics aggregation failed")
            return None

    async def record_sample(
        self,
        metrics: dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Optional[dict]:
        """Insert one sample, recompute the rollup and publish it to admin."""
        now = now or utcnow()
        await self.store.insert_sample(build_sample(metrics, now))

        rollup = await self.current_rollup(now)
        if rollup is not None:
            await self.bus.publish(ADMIN_ROOM, ANALYTICS_EVENT, rollup)
        return rollup

    async def current_rollup(self, now: Optional[datetime] = None) -> Optional[dict]:
        window_start = (now or utcnow()) - self.window
        samples = await self.store.samples_since(window_start)
        return compute_rollup(samples, window_start)

    async def hourly_trend(self, now: Optional[datetime] = None) -> List[dict]:
        samples = await self.store.samples_since((now or utcnow()) - self.window)
        return hourly_trend(samples)

    async def query(self, start: datetime, end: datetime) -> dict:
        """Historical samples in a date range plus per-day aggregates."""
        samples = await self.store.samples_between(start, end)
        return {
            "rawData": samples,
            "aggregatedData": daily_aggregates(samples),
        }

    async def junction_samples(
        self,
        junction_id: UUID,
        start: datetime,
        end: datetime,
    ) -> List[dict]:
        return await self.store.samples_between(start, end, junction_id)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every submitted sample to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
