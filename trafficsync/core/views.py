"""Read-only dashboard views composed over the device store."""

import time
from typing import List, Optional

from ..shared.db.models import DeviceStatus
from .aggregator import AnalyticsAggregator, congestion_score
from .rooms import DeviceKind
from .store import WeakConsistencyDeviceStore

HEALTHY_ONLINE_RATIO = 0.7
RECENT_EVENTS_PER_KIND = 5
RECENT_EVENTS_LIMIT = 10

CONGESTION_ZONE_RADIUS = 300  # meters
WAITING_ZONE_RADIUS = 200  # meters
WAIT_ALERT_SECONDS = 120
WAIT_SEVERE_SECONDS = 180


def _online(devices: List[dict]) -> int:
    return sum(1 for d in devices if d["status"] == DeviceStatus.online.value)


def _last_seen_key(device: dict) -> str:
    return device.get("lastSeen") or ""


def _issue_events(kind: DeviceKind, devices: List[dict]) -> List[dict]:
    """Synthesize events for devices that are offline or in warning."""
    troubled = [d for d in devices if d["status"] != DeviceStatus.online.value]
    troubled.sort(key=_last_seen_key, reverse=True)
    return [
        {
            "id": f"{kind.value}-{d['id']}",
            "type": kind.value,
            "severity": "high" if d["status"] == DeviceStatus.offline.value else "medium",
            "message": f"{kind.label} {d.get('name') or d['id']} is {d['status']}",
            "location": d.get("location") or "Unknown",
            "timestamp": d.get("lastSeen"),
        }
        for d in troubled[:RECENT_EVENTS_PER_KIND]
    ]


def _wait_time(device: dict) -> float:
    # Telemetry is free-form; a non-numeric wait counts as none
    wait = (device.get("metrics") or {}).get("waitTime")
    if isinstance(wait, bool) or not isinstance(wait, (int, float)):
        return 0
    return wait


class DashboardViews:
    """Composes the overview, hotspot map and alert zones."""

    def __init__(
        self,
        store: WeakConsistencyDeviceStore,
        aggregator: AnalyticsAggregator,
        started_at: Optional[float] = None,
    ):
        self.store = store
        self.aggregator = aggregator
        self.started_at = started_at if started_at is not None else time.monotonic()

    async def overview(self) -> dict:
        cameras = await self.store.list_devices(DeviceKind.camera)
        signals = await self.store.list_devices(DeviceKind.signal)
        online_cameras = _online(cameras)
        online_signals = _online(signals)

        healthy = (
            online_cameras > HEALTHY_ONLINE_RATIO * len(cameras)
            and online_signals > HEALTHY_ONLINE_RATIO * len(signals)
        )

        latest = await self.store.latest_sample()

        events = _issue_events(DeviceKind.camera, cameras) + _issue_events(DeviceKind.signal, signals)
        events.sort(key=lambda e: e["timestamp"] or "", reverse=True)

        return {
            "overview": {
                "totalCameras": len(cameras),
                "onlineCameras": online_cameras,
                "totalSignals": len(signals),
                "onlineSignals": online_signals,
                "systemStatus": "Healthy" if healthy else "Warning",
                "congestionLevel": latest["congestionLevel"] if latest else "Low",
            },
            "events": {"recent": events[:RECENT_EVENTS_LIMIT]},
            "trafficTrend": await self.aggregator.hourly_trend(),
            "performance": {"uptime": time.monotonic() - self.started_at},
        }

    async def hotspots(self) -> dict:
        cameras = await self.store.list_devices(DeviceKind.camera)
        signals = await self.store.list_devices(DeviceKind.signal)

        hotspots = [
            {
                "id": c["id"],
                "type": "camera",
                "location": c.get("location") or "Unknown",
                "coordinates": c["coordinates"],
                "congestionLevel": c["metrics"].get("congestionLevel") or "Low",
                "trafficVolume": c["metrics"].get("vehicleCount") or 0,
                "status": c["status"],
            }
            for c in cameras
            if c.get("coordinates") and c.get("metrics")
        ]
        hotspots.sort(key=lambda h: congestion_score(h["congestionLevel"]), reverse=True)

        junctions = [
            {
                "id": s["id"],
                "type": "signal",
                "location": s.get("location") or "Unknown",
                "coordinates": s["coordinates"],
                "currentPhase": s.get("currentPhase") or "Unknown",
                "waitTime": _wait_time(s),
                "status": s["status"],
            }
            for s in signals
            if s.get("coordinates")
        ]
        junctions.sort(key=lambda j: j["waitTime"], reverse=True)

        return {"hotspots": hotspots, "signals": junctions}

    async def alert_zones(self) -> List[dict]:
        zones = []

        for camera in await self.store.list_devices(DeviceKind.camera):
            metrics = camera.get("metrics") or {}
            if metrics.get("congestionLevel") != "High" or not camera.get("coordinates"):
                continue
            zones.append({
                "id": f"zone-camera-{camera['id']}",
                "type": "congestion",
                "severity": "high",
                "location": camera.get("location") or "Unknown",
                "coordinates": camera["coordinates"],
                "radius": CONGESTION_ZONE_RADIUS,
                "vehicleCount": metrics.get("vehicleCount") or 0,
                "source": {"type": "camera", "id": camera["id"]},
            })

        for signal in await self.store.list_devices(DeviceKind.signal):
            wait = _wait_time(signal)
            if wait <= WAIT_ALERT_SECONDS or not signal.get("coordinates"):
                continue
            zones.append({
                "id": f"zone-signal-{signal['id']}",
                "type": "waiting",
                "severity": "high" if wait > WAIT_SEVERE_SECONDS else "medium",
                "location": signal.get("location") or "Unknown",
                "coordinates": signal["coordinates"],
                "radius": WAITING_ZONE_RADIUS,
                "waitTime": wait,
                "source": {"type": "signal", "id": signal["id"]},
            })

        return zones
