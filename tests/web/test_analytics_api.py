import uuid
from datetime import timedelta

from trafficsync.shared.db.models import utcnow


def record(client, metrics, now=None):
    aggregator = client.app.state.runtime.aggregator
    return client.portal.call(aggregator.record_sample, metrics, now)


def test_rollup_empty(client, viewer_headers):
    response = client.get("/api/analytics/rollup", headers=viewer_headers)

    assert response.status_code == 200
    assert response.json() is None


def test_rollup_and_trend(client, viewer_headers):
    record(client, {"vehicleCount": 10, "averageSpeed": 30, "congestionLevel": "Low"})
    record(client, {"vehicleCount": 20, "averageSpeed": 50, "congestionLevel": "High"})

    rollup = client.get("/api/analytics/rollup", headers=viewer_headers).json()
    assert rollup["averageTrafficVolume"] == 15
    assert rollup["averageSpeed"] == 40
    assert rollup["sampleCount"] == 2

    trend = client.get("/api/analytics/trend", headers=viewer_headers).json()["trend"]
    assert len(trend) == 1
    assert trend[0]["trafficVolume"] == 15
    assert trend[0]["congestionLevel"] == "Moderate"


def test_query_defaults_to_last_week(client, viewer_headers):
    now = utcnow()
    record(client, {"vehicleCount": 5}, now - timedelta(days=1))
    record(client, {"vehicleCount": 7}, now - timedelta(days=10))

    body = client.get("/api/analytics", headers=viewer_headers).json()

    assert [s["trafficVolume"] for s in body["rawData"]] == [5]
    assert len(body["aggregatedData"]) == 1
    assert body["aggregatedData"][0]["_id"] == (now - timedelta(days=1)).strftime("%Y-%m-%d")


def test_query_explicit_range(client, viewer_headers):
    now = utcnow()
    record(client, {"vehicleCount": 7}, now - timedelta(days=10))

    params = {
        "startDate": (now - timedelta(days=11)).isoformat(),
        "endDate": (now - timedelta(days=9)).isoformat(),
    }
    body = client.get("/api/analytics", params=params, headers=viewer_headers).json()

    assert [s["trafficVolume"] for s in body["rawData"]] == [7]


def test_junction_samples(client, viewer_headers):
    junction = uuid.uuid4()
    record(client, {"vehicleCount": 3, "junctionId": str(junction)})
    record(client, {"vehicleCount": 4})

    response = client.get(f"/api/analytics/junction/{junction}", headers=viewer_headers)

    assert response.status_code == 200
    assert [s["trafficVolume"] for s in response.json()] == [3]


def test_analytics_requires_auth(client):
    assert client.get("/api/analytics").status_code == 401
