import uuid

from trafficsync.core.rooms import DeviceKind


def test_overview_counts_seeded_devices(client, viewer_headers):
    response = client.get("/api/dashboard/overview", headers=viewer_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["overview"]["totalCameras"] == 8
    assert body["overview"]["onlineCameras"] == 6
    assert body["overview"]["totalSignals"] == 4
    assert body["overview"]["onlineSignals"] == 3
    assert body["overview"]["systemStatus"] == "Healthy"
    # one offline and one warning camera, one offline signal
    assert len(body["events"]["recent"]) == 3


def test_hotspots_and_alert_zones(client, operator_headers):
    created = client.post(
        "/api/cameras",
        json={"name": "Hot", "location": "Bridge", "coordinates": {"lat": 10, "lng": 20}},
        headers=operator_headers,
    ).json()
    store = client.app.state.runtime.store
    client.portal.call(
        store.update_device,
        DeviceKind.camera,
        uuid.UUID(created["id"]),
        {"metrics": {"congestionLevel": "High", "vehicleCount": 42}},
    )

    hotspots = client.get("/api/dashboard/hotspots", headers=operator_headers).json()
    assert [h["id"] for h in hotspots["hotspots"]] == [created["id"]]
    assert hotspots["hotspots"][0]["trafficVolume"] == 42

    zones = client.get("/api/dashboard/alert-zones", headers=operator_headers).json()
    assert [z["id"] for z in zones] == [f"zone-camera-{created['id']}"]
