from datetime import timedelta

from trafficsync.web.auth import create_access_token


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_login_with_seeded_admin(client):
    response = client.post(
        "/api/auth/login", json={"email": "admin@traffic.com", "password": "admin123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "admin"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@traffic.com"
    assert me.json()["role"] == "admin"


def test_login_wrong_password(client):
    response = client.post(
        "/api/auth/login", json={"email": "admin@traffic.com", "password": "wrong-password"}
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid email or password"}


def test_register_creates_viewer(client):
    payload = {"name": "Vera", "email": "vera@traffic.com", "password": "secret123"}

    assert client.post("/api/auth/register", json=payload).status_code == 201

    login = client.post("/api/auth/login", json={"email": payload["email"], "password": payload["password"]})
    assert login.json()["user"]["role"] == "viewer"

    duplicate = client.post("/api/auth/register", json=payload)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"message": "Email already registered"}


def test_register_validation(client):
    response = client.post("/api/auth/register", json={"name": "x", "email": "not-an-email", "password": "1"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_missing_token(client):
    response = client.get("/api/cameras")

    assert response.status_code == 401
    assert response.json() == {"message": "Authentication token required"}


def test_invalid_and_expired_tokens(client):
    expired = create_access_token(
        user_id="00000000-0000-0000-0000-000000000001",
        email="old@traffic.com",
        role="admin",
        expires_delta=timedelta(minutes=-1),
    )

    for token in ["garbage", expired]:
        response = client.get("/api/cameras", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}
