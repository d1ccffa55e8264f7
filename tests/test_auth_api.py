from datetime import timedelta

from conftest import register
from fitness_service.auth import create_access_token


def test_register_returns_token_and_public_data(client):
    response = client.post("/api/auth/register", json={"name": "Alex", "email": "Alex@Example.com", "password": "secret123"})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["data"]["email"] == "alex@example.com"
    assert body["data"]["settings"] == {"notifications": True, "darkMode": True, "units": "metric"}
    assert body["data"]["profile"]["activityLevel"] == "moderate"
    assert "password" not in body["data"] and "hashedPassword" not in body["data"]


def test_duplicate_email_is_rejected(client):
    register(client)
    response = client.post("/api/auth/register", json={"name": "Alex", "email": "alex@example.com", "password": "secret123"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Email already registered"}


def test_register_validation_errors_are_400(client):
    response = client.post("/api/auth/register", json={"name": "Alex", "email": "not-an-email", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["success"] is False

    response = client.post("/api/auth/register", json={"name": "Alex", "email": "a@example.com", "password": "123"})
    assert response.status_code == 400


def test_login(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "alex@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Alex"

    response = client.post("/api/auth/login", json={"email": "alex@example.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"

    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401


def test_me_requires_a_valid_token(client, auth_headers):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alex@example.com"
    assert response.json()["data"]["deviceConnected"] is False


def test_expired_token_is_rejected(client):
    _, user = register(client)
    token = create_access_token({"sub": str(user["id"])}, expires_delta=timedelta(seconds=-1))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_missing_user_is_rejected(client):
    token = create_access_token({"sub": "9999"})
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_profile_update_merges(client, auth_headers):
    response = client.put("/api/auth/profile", headers=auth_headers,
                          json={"profile": {"height": 175, "age": 31}, "settings": {"darkMode": False}})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["profile"]["height"] == 175
    assert data["profile"]["age"] == 31
    assert data["settings"] == {"notifications": True, "darkMode": False, "units": "metric"}

    response = client.put("/api/auth/profile", headers=auth_headers,
                          json={"name": "Alexandra", "profile": {"goalWeight": 68, "fitnessGoal": "lose_weight"}})
    data = response.json()["data"]
    assert data["name"] == "Alexandra"
    assert data["profile"]["height"] == 175
    assert data["profile"]["goalWeight"] == 68
    assert data["settings"]["darkMode"] is False


def test_profile_rejects_unknown_enum(client, auth_headers):
    response = client.put("/api/auth/profile", headers=auth_headers, json={"profile": {"gender": "robot"}})
    assert response.status_code == 400


def test_password_change(client, auth_headers):
    response = client.put("/api/auth/password", headers=auth_headers,
                          json={"currentPassword": "wrong-pass", "newPassword": "another123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Current password is incorrect"

    response = client.put("/api/auth/password", headers=auth_headers,
                          json={"currentPassword": "secret123", "newPassword": "another123"})
    assert response.status_code == 200
    assert response.json()["token"]

    login = client.post("/api/auth/login", json={"email": "alex@example.com", "password": "another123"})
    assert login.status_code == 200


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "X-Process-Time" in response.headers


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


def test_validation_message_names_the_field(client):
    response = client.post("/api/auth/login", json={"email": "alex@example.com"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("password:")
