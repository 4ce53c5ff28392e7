from propease.models.enums import Role
from propease.tests.conftest import bearer, make_user


def test_health_echoes_request_id(client):
    r = client.get("/api/health", headers={"X-Request-Id": "RID-123"})
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "requestId": "RID-123"}
    assert r.headers["X-Request-Id"] == "RID-123"

    generated = client.get("/api/health")
    assert generated.headers["X-Request-Id"]


def test_login_and_me(client, admin_user):
    r = client.post("/api/login", json={"username": "admin@propease.test", "password": "1234"})
    assert r.status_code == 200, r.text
    tokens = r.json()
    assert tokens["role"] == "ADMIN"
    assert tokens["expiresInSeconds"] > 0

    me = client.get("/api/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
    assert me.status_code == 200
    body = me.json()
    assert body["fullName"] == "Admin User"
    assert "IMPORT_SNAPSHOT" in body["allowedActions"]


def test_bad_credentials(client, admin_user):
    r = client.post("/api/login", json={"username": "admin@propease.test", "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid credentials."}


def test_disabled_user_cannot_login(client, db):
    user = make_user(db, "former@propease.test")
    user.enabled = False
    db.commit()

    r = client.post("/api/login", json={"username": "former@propease.test", "password": "1234"})
    assert r.status_code == 401


def test_refresh(client, employee_user):
    tokens = client.post(
        "/api/login", json={"username": "agent@propease.test", "password": "1234"}
    ).json()

    r = client.post("/api/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert r.status_code == 200
    assert r.json()["role"] == "EMPLOYEE"

    # an access token is not a refresh token
    bad = client.post("/api/refresh", json={"refreshToken": tokens["accessToken"]})
    assert bad.status_code == 401


def test_missing_or_bad_token(client):
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid or expired token."}

    r2 = client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r2.status_code == 401


def test_validation_errors_use_message_envelope(client):
    r = client.post("/api/login", json={"password": "1234"})
    assert r.status_code == 422
    assert r.json()["message"].startswith("username")


def test_unknown_route_uses_message_envelope(client):
    r = client.get("/api/does-not-exist")
    assert r.status_code == 404
    assert "message" in r.json()


def test_admin_only_routes(client, employee_headers, admin_headers):
    assert client.get("/api/users", headers=employee_headers).status_code == 403
    assert client.get("/api/snapshot", headers=employee_headers).status_code == 403
    assert client.get("/api/users", headers=admin_headers).status_code == 200


def test_user_management(client, db, admin_user, admin_headers):
    r = client.post(
        "/api/users",
        headers=admin_headers,
        json={
            "fullName": "Neha Joshi",
            "email": "neha@propease.test",
            "mobileNumber": "9876500001",
            "password": "secret",
        },
    )
    assert r.status_code == 200, r.text
    created = r.json()
    assert created["username"] == "neha@propease.test"
    assert created["role"] == "EMPLOYEE"

    dup = client.post(
        "/api/users",
        headers=admin_headers,
        json={
            "fullName": "Neha Joshi",
            "email": "neha@propease.test",
            "mobileNumber": "9876500001",
            "password": "secret",
        },
    )
    assert dup.status_code == 409

    off = client.post(f"/api/users/{created['userId']}/deactivate", headers=admin_headers)
    assert off.status_code == 200
    assert off.json()["enabled"] is False

    self_off = client.post(f"/api/users/{admin_user.id}/deactivate", headers=admin_headers)
    assert self_off.status_code == 409


def test_employee_token_from_helper(client, db):
    user = make_user(db, "sales@propease.test", Role.EMPLOYEE, full_name="Sales Person")
    r = client.get("/api/me", headers=bearer(user))
    assert r.json()["allowedActions"] == []
