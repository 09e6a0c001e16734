"""
Tests for GET /auth/refresh_token and DELETE /auth/delete_token.
"""
from datetime import timedelta

from jose import jwt

from dental_clinic.config import settings
from dental_clinic.auth.models import Dentist, Admin
from dental_clinic.core.security import create_refresh_token, token_claims, issue_tokens


def _login(client, add_identity, checked=True):
    add_identity(
        Dentist,
        password="correct",
        dentist_id="knrsdent001",
        name="Dr. Smith",
        email="smith@example.com"
    )
    response = client.post("/auth/login", json={"id": "knrsdent001", "password": "correct", "checked": checked})
    assert response.json()["successful"] is True
    return response


def test_refresh_round_trip(client, add_identity):
    _login(client, add_identity)

    response = client.get("/auth/refresh_token")

    assert response.status_code == 200
    data = response.json()
    assert data["user"] == {"id": "knrsdent001", "name": "Dr. Smith", "role": "dentist"}
    claims = jwt.decode(data["accessToken"], settings.access_token_key, algorithms=[settings.algorithm])
    assert {k: claims[k] for k in ("id", "name", "role")} == data["user"]


def test_refresh_does_not_rotate_cookie(client, add_identity):
    _login(client, add_identity)

    response = client.get("/auth/refresh_token")

    assert "set-cookie" not in response.headers


def test_refresh_with_session_cookie(client, add_identity):
    _login(client, add_identity, checked=False)

    assert client.get("/auth/refresh_token").status_code == 200


def test_refresh_without_cookie_returns_false(client):
    response = client.get("/auth/refresh_token")

    assert response.status_code == 200
    assert response.json() is False


def test_refresh_with_garbage_cookie_is_forbidden(client):
    response = client.get("/auth/refresh_token", headers={"Cookie": "refreshToken=garbage"})

    assert response.status_code == 403
    assert "error" in response.json()


def test_refresh_token_at_expiry_is_forbidden(client):
    token = create_refresh_token(token_claims("knrsdent001", "Dr. Smith", "dentist"), expires_delta=timedelta(0))

    response = client.get("/auth/refresh_token", headers={"Cookie": f"refreshToken={token}"})

    assert response.status_code == 403


def test_access_token_is_not_a_refresh_token(client):
    pair = issue_tokens("knrsdent001", "Dr. Smith", "dentist")

    response = client.get("/auth/refresh_token", headers={"Cookie": f"refreshToken={pair.access_token}"})

    assert response.status_code == 403


def test_logout_clears_cookie(client, add_identity):
    _login(client, add_identity)

    response = client.delete("/auth/delete_token")

    assert response.status_code == 200
    assert response.json() == {"message": "Refresh token deleted"}
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("refreshToken=")
    assert "Max-Age=0" in set_cookie

    assert client.get("/auth/refresh_token").json() is False


def test_logout_is_idempotent(client):
    first = client.delete("/auth/delete_token")
    second = client.delete("/auth/delete_token")

    assert first.status_code == second.status_code == 200
    assert second.json() == {"message": "Refresh token deleted"}


def test_logout_accepts_post(client):
    response = client.post("/auth/delete_token")

    assert response.status_code == 200
    assert response.json() == {"message": "Refresh token deleted"}


def test_protected_route_requires_bearer_token(client):
    assert client.get("/email-verification").status_code == 401


def test_protected_route_rejects_wrong_role(client, add_identity):
    access_token = _login(client, add_identity).json()["accessToken"]

    response = client.get("/email-verification", headers={"Authorization": f"Bearer {access_token}"})

    assert response.status_code == 403


def test_protected_route_rejects_invalid_token(client):
    response = client.get("/email-verification", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 403


def test_protected_route_accepts_admin(client, add_identity):
    add_identity(Admin, password="root", admin_id="admin1", name="Boss")
    access_token = client.post("/auth/login", json={"id": "admin1", "password": "root"}).json()["accessToken"]

    response = client.get("/email-verification", headers={"Authorization": f"Bearer {access_token}"})

    assert response.status_code == 200
    assert response.json() == []
