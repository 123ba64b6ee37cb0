"""Unit tests for authentication functionality."""
from datetime import timedelta

from fastapi.testclient import TestClient

from membership.auth import (
    ROLE_ADMIN,
    ROLE_STAFF,
    authenticate_user,
    get_current_user,
    create_access_token,
    verify_token,
)
from membership.main import app
from membership.settings import settings


class TestAuthentication:
    """Test cases for authentication functionality."""

    def test_authenticate_admin(self):
        assert authenticate_user(settings.admin_user, settings.admin_pass) == ROLE_ADMIN

    def test_authenticate_staff(self):
        assert authenticate_user(settings.staff_user, settings.staff_pass) == ROLE_STAFF

    def test_authenticate_invalid_password(self):
        assert authenticate_user(settings.admin_user, "wrong_pass") is None

    def test_authenticate_invalid_username(self):
        assert authenticate_user("wrong_user", settings.admin_pass) is None

    def test_verify_token_valid(self):
        token = create_access_token({"sub": "test_user", "role": ROLE_STAFF})
        payload = verify_token(token)
        assert payload["sub"] == "test_user"
        assert payload["role"] == ROLE_STAFF

    def test_verify_token_invalid(self):
        assert verify_token("invalid.jwt.token") is None

    def test_verify_token_expired(self):
        token = create_access_token({"sub": "test_user"}, timedelta(seconds=-1))
        assert verify_token(token) is None


class TestLoginFlow:
    def test_login_and_use_token(self, client):
        # the client fixture wires the test database; drop its auth override
        app.dependency_overrides.pop(get_current_user)
        login = client.post(
            "/auth/login",
            json={"username": settings.staff_user, "password": settings.staff_pass},
        )
        assert login.status_code == 200
        assert login.json()["role"] == ROLE_STAFF

        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
        assert client.get("/students", headers=headers).status_code == 200
        assert client.get("/students/stats/dashboard", headers=headers).status_code == 403

    def test_login_rejected(self):
        response = TestClient(app).post(
            "/auth/login", json={"username": "nobody", "password": "nope"}
        )
        assert response.status_code == 401

    def test_invalid_token(self):
        response = TestClient(app).get(
            "/students", headers={"Authorization": "Bearer invalid_token"}
        )
        assert response.status_code == 401
