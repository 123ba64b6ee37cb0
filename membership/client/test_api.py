"""Tests for the async API client using a mocked transport."""
import json

import httpx
import pytest

from membership.client.api import (
    ApiError,
    ConnectionLost,
    MembershipApiClient,
    SessionExpired,
)


def make_client(handler, token="tok"):
    return MembershipApiClient(
        base_url="http://api.test", token=token, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_response_keys_are_camelized_and_token_sent():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("authorization")
        seen["path"] = request.url.path
        return httpx.Response(
            200, json={"students": [{"id": 1, "membership_end": "2024-02-01", "shift_id": None}]}
        )

    async with make_client(handler) as api:
        data = await api.get_students()

    assert seen == {"auth": "Bearer tok", "path": "/students"}
    assert data == {"students": [{"id": 1, "membershipEnd": "2024-02-01", "shiftId": None}]}


@pytest.mark.asyncio
async def test_shift_filters_become_query_params():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"students": []})

    async with make_client(handler) as api:
        await api.get_students_by_shift(3, search="ann", status="all")
        assert seen["url"] == "http://api.test/students/shift/3?search=ann&status=all"
        await api.get_students_by_shift(3)
        assert seen["url"] == "http://api.test/students/shift/3"


@pytest.mark.asyncio
async def test_renew_posts_dates():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": "ok", "student": {"id": 7, "status": "active"}})

    async with make_client(handler) as api:
        data = await api.renew_membership(7, "2025-01-01", "2026-01-01")

    assert seen == {
        "method": "POST",
        "path": "/students/7/renew",
        "body": {"membership_start": "2025-01-01", "membership_end": "2026-01-01"},
    }
    assert data["student"]["status"] == "active"


@pytest.mark.asyncio
async def test_login_stores_token():
    def handler(request):
        return httpx.Response(200, json={"access_token": "new", "token_type": "bearer", "role": "admin"})

    async with make_client(handler, token=None) as api:
        data = await api.login("admin", "admin123")
        assert api.token == "new"
        assert data["role"] == "admin"


@pytest.mark.asyncio
async def test_401_raises_session_expired():
    async with make_client(lambda request: httpx.Response(401, json={"detail": "Not authenticated"})) as api:
        with pytest.raises(SessionExpired) as exc:
            await api.get_students()
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_server_message_surfaces():
    def handler(request):
        return httpx.Response(400, json={"detail": "Email already in use"})

    async with make_client(handler) as api:
        with pytest.raises(ApiError) as exc:
            await api.add_student({"email": "a@x.com"})
    assert exc.value.status_code == 400
    assert exc.value.message == "Email already in use"
    assert not isinstance(exc.value, SessionExpired)


@pytest.mark.asyncio
async def test_transport_failure_raises_connection_lost():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as api:
        with pytest.raises(ConnectionLost) as exc:
            await api.get_dashboard_stats()
    assert "Unable to connect" in exc.value.message
    assert exc.value.status_code is None
