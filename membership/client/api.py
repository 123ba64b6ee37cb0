"""Async HTTP client for the membership API.

Every JSON response body is camelized before it is returned. Failures are
raised as exceptions the calling view handles itself:

- 401 -> ``SessionExpired`` (the caller decides how to send the user to login)
- no response at all -> ``ConnectionLost``
- any other non-2xx -> ``ApiError`` with the server's message
"""
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from membership.client.casing import camelize_keys

CONNECTION_LOST_MESSAGE = (
    "Unable to connect to the server. Please check your internet connection."
)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpired(ApiError):
    """The API answered 401; the session must be re-established."""

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message, status_code=401)


class ConnectionLost(ApiError):
    """The request never got a response."""

    def __init__(self, message: str = CONNECTION_LOST_MESSAGE):
        super().__init__(message, status_code=None)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "An unexpected error occurred"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
        if detail:
            return str(detail)
    return "An unexpected error occurred"


class MembershipApiClient:
    """One coroutine per API endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "MembershipApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning("Network error on {} {}: {}", method, path, e)
            raise ConnectionLost() from e

        if response.status_code == 401:
            logger.warning("401 on {} {}", method, path)
            raise SessionExpired()
        if response.is_error:
            message = _error_message(response)
            logger.warning("API error {} on {} {}: {}", response.status_code, method, path, message)
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        return camelize_keys(response.json())

    # ---------- auth ----------

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        """Log in and keep the token for subsequent calls."""
        data = await self._request(
            "POST", "/auth/login", json={"username": username, "password": password}
        )
        self.token = data["accessToken"]
        return data

    # ---------- students ----------

    async def get_students(self) -> Dict[str, Any]:
        return await self._request("GET", "/students")

    async def get_student(self, student_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/students/{student_id}")

    async def get_active_students(self) -> Dict[str, Any]:
        return await self._request("GET", "/students/active")

    async def get_expired_memberships(self) -> Dict[str, Any]:
        return await self._request("GET", "/students/expired")

    async def get_expiring_soon(self) -> Dict[str, Any]:
        return await self._request("GET", "/students/expiring-soon")

    async def get_students_by_shift(
        self, shift_id: Any, search: Optional[str] = None, status: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {k: v for k, v in (("search", search), ("status", status)) if v}
        return await self._request("GET", f"/students/shift/{shift_id}", params=params)

    async def add_student(self, student_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/students", json=student_data)

    async def update_student(self, student_id: int, student_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/students/{student_id}", json=student_data)

    async def delete_student(self, student_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/students/{student_id}")

    async def renew_membership(
        self, student_id: int, membership_start: str, membership_end: str
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/students/{student_id}/renew",
            json={"membership_start": membership_start, "membership_end": membership_end},
        )

    async def get_dashboard_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/students/stats/dashboard")

    # ---------- schedules ----------

    async def get_schedules(self) -> Dict[str, Any]:
        return await self._request("GET", "/schedules")

    async def get_schedules_with_students(self) -> Dict[str, Any]:
        return await self._request("GET", "/schedules/with-students")

    async def add_schedule(self, schedule_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/schedules", json=schedule_data)

    async def update_schedule(self, schedule_id: int, schedule_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/schedules/{schedule_id}", json=schedule_data)

    async def delete_schedule(self, schedule_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/schedules/{schedule_id}")
