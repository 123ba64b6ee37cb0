"""View models for the dashboard widget and the student form.

Records reaching this module have already been camelized by the client.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from loguru import logger

from membership.client.api import MembershipApiClient
from membership.client.pagination import PAGE_SIZE_OPTIONS, Paginator, limited_view
from membership.students.status import effective_status, is_expiring_soon, to_date

DASHBOARD_EXPIRING_DAYS = 5


def with_effective_status(students: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    """Copies of ``students`` whose status reads expired once the end date is reached."""
    return [
        {**s, "status": effective_status(s["membershipEnd"], s["status"], today)}
        for s in students
    ]


def filter_expiring(
    students: List[Dict[str, Any]], today: date, window_days: int = DASHBOARD_EXPIRING_DAYS
) -> List[Dict[str, Any]]:
    """Expiring-soon subset, keeping the incoming order."""
    return [
        s
        for s in with_effective_status(students, today)
        if is_expiring_soon(s["membershipEnd"], s["status"], today, window_days)
    ]


def format_date(value: Any) -> str:
    if not value:
        return "N/A"
    return to_date(value).isoformat()


class ExpiringMembershipsView:
    """Expiring memberships table.

    With ``limit`` set (dashboard widget) the list is truncated and pagination
    is hidden; ``show_view_all`` tells whether more rows exist. Without it the
    full list is paginated client-side.
    """

    def __init__(
        self,
        client: MembershipApiClient,
        limit: Optional[int] = None,
        window_days: int = DASHBOARD_EXPIRING_DAYS,
        page_size: int = PAGE_SIZE_OPTIONS[0],
    ):
        self.client = client
        self.limit = limit
        self.window_days = window_days
        self.students: List[Dict[str, Any]] = []
        self.paginator: Paginator = Paginator(self.students, page_size=page_size)

    async def load(self, today: Optional[date] = None) -> None:
        """Fetch all students and keep those expiring soon."""
        response = await self.client.get_students()
        self.students = filter_expiring(
            response["students"], today or date.today(), self.window_days
        )
        self.paginator = Paginator(self.students, page_size=self.paginator.page_size)

    @property
    def visible(self) -> List[Dict[str, Any]]:
        if self.limit is not None:
            return limited_view(self.students, self.limit).items
        return self.paginator.current

    @property
    def show_pagination(self) -> bool:
        return self.limit is None and bool(self.students)

    @property
    def show_view_all(self) -> bool:
        return self.limit is not None and limited_view(self.students, self.limit).has_more

    def rows(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": s["id"],
                "name": s["name"],
                "phone": s.get("phone"),
                "expiryDate": format_date(s.get("membershipEnd")),
            }
            for s in self.visible
        ]

    def footer(self) -> Optional[str]:
        return self.paginator.summary() if self.show_pagination else None

    def set_page_size(self, page_size: int) -> None:
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"page size must be one of {PAGE_SIZE_OPTIONS}")
        self.paginator.set_page_size(page_size)

    async def delete(self, student_id: int) -> None:
        """Delete through the API, then drop the row locally."""
        await self.client.delete_student(student_id)
        self.students = [s for s in self.students if s["id"] != student_id]
        self.paginator = Paginator(
            self.students, page_size=self.paginator.page_size, page=self.paginator.page
        )
        self.paginator.go_to(self.paginator.page)
        logger.info("Removed student {} from expiring list", student_id)


@dataclass
class StudentForm:
    """Add-student form state."""

    name: str = ""
    email: str = ""
    phone: str = ""
    membership_start: str = ""
    membership_end: str = ""
    shift_id: str = ""

    def errors(self) -> List[str]:
        problems = []
        if not self.phone.strip():
            problems.append("Phone number is required")
        for label, value in (
            ("Name", self.name),
            ("Email", self.email),
            ("Membership start", self.membership_start),
            ("Membership end", self.membership_end),
        ):
            if not value.strip():
                problems.append(f"{label} is required")
        return problems

    def payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "email": self.email.strip(),
            "phone": self.phone.strip(),
            "membership_start": self.membership_start,
            "membership_end": self.membership_end,
            "shift_id": int(self.shift_id) if self.shift_id.strip() else None,
        }

    async def submit(self, client: MembershipApiClient) -> Dict[str, Any]:
        """Validate locally, then create the student; ValueError on local errors."""
        problems = self.errors()
        if problems:
            raise ValueError(problems[0])
        return await client.add_student(self.payload())
