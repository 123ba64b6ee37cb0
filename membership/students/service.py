"""Business logic for students."""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import Date, bindparam, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from membership.metrics import MEMBERSHIP_RENEWALS, STUDENT_WRITES
from membership.settings import settings
from membership.students import filters
from membership.students.filters import Predicate
from membership.students.schemas import (
    END_BEFORE_START,
    RenewRequest,
    StudentCreate,
    StudentUpdate,
)
from membership.students.status import MembershipStatus, to_date

STUDENT_COLUMNS = (
    "id, name, email, phone, membership_start, membership_end, "
    "shift_id, status, created_at"
)
DATE_PARAMS = ("membership_start", "membership_end", "today", "threshold")
NOT_FOUND = "Student not found"
EMAIL_IN_USE = "Email already in use"
EMAIL_IN_USE_BY_OTHER = "Email already in use by another student"
INVALID_SHIFT = "Invalid shift ID"


def sql(query: str, params: Dict[str, Any]):
    """text() with date parameters bound as Date so every driver stores ISO dates."""
    return text(query).bindparams(
        *(bindparam(name, type_=Date) for name in DATE_PARAMS if name in params)
    )


def constraint_detail(error: IntegrityError, email_detail: str) -> Optional[str]:
    """Client message for a constraint the store rejected, or None if unrecognised."""
    reason = str(error.orig).lower()
    if "foreign key" in reason:
        return INVALID_SHIFT
    if "email" in reason:
        return email_detail
    return None


class StudentService:
    """Service class for student operations."""

    def __init__(self, db: Session):
        self.db = db

    # ---------- reads ----------

    def _select(self, where: Predicate, order_by: str = "name") -> List[Dict[str, Any]]:
        query = f"""
            SELECT {STUDENT_COLUMNS}
            FROM students
            WHERE {where.sql}
            ORDER BY {order_by}
        """
        try:
            rows = self.db.execute(sql(query, where.params), where.params).fetchall()
        except Exception as e:
            raise self._store_fault("query", e)
        return [dict(r._mapping) for r in rows]

    def list_all(self) -> List[Dict[str, Any]]:
        """All students ordered by name."""
        return self._select(filters.and_all())

    def list_by_status(self, status: MembershipStatus) -> List[Dict[str, Any]]:
        """Students whose stored status equals ``status``."""
        return self._select(filters.status_equals(MembershipStatus(status).value))

    def list_expiring_soon(
        self, today: Optional[date] = None, window_days: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Active memberships ending within the lookahead window, soonest first."""
        where = filters.expiring_within(
            today or date.today(),
            settings.expiring_soon_days if window_days is None else window_days,
        )
        return self._select(where, order_by="membership_end, name")

    def list_by_shift(
        self, shift_id: Any, search: Optional[str] = None, status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Students of one shift, optionally narrowed by search text and status."""
        parsed = filters.parse_shift_id(shift_id)
        if parsed is None:
            return []
        where = filters.and_all(
            filters.shift_equals(parsed),
            filters.search_name_or_phone(search),
            filters.status_equals(status),
        )
        return self._select(where)

    def get_student_by_id(self, student_id: int) -> Optional[Dict[str, Any]]:
        """Get student by ID."""
        rows = self._select(Predicate("id = :id", {"id": student_id}))
        return rows[0] if rows else None

    def get_student_detail(self, student_id: int) -> Optional[Dict[str, Any]]:
        """Student joined with its schedule title and description."""
        try:
            row = self.db.execute(
                text(
                    """
                    SELECT s.id, s.name, s.email, s.phone, s.membership_start,
                           s.membership_end, s.shift_id, s.status, s.created_at,
                           sch.title AS shift_title,
                           sch.description AS shift_description
                    FROM students s
                    LEFT JOIN schedules sch ON s.shift_id = sch.id
                    WHERE s.id = :id
                    """
                ),
                {"id": student_id},
            ).fetchone()
        except Exception as e:
            raise self._store_fault("query", e)
        return dict(row._mapping) if row else None

    def get_dashboard_stats(self) -> Dict[str, int]:
        """Counts on the stored status column."""
        try:
            row = self.db.execute(
                text(
                    """
                    SELECT
                        COUNT(*) AS total_students,
                        COUNT(CASE WHEN status = 'active' THEN 1 END) AS active_students,
                        COUNT(CASE WHEN status = 'expired' THEN 1 END) AS expired_memberships
                    FROM students
                    """
                )
            ).fetchone()
        except Exception as e:
            raise self._store_fault("dashboard stats", e)

        return {
            "total_students": row.total_students or 0,
            "active_students": row.active_students or 0,
            "expired_memberships": row.expired_memberships or 0,
        }

    # ---------- checks ----------

    def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        where = filters.and_all(
            Predicate("email = :email", {"email": email}),
            Predicate("id != :exclude_id", {"exclude_id": exclude_id})
            if exclude_id is not None
            else None,
        )
        return bool(self._select(where))

    def _require_shift(self, shift_id: Optional[int]) -> None:
        if shift_id is None:
            return
        try:
            found = self.db.execute(
                text("SELECT id FROM schedules WHERE id = :id"), {"id": shift_id}
            ).fetchone()
        except Exception as e:
            raise self._store_fault("shift lookup", e)
        if not found:
            raise HTTPException(status_code=400, detail=INVALID_SHIFT)

    def _require_student(self, student_id: int) -> Dict[str, Any]:
        existing = self.get_student_by_id(student_id)
        if not existing:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return existing

    # ---------- writes ----------

    def create_student(self, student_data: StudentCreate) -> Dict[str, Any]:
        """Create a new student; status always starts as active."""
        if self._email_taken(student_data.email):
            raise HTTPException(status_code=400, detail=EMAIL_IN_USE)
        self._require_shift(student_data.shift_id)

        params = {
            "name": student_data.name,
            "email": student_data.email,
            "phone": student_data.phone,
            "membership_start": student_data.membership_start,
            "membership_end": student_data.membership_end,
            "shift_id": student_data.shift_id,
            "status": MembershipStatus.active.value,
        }
        try:
            self.db.execute(
                sql(
                    """
                    INSERT INTO students
                        (name, email, phone, membership_start, membership_end, shift_id, status)
                    VALUES
                        (:name, :email, :phone, :membership_start, :membership_end, :shift_id, :status)
                    """,
                    params,
                ),
                params,
            )
            self.db.commit()
        except IntegrityError as e:
            # lost a race against a concurrent insert or schedule delete
            raise self._constraint_fault("create", e, EMAIL_IN_USE)
        except Exception as e:
            raise self._store_fault("create", e)

        created = self._select(Predicate("email = :email", {"email": student_data.email}))[0]
        STUDENT_WRITES.labels(operation="create").inc()
        logger.info("Created student id={}", created["id"])
        return created

    def update_student(self, student_id: int, student_data: StudentUpdate) -> Dict[str, Any]:
        """Merge the provided fields into the stored record."""
        existing = self._require_student(student_id)
        changes = student_data.model_dump(exclude_none=True)

        if "email" in changes and self._email_taken(changes["email"], exclude_id=student_id):
            raise HTTPException(status_code=400, detail=EMAIL_IN_USE_BY_OTHER)
        self._require_shift(changes.get("shift_id"))

        start = changes.get("membership_start", existing["membership_start"])
        end = changes.get("membership_end", existing["membership_end"])
        if to_date(end) < to_date(start):
            raise HTTPException(status_code=400, detail=END_BEFORE_START)

        if not changes:
            return existing

        if "status" in changes:
            changes["status"] = MembershipStatus(changes["status"]).value
        assignments = ", ".join(f"{field} = :{field}" for field in changes)
        try:
            self.db.execute(
                sql(f"UPDATE students SET {assignments} WHERE id = :id", changes),
                {**changes, "id": student_id},
            )
            self.db.commit()
        except IntegrityError as e:
            raise self._constraint_fault("update", e, EMAIL_IN_USE_BY_OTHER)
        except Exception as e:
            raise self._store_fault("update", e)

        STUDENT_WRITES.labels(operation="update").inc()
        logger.info("Updated student id={} fields={}", student_id, sorted(changes))
        return self.get_student_by_id(student_id)

    def delete_student(self, student_id: int) -> Dict[str, Any]:
        """Delete a student and return the record as it was before removal."""
        snapshot = self._require_student(student_id)
        try:
            self.db.execute(text("DELETE FROM students WHERE id = :id"), {"id": student_id})
            self.db.commit()
        except Exception as e:
            raise self._store_fault("delete", e)

        STUDENT_WRITES.labels(operation="delete").inc()
        logger.info("Deleted student id={}", student_id)
        return snapshot

    def renew_membership(self, student_id: int, renewal: RenewRequest) -> Dict[str, Any]:
        """Reset the membership window and force the status back to active."""
        self._require_student(student_id)
        params = {
            "membership_start": renewal.membership_start,
            "membership_end": renewal.membership_end,
            "status": MembershipStatus.active.value,
            "id": student_id,
        }
        try:
            self.db.execute(
                sql(
                    """
                    UPDATE students
                    SET membership_start = :membership_start,
                        membership_end = :membership_end,
                        status = :status
                    WHERE id = :id
                    """,
                    params,
                ),
                params,
            )
            self.db.commit()
        except Exception as e:
            raise self._store_fault("renew", e)

        STUDENT_WRITES.labels(operation="renew").inc()
        MEMBERSHIP_RENEWALS.inc()
        logger.info("Renewed student id={} until {}", student_id, renewal.membership_end)
        return self.get_student_by_id(student_id)

    def _constraint_fault(
        self, action: str, error: IntegrityError, email_detail: str
    ) -> HTTPException:
        detail = constraint_detail(error, email_detail)
        if detail is None:
            return self._store_fault(action, error)
        self.db.rollback()
        logger.info("Student {} rejected by store constraint: {}", action, detail)
        return HTTPException(status_code=400, detail=detail)

    def _store_fault(self, action: str, error: Exception) -> HTTPException:
        self.db.rollback()
        logger.error("Student {} failed: {}", action, error)
        return HTTPException(status_code=500, detail=f"Server error: {error}")
