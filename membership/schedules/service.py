"""Business logic for schedules."""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import text
from sqlalchemy.orm import Session

from membership.schedules.models import Schedule
from membership.schedules.schemas import ScheduleCreate, ScheduleUpdate
from membership.students.service import STUDENT_COLUMNS

SCHEDULE_COLUMNS = "id, title, description, created_at"
NOT_FOUND = "Schedule not found"


class ScheduleService:
    """Service class for schedule operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_schedules(self) -> List[Dict[str, Any]]:
        try:
            rows = self.db.execute(
                text(f"SELECT {SCHEDULE_COLUMNS} FROM schedules ORDER BY title, id")
            ).fetchall()
        except Exception as e:
            raise self._store_fault("query", e)
        return [dict(r._mapping) for r in rows]

    def list_with_students(self) -> List[Dict[str, Any]]:
        """Every schedule with the students assigned to it."""
        schedules = self.list_schedules()
        try:
            rows = self.db.execute(
                text(
                    f"""
                    SELECT {STUDENT_COLUMNS}
                    FROM students
                    WHERE shift_id IS NOT NULL
                    ORDER BY name
                    """
                )
            ).fetchall()
        except Exception as e:
            raise self._store_fault("query", e)

        by_shift: Dict[int, List[Dict[str, Any]]] = {}
        for r in rows:
            by_shift.setdefault(r.shift_id, []).append(dict(r._mapping))
        return [{**s, "students": by_shift.get(s["id"], [])} for s in schedules]

    def get_schedule(self, schedule_id: int) -> Optional[Dict[str, Any]]:
        try:
            row = self.db.execute(
                text(f"SELECT {SCHEDULE_COLUMNS} FROM schedules WHERE id = :id"),
                {"id": schedule_id},
            ).fetchone()
        except Exception as e:
            raise self._store_fault("query", e)
        return dict(row._mapping) if row else None

    def _require_schedule(self, schedule_id: int) -> Dict[str, Any]:
        existing = self.get_schedule(schedule_id)
        if not existing:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        return existing

    def create_schedule(self, data: ScheduleCreate) -> Dict[str, Any]:
        schedule = Schedule(title=data.title, description=data.description)
        try:
            self.db.add(schedule)
            self.db.commit()
            self.db.refresh(schedule)
        except Exception as e:
            raise self._store_fault("create", e)

        logger.info("Created schedule id={}", schedule.id)
        return self.get_schedule(schedule.id)

    def update_schedule(self, schedule_id: int, data: ScheduleUpdate) -> Dict[str, Any]:
        """Partial update; omitted fields are kept."""
        existing = self._require_schedule(schedule_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return existing

        assignments = ", ".join(f"{field} = :{field}" for field in changes)
        try:
            self.db.execute(
                text(f"UPDATE schedules SET {assignments} WHERE id = :id"),
                {**changes, "id": schedule_id},
            )
            self.db.commit()
        except Exception as e:
            raise self._store_fault("update", e)

        logger.info("Updated schedule id={}", schedule_id)
        return self.get_schedule(schedule_id)

    def delete_schedule(self, schedule_id: int) -> Dict[str, Any]:
        """Detach the schedule's students, then delete it."""
        snapshot = self._require_schedule(schedule_id)
        try:
            detached = self.db.execute(
                text("UPDATE students SET shift_id = NULL WHERE shift_id = :id"),
                {"id": schedule_id},
            ).rowcount
            self.db.execute(text("DELETE FROM schedules WHERE id = :id"), {"id": schedule_id})
            self.db.commit()
        except Exception as e:
            raise self._store_fault("delete", e)

        logger.info("Deleted schedule id={} ({} students detached)", schedule_id, detached)
        return snapshot

    def _store_fault(self, action: str, error: Exception) -> HTTPException:
        self.db.rollback()
        logger.error("Schedule {} failed: {}", action, error)
        return HTTPException(status_code=500, detail=f"Server error: {error}")
