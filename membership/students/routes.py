"""FastAPI routes for students."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from membership.auth import require_admin, require_admin_or_staff
from membership.db import get_db
from membership.students.schemas import (
    DashboardStatsResponse,
    RenewRequest,
    StudentActionResponse,
    StudentCreate,
    StudentDetailResponse,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from membership.students.service import NOT_FOUND, StudentService
from membership.students.status import MembershipStatus


router = APIRouter(prefix="/students", tags=["students"])


# Fixed paths go BEFORE "/{student_id}" so they are not captured by it
@router.get("", response_model=StudentListResponse)
async def get_students(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """List all students ordered by name."""
    return StudentListResponse(students=StudentService(db).list_all())


@router.get("/active", response_model=StudentListResponse)
async def get_active_students(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    service = StudentService(db)
    return StudentListResponse(students=service.list_by_status(MembershipStatus.active))


@router.get("/expired", response_model=StudentListResponse)
async def get_expired_students(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    service = StudentService(db)
    return StudentListResponse(students=service.list_by_status(MembershipStatus.expired))


@router.get("/expiring-soon", response_model=StudentListResponse)
async def get_expiring_soon(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Active memberships ending within the configured lookahead window."""
    return StudentListResponse(students=StudentService(db).list_expiring_soon())


@router.get("/stats/dashboard", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """Total, active and expired counts."""
    return StudentService(db).get_dashboard_stats()


@router.get("/shift/{shift_id}", response_model=StudentListResponse)
async def get_students_by_shift(
    shift_id: str,
    search: Optional[str] = Query(None, description="Name or phone contains"),
    status: Optional[str] = Query(None, description="active, expired or all"),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Students of a shift filtered by search text and status."""
    service = StudentService(db)
    return StudentListResponse(
        students=service.list_by_shift(shift_id, search=search, status=status)
    )


@router.get("/{student_id}", response_model=StudentDetailResponse)
async def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Get one student with its shift title and description."""
    student = StudentService(db).get_student_detail(student_id)
    if not student:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return student


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    student_data: StudentCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    return StudentService(db).create_student(student_data)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Partially update a student."""
    return StudentService(db).update_student(student_id, student_data)


@router.delete("/{student_id}", response_model=StudentActionResponse)
async def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Delete a student and return the removed record."""
    student = StudentService(db).delete_student(student_id)
    return StudentActionResponse(message="Student deleted successfully", student=student)


@router.post("/{student_id}/renew", response_model=StudentActionResponse)
async def renew_membership(
    student_id: int,
    renewal: RenewRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """Renew a membership; the status becomes active again."""
    student = StudentService(db).renew_membership(student_id, renewal)
    return StudentActionResponse(message="Membership renewed successfully", student=student)
