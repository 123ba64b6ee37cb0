"""FastAPI routes for schedules."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from membership.auth import require_admin, require_admin_or_staff
from membership.db import get_db
from membership.schedules.schemas import (
    ScheduleActionResponse,
    ScheduleCreate,
    ScheduleListResponse,
    ScheduleResponse,
    ScheduleUpdate,
    ScheduleWithStudentsListResponse,
)
from membership.schedules.service import NOT_FOUND, ScheduleService

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("", response_model=ScheduleListResponse)
async def get_schedules(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    return ScheduleListResponse(schedules=ScheduleService(db).list_schedules())


@router.get("/with-students", response_model=ScheduleWithStudentsListResponse)
async def get_schedules_with_students(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    """Schedules with their assigned students."""
    service = ScheduleService(db)
    return ScheduleWithStudentsListResponse(schedules=service.list_with_students())


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin_or_staff),
):
    schedule = ScheduleService(db).get_schedule(schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return schedule


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    return ScheduleService(db).create_schedule(data)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    return ScheduleService(db).update_schedule(schedule_id, data)


@router.delete("/{schedule_id}", response_model=ScheduleActionResponse)
async def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """Delete a schedule; its students keep existing without a shift."""
    schedule = ScheduleService(db).delete_schedule(schedule_id)
    return ScheduleActionResponse(message="Schedule deleted successfully", schedule=schedule)
