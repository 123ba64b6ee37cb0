"""Pydantic schemas for schedules."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from membership.students.schemas import StudentResponse


class ScheduleCreate(BaseModel):
    """Schema for creating a schedule."""

    title: str = Field(..., max_length=100, description="Shift title, e.g. 'Morning'")
    description: Optional[str] = Field(None, description="Time slot or notes")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class ScheduleUpdate(BaseModel):
    """Partial update for a schedule."""

    title: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be blank")
        return v.strip() if v else v


class ScheduleResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduleWithStudentsResponse(ScheduleResponse):
    students: List[StudentResponse]


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleResponse]


class ScheduleWithStudentsListResponse(BaseModel):
    schedules: List[ScheduleWithStudentsResponse]


class ScheduleActionResponse(BaseModel):
    message: str
    schedule: ScheduleResponse
