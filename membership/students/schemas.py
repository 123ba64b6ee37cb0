"""Pydantic schemas for students."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from membership.students.status import MembershipStatus

MISSING_FIELDS = "Missing required fields"
END_BEFORE_START = "Membership end date must not be before start date"


def _blank_to_none(v):
    # forms submit "" for "no shift selected"
    if isinstance(v, str) and not v.strip():
        return None
    return v


class StudentCreate(BaseModel):
    """Schema for creating a student."""

    name: str = Field(..., max_length=100, description="Full name")
    email: str = Field(..., max_length=255, description="Unique email address")
    phone: str = Field(..., max_length=50, description="Phone number")
    membership_start: date
    membership_end: date
    shift_id: Optional[int] = Field(None, description="Schedule the student attends")

    @field_validator("name", "email")
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError(MISSING_FIELDS)
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if not v.strip():
            raise ValueError("Phone number must be a non-empty string")
        return v.strip()

    @field_validator("shift_id", mode="before")
    @classmethod
    def validate_shift_id(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def validate_window(self):
        if self.membership_end < self.membership_start:
            raise ValueError(END_BEFORE_START)
        return self


class StudentUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    membership_start: Optional[date] = None
    membership_end: Optional[date] = None
    shift_id: Optional[int] = None
    status: Optional[MembershipStatus] = None

    @field_validator("name", "email")
    @classmethod
    def validate_text(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name and email cannot be blank")
        return v.strip() if v else v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Phone number must be a non-empty string if provided")
        return v.strip() if v else v

    @field_validator("shift_id", mode="before")
    @classmethod
    def validate_shift_id(cls, v):
        return _blank_to_none(v)


class RenewRequest(BaseModel):
    """New membership window for a renewal."""

    membership_start: Optional[date] = None
    membership_end: Optional[date] = None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.membership_start is None or self.membership_end is None:
            raise ValueError("Membership start and end dates are required")
        if self.membership_end < self.membership_start:
            raise ValueError(END_BEFORE_START)
        return self


class StudentResponse(BaseModel):
    """Schema for student response."""

    id: int
    name: str
    email: str
    phone: str
    membership_start: date
    membership_end: date
    shift_id: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentDetailResponse(StudentResponse):
    """Student with the joined schedule title and description."""

    shift_title: Optional[str] = None
    shift_description: Optional[str] = None


class StudentListResponse(BaseModel):
    students: List[StudentResponse]


class StudentActionResponse(BaseModel):
    """Outcome message plus the affected record."""

    message: str
    student: StudentResponse


class DashboardStatsResponse(BaseModel):
    """Counts on stored status; serialized with camelCase keys."""

    total_students: int
    active_students: int
    expired_memberships: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
