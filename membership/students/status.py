"""Membership status derivation.

A membership covers the half-open window ``[membership_start, membership_end)``:
on the end day itself it is already over. The stored ``status`` column is only
changed by writes (create, renew, explicit update); everything here is a
read-side view and is never persisted.
"""
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union

DateLike = Union[date, datetime, str]


class MembershipStatus(str, Enum):
    """Stored membership status."""

    active = "active"
    expired = "expired"


class DerivedStatus(str, Enum):
    """Status classes computed for display."""

    active = "active"
    expiring_soon = "expiring_soon"
    expired = "expired"


def to_date(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def expiry_threshold(today: date, window_days: int) -> date:
    return today + timedelta(days=window_days)


def effective_status(membership_end: DateLike, stored_status: str, today: date) -> str:
    """Stored status, overridden to expired once the end date is reached."""
    if to_date(membership_end) <= today:
        return MembershipStatus.expired.value
    return stored_status


def is_expiring_soon(
    membership_end: DateLike, stored_status: str, today: date, window_days: int
) -> bool:
    """Active and ending within ``window_days`` after ``today`` (exclusive of today)."""
    if stored_status != MembershipStatus.active.value:
        return False
    end = to_date(membership_end)
    return today < end <= expiry_threshold(today, window_days)


def derive_status(
    membership_end: DateLike, stored_status: str, today: date, window_days: int
) -> DerivedStatus:
    """Classify a membership as active, expiring soon or expired."""
    if effective_status(membership_end, stored_status, today) == MembershipStatus.expired.value:
        return DerivedStatus.expired
    if is_expiring_soon(membership_end, stored_status, today, window_days):
        return DerivedStatus.expiring_soon
    return DerivedStatus.active
