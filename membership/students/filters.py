"""Composable WHERE clauses for student queries.

Each predicate carries its own SQL fragment and the named parameters it binds,
so clauses can be added or dropped independently and combined with AND.
"""
from datetime import date
from typing import Any, Dict, NamedTuple, Optional

from membership.students.status import expiry_threshold

STATUS_ALL = "all"
# ids outside a signed 64-bit integer cannot exist in any supported store
MAX_ID = 2 ** 63 - 1
LIKE_ESCAPE = "\\"


class Predicate(NamedTuple):
    sql: str
    params: Dict[str, Any]


def and_all(*predicates: Optional[Predicate]) -> Predicate:
    """Join the given predicates with AND; ``None`` entries are skipped."""
    parts = [p for p in predicates if p is not None]
    if not parts:
        return Predicate("1=1", {})

    params: Dict[str, Any] = {}
    for p in parts:
        clash = params.keys() & p.params.keys()
        if clash:
            raise ValueError(f"Duplicate bind parameter(s): {', '.join(sorted(clash))}")
        params.update(p.params)
    return Predicate(" AND ".join(f"({p.sql})" for p in parts), params)


def parse_shift_id(raw: Any) -> Optional[int]:
    """Integer shift id, or None when the raw value is not one."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not -MAX_ID <= value <= MAX_ID:
        return None
    return value


def shift_equals(shift_id: int) -> Predicate:
    return Predicate("shift_id = :shift_id", {"shift_id": shift_id})


def escape_like(term: str) -> str:
    """Make ``%`` and ``_`` match themselves in a LIKE pattern."""
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return term


def search_name_or_phone(search: Optional[str]) -> Optional[Predicate]:
    """Case-insensitive contains on name or phone; the text is matched literally."""
    if search is None or not search.strip():
        return None
    return Predicate(
        f"LOWER(name) LIKE LOWER(:search) ESCAPE '{LIKE_ESCAPE}' "
        f"OR LOWER(phone) LIKE LOWER(:search) ESCAPE '{LIKE_ESCAPE}'",
        {"search": f"%{escape_like(search.strip())}%"},
    )


def status_equals(status: Optional[str]) -> Optional[Predicate]:
    """Stored status filter; the ``all`` sentinel disables it."""
    if not status or status == STATUS_ALL:
        return None
    return Predicate("status = :status", {"status": status})


def expiring_within(today: date, window_days: int) -> Predicate:
    """Active memberships ending after today and on/before today + window."""
    return Predicate(
        "status = 'active' AND membership_end > :today AND membership_end <= :threshold",
        {"today": today, "threshold": expiry_threshold(today, window_days)},
    )
