"""Calendar primitives used by the scheduler.

Dates are naive calendar days. The only accepted text form is YYYY-MM-DD;
`date.fromisoformat` alone is too lenient on newer interpreters (it accepts
e.g. 20240108), so the shape is checked first.
"""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import AbstractSet, Any, Optional


DATE_FORMAT = "YYYY-MM-DD"

# Index matches date.weekday(): Monday == 0.
WEEKDAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: Any) -> Optional[date]:
    """Strictly parse YYYY-MM-DD. Returns None for anything else."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.isoformat()


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def weekday_name(d: date) -> str:
    return WEEKDAY_NAMES[d.weekday()]


def next_workday(d: date, work_days: AbstractSet[str]) -> date:
    """First workday on or after `d`."""
    if not any(name in work_days for name in WEEKDAY_NAMES):
        raise ValueError("work_days must contain at least one weekday name")
    while weekday_name(d) not in work_days:
        d = add_days(d, 1)
    return d
