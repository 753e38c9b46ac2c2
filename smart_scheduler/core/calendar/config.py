from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Optional

from smart_scheduler.core.calendar.dates import WEEKDAY_NAMES, parse_date
from smart_scheduler.core.errors import InputShapeError, RequestLoadError
from smart_scheduler.core.io.read_document import read_document
from smart_scheduler.core.model import CalendarConfig


DEFAULT_HOURS_PER_WORKDAY: float = 8
DEFAULT_WORK_DAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri")

CALENDAR_KEYS: tuple[str, ...] = ("workHoursPerDay", "workDays", "startDate")


def load_calendar_file(path: str | Path) -> dict[str, Any]:
    """Load calendar settings from a YAML (or JSON) file.

    Format:
      workHoursPerDay: 6
      workDays: [Mon, Tue, Wed, Thu]
      startDate: "2024-01-08"

    Every key is optional. Unknown keys are rejected so typos do not pass silently.
    A missing file raises RequestLoadError (E_CALENDAR_FILE_NOT_FOUND); anything
    unreadable or malformed raises InputShapeError (E_INVALID_CONFIG).
    """
    p = Path(path)
    try:
        raw = read_document(p)
    except RequestLoadError as e:
        if e.code == "E_FILE_NOT_FOUND":
            raise RequestLoadError(
                code="E_CALENDAR_FILE_NOT_FOUND",
                message=f"calendar file not found: {p}",
                file=str(p),
            ) from e
        raise InputShapeError(code="E_INVALID_CONFIG", message=e.message, file=str(p)) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InputShapeError(
            code="E_INVALID_CONFIG",
            message="calendar file must be a mapping",
            file=str(p),
        )
    unknown = sorted(str(k) for k in raw.keys() if k not in CALENDAR_KEYS)
    if unknown:
        raise InputShapeError(
            code="E_INVALID_CONFIG",
            message=f"unknown calendar keys: {unknown} (allowed: {list(CALENDAR_KEYS)})",
            file=str(p),
        )
    return dict(raw)


def merged_calendar(*layers: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Merge calendar layers left to right; later non-None values win."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for k in CALENDAR_KEYS:
            if layer.get(k) is not None:
                merged[k] = layer[k]
    return merged


def calendar_config_from_request(request: dict[str, Any], *, file: Optional[str] = None) -> CalendarConfig:
    """Build a CalendarConfig from wire fields, applying defaults for missing ones."""

    hours = request.get("workHoursPerDay")
    if hours is None:
        hours = DEFAULT_HOURS_PER_WORKDAY
    if (
        isinstance(hours, bool)
        or not isinstance(hours, (int, float))
        or not math.isfinite(hours)
        or hours <= 0
    ):
        raise InputShapeError(
            code="E_INVALID_CONFIG",
            message="workHoursPerDay must be a positive number",
            file=file,
            path="workHoursPerDay",
        )

    work_days = request.get("workDays")
    if work_days is None:
        work_days = list(DEFAULT_WORK_DAYS)
    if not isinstance(work_days, (list, tuple, set, frozenset)) or not work_days:
        raise InputShapeError(
            code="E_INVALID_CONFIG",
            message="workDays must be a non-empty list of weekday names",
            file=file,
            path="workDays",
        )
    for i, name in enumerate(work_days):
        if name not in WEEKDAY_NAMES:
            raise InputShapeError(
                code="E_INVALID_CONFIG",
                message=f"unknown weekday name: {name!r} (choose from: {', '.join(WEEKDAY_NAMES)})",
                file=file,
                path=f"workDays[{i}]",
            )

    start_raw = request.get("startDate")
    start_date = None
    if start_raw is not None:
        start_date = parse_date(start_raw)
        if start_date is None:
            raise InputShapeError(
                code="E_INVALID_CONFIG",
                message=f"startDate must be a date in YYYY-MM-DD format, got {start_raw!r}",
                file=file,
                path="startDate",
            )

    return CalendarConfig(
        hours_per_workday=hours,
        work_days=frozenset(work_days),
        start_date=start_date,
    )
