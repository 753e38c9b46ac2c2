"""Greedy calendar allocation.

Tasks are walked strictly in sequenced order. A single cursor (date + free
hours left on it) only ever moves forward, so a task may share a day with
the task before it when that one finished early. A dependent may start on
the same day its last dependency finishes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from smart_scheduler.core.calendar.dates import add_days, format_date, next_workday
from smart_scheduler.core.model import Allocation, CalendarConfig, DayRecord, TaskRegistry


logger = logging.getLogger("smart_scheduler.allocate")

# Hours are kept to this many decimals so float residues never become an extra slice.
HOURS_PRECISION = 9


@dataclass
class AllocationOutcome:
    schedule: list[DayRecord]
    warnings: list[str]
    finish_dates: dict[str, date]


class _Cursor:
    def __init__(self, start: date, config: CalendarConfig) -> None:
        self.config = config
        self.day = next_workday(start, config.work_days)
        self.free_hours = config.hours_per_workday

    def advance(self) -> None:
        self.day = next_workday(add_days(self.day, 1), self.config.work_days)
        self.free_hours = self.config.hours_per_workday

    def jump_to(self, d: date) -> None:
        self.day = next_workday(d, self.config.work_days)
        self.free_hours = self.config.hours_per_workday


def overdue_warning(title: str, due: date, current: date) -> str:
    return (
        f'Task "{title}" cannot be finished before its dueDate {format_date(due)}. '
        f"Earliest possible finish will be after {format_date(current)}."
    )


def allocate_hours(
    order: list[str],
    registry: TaskRegistry,
    config: CalendarConfig,
    *,
    today: Optional[date] = None,
) -> AllocationOutcome:
    """Spread each task's hours over workdays, in `order`.

    The simulation starts on the first workday on/after config.start_date
    (or `today`, defaulting to the current date).
    """

    start = config.start_date or today or date.today()
    cursor = _Cursor(start, config)

    days: dict[date, DayRecord] = {}
    warnings: list[str] = []
    finish_dates: dict[str, date] = {}

    for title in order:
        task = registry.tasks_by_title[title]

        dep_finishes = [finish_dates[d] for d in task.dependencies]
        earliest_ready = max(dep_finishes) if dep_finishes else None
        if earliest_ready is not None and earliest_ready > cursor.day:
            cursor.jump_to(earliest_ready)

        remaining = task.estimated_hours
        last_day = cursor.day
        while remaining > 0:
            if cursor.day > task.due_date:
                logger.warning(
                    "overdue task=%s due=%s day=%s remaining=%g",
                    title, task.due_date, cursor.day, remaining,
                )
                warnings.append(overdue_warning(title, task.due_date, cursor.day))

            if cursor.free_hours <= 0:
                cursor.advance()
                continue

            hours = min(cursor.free_hours, remaining)
            record = days.get(cursor.day)
            if record is None:
                record = days[cursor.day] = DayRecord(day=cursor.day)
            record.allocations.append(Allocation(title=title, hours=hours))
            last_day = cursor.day
            remaining = round(remaining - hours, HOURS_PRECISION)
            cursor.free_hours = round(cursor.free_hours - hours, HOURS_PRECISION)

            if remaining > 0:
                cursor.advance()

        finish_dates[title] = last_day

    schedule = sorted(days.values(), key=lambda r: r.day)
    logger.info(
        "allocated %d tasks over %d days (%d warnings)", len(order), len(schedule), len(warnings)
    )
    return AllocationOutcome(schedule=schedule, warnings=warnings, finish_dates=finish_dates)
