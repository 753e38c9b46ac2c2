from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class Task:
    title: str
    estimated_hours: float
    due_date: date
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskRegistry:
    tasks_by_title: dict[str, Task]
    dependents: dict[str, list[str]]  # dependency title -> dependent titles
    indegree: dict[str, int]


@dataclass(frozen=True)
class CalendarConfig:
    hours_per_workday: float
    work_days: frozenset[str]
    start_date: Optional[date] = None


@dataclass(frozen=True)
class Allocation:
    title: str
    hours: float


@dataclass
class DayRecord:
    day: date
    allocations: list[Allocation] = field(default_factory=list)


@dataclass(frozen=True)
class ScheduleResult:
    recommended_order: list[str]
    schedule: list[DayRecord]
    warnings: list[str]
    finish_dates: dict[str, date]

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: camelCase keys, dates as YYYY-MM-DD. Finish dates stay internal."""
        return {
            "recommendedOrder": list(self.recommended_order),
            "schedule": [
                {
                    "date": rec.day.isoformat(),
                    "allocations": [{"title": a.title, "hours": a.hours} for a in rec.allocations],
                }
                for rec in self.schedule
            ],
            "warnings": list(self.warnings),
        }
