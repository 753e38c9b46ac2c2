from __future__ import annotations

from datetime import date
from typing import Any, Optional

from smart_scheduler.core.allocate.allocate_hours import allocate_hours
from smart_scheduler.core.calendar.config import calendar_config_from_request
from smart_scheduler.core.model import CalendarConfig, ScheduleResult
from smart_scheduler.core.sequence.sequence_tasks import sequence_tasks
from smart_scheduler.core.validate.build_registry import build_registry


def build_schedule(
    tasks: Any,
    config: CalendarConfig,
    *,
    today: Optional[date] = None,
    file: Optional[str] = None,
) -> ScheduleResult:
    """Registry -> sequencer -> allocator.

    Validation and cycle errors are raised before any hours are allocated.
    """
    registry = build_registry(tasks, file=file)
    order = sequence_tasks(registry)
    outcome = allocate_hours(order, registry, config, today=today)
    return ScheduleResult(
        recommended_order=order,
        schedule=outcome.schedule,
        warnings=outcome.warnings,
        finish_dates=outcome.finish_dates,
    )


def schedule_request(request: dict[str, Any], *, today: Optional[date] = None) -> dict[str, Any]:
    """Wire-level entry point.

    Takes {tasks, workHoursPerDay?, workDays?, startDate?} and returns
    {recommendedOrder, schedule, warnings}.
    """
    file = request.get("__file__")
    config = calendar_config_from_request(request, file=file)
    result = build_schedule(request.get("tasks"), config, today=today, file=file)
    return result.to_dict()
