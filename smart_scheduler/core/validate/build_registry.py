from __future__ import annotations

import math
from typing import Any, Optional

from smart_scheduler.core.calendar.dates import DATE_FORMAT, parse_date
from smart_scheduler.core.errors import (
    DependencyError,
    InputShapeError,
    ScheduleError,
    TaskValidationError,
)
from smart_scheduler.core.model import Task, TaskRegistry


def _is_list_of_str(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def _is_positive_number(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return math.isfinite(v) and v > 0


def validate_tasks(
    tasks: Any, *, file: Optional[str] = None
) -> tuple[Optional[TaskRegistry], list[ScheduleError]]:
    """Validate raw task descriptors and build the registry.

    Returns (registry, errors). Registry is None when errors exist. Errors are
    kept in the order they were found: per-task checks first, then
    referential checks over the tasks that passed.
    """

    if not isinstance(tasks, list) or not tasks:
        return None, [
            InputShapeError(
                code="E_NO_TASKS",
                message="tasks is required and must be a non-empty array",
                file=file,
                path="tasks",
            )
        ]

    errors: list[ScheduleError] = []
    tasks_by_title: dict[str, Task] = {}
    index_by_title: dict[str, int] = {}
    seen_titles: set[str] = set()

    for i, raw in enumerate(tasks):
        task_path = f"tasks[{i}]"
        if not isinstance(raw, dict):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="task must be an object",
                    file=file,
                    path=task_path,
                )
            )
            continue

        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append(
                TaskValidationError(
                    code="E_REQUIRED_FIELD",
                    message="title is required and must be a non-empty string",
                    file=file,
                    path=f"{task_path}.title",
                )
            )
            continue

        if title in seen_titles:
            errors.append(
                TaskValidationError(
                    code="E_DUPLICATE_TITLE",
                    message=f"duplicate task title: {title}",
                    file=file,
                    path=f"{task_path}.title",
                )
            )
            continue
        seen_titles.add(title)

        hours = raw.get("estimatedHours")
        if not _is_positive_number(hours):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_HOURS",
                    message=f"estimatedHours must be a positive number (task {title!r})",
                    file=file,
                    path=f"{task_path}.estimatedHours",
                )
            )
            continue

        due = parse_date(raw.get("dueDate"))
        if due is None:
            errors.append(
                TaskValidationError(
                    code="E_INVALID_DATE",
                    message=f"dueDate must be a valid {DATE_FORMAT} date (task {title!r})",
                    file=file,
                    path=f"{task_path}.dueDate",
                )
            )
            continue

        deps = raw.get("dependencies")
        if deps is None:
            deps = []
        if not _is_list_of_str(deps):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message=f"dependencies must be an array of strings (task {title!r})",
                    file=file,
                    path=f"{task_path}.dependencies",
                )
            )
            continue

        index_by_title[title] = i
        tasks_by_title[title] = Task(
            title=title,
            estimated_hours=hours,
            due_date=due,
            dependencies=tuple(dict.fromkeys(deps)),
        )

    # Referential integrity checks.
    for title, task in tasks_by_title.items():
        for di, dep in enumerate(task.dependencies):
            dep_path = f"tasks[{index_by_title[title]}].dependencies[{di}]"
            if dep not in seen_titles:
                errors.append(
                    DependencyError(
                        code="E_UNKNOWN_DEPENDENCY",
                        message=f'task "{title}" depends on unknown task "{dep}"',
                        file=file,
                        path=dep_path,
                    )
                )
            elif dep == title:
                errors.append(
                    DependencyError(
                        code="E_SELF_DEPENDENCY",
                        message=f'task "{title}" depends on itself',
                        file=file,
                        path=dep_path,
                    )
                )

    if errors:
        return None, errors

    dependents: dict[str, list[str]] = {t: [] for t in tasks_by_title}
    indegree: dict[str, int] = {t: 0 for t in tasks_by_title}
    for title, task in tasks_by_title.items():
        for dep in task.dependencies:
            dependents[dep].append(title)
            indegree[title] += 1

    registry = TaskRegistry(
        tasks_by_title=tasks_by_title,
        dependents=dependents,
        indegree=indegree,
    )
    return registry, []


def build_registry(tasks: Any, *, file: Optional[str] = None) -> TaskRegistry:
    """Strict variant of validate_tasks: raises the first error found."""
    registry, errors = validate_tasks(tasks, file=file)
    if errors:
        raise errors[0]
    assert registry is not None
    return registry


def summarize_registry(registry: TaskRegistry, order: list[str]) -> str:
    total_hours = sum(t.estimated_hours for t in registry.tasks_by_title.values())
    edge_count = sum(len(t.dependencies) for t in registry.tasks_by_title.values())
    return (
        f"OK: {len(registry.tasks_by_title)} tasks, {edge_count} dependencies, "
        f"{total_hours:g} hours\nOrder: "
        + ", ".join(order)
    )
